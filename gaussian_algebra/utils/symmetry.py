__all__ = ["mirror"]
from typing import Any, Callable


def mirror(operation: Callable[..., Any], x: Any, *bounds: Any) -> Any:
    r"""Apply an operation in the mirrored frame :math:`X \mapsto -X`.

    .. math::

        {\rm mirror}(f, X, b_1, \ldots) = -f(-X, -b_1, \ldots)

    E.g. conditioning :math:`X \leq u` is conditioning :math:`-X \geq -u` with the sign flipped back.
    The negation leaves the variance untouched, so upper-bound operations inherit the lower-bound
    closed forms exactly.

    Args:
        operation: Operation taking the variable followed by its bounds.
        x: The variable.
        bounds: Bounds in the order ``operation`` expects them, in the original frame.

    Returns:
        The result of the operation, in the original frame.
    """
    return -operation(-x, *[-bound for bound in bounds])
