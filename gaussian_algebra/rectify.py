##################################################################################################
# This file is part of the Gaussian Algebra.                                                     #
#                                                                                                #
# It contains the rectification (clamping) of Gaussian values.                                   #
##################################################################################################

__all__ = ["rectify", "rectify_lower", "rectify_upper"]

from jax import numpy as jnp

from .exceptions import InvalidBounds
from .utils.special import mills_ratio, normal_cdf, normal_sf
from .utils.symmetry import mirror
from .value import GaussianValue


def _check_limit(bound: float, open_limit: float) -> float:
    """A finite bound, or ``open_limit`` for no clamp on that side."""
    bound = float(bound)
    if bound != open_limit and not jnp.isfinite(bound):
        raise InvalidBounds("Clamp bound must be finite or %s, got %s." % (open_limit, bound))
    return bound


def rectify_lower(x: GaussianValue, lower: float) -> GaussianValue:
    r"""Moment matched :math:`Y = \max(X, l)`.

    With the standardized bound :math:`c = (l - \mu)/\sigma`, the tail mass :math:`Q = 1 - \Phi(c)`
    and :math:`\delta = \lambda(c) - c`, where :math:`\lambda` is the inverse Mills ratio,

    .. math::

        \mathbb{E}[Y] = l + \sigma Q\delta,\quad
        {\rm Var}[Y] = \sigma^2 Q\left(1 - \lambda(c)\delta + \Phi(c)\delta^2\right).

    That is the mixture of a point mass at :math:`l` and the truncated normal above it.

    Args:
        x: The variable.
        lower: The bound, ``-inf`` leaves ``x`` unchanged.

    Raises:
        InvalidBounds: If the bound is ``nan`` or ``+inf``.

    Returns:
        The rectified variable.
    """
    lower = _check_limit(lower, -jnp.inf)
    if lower == -jnp.inf:
        return x
    c = (lower - x.mean) / x.std
    tail = normal_sf(c)
    ratio = mills_ratio(c)
    gap = ratio - c
    mean = lower + x.std * tail * gap
    variance = x.variance * tail * (1.0 - ratio * gap + normal_cdf(c) * gap**2)
    return GaussianValue.from_moments(mean, variance)


def rectify_upper(x: GaussianValue, upper: float) -> GaussianValue:
    """Moment matched :math:`\\min(X, u) = -\\max(-X, -u)`, ``+inf`` leaves ``x`` unchanged."""
    return mirror(rectify_lower, x, _check_limit(upper, jnp.inf))


def rectify(x: GaussianValue, lower: float, upper: float) -> GaussianValue:
    """Moment matched :math:`{\\rm clamp}(X, l, u)`, the lower bound is applied first.

    The second clamp acts on the moment matched Gaussian of the first one, so the result is an
    approximation that is coarse when both bounds bind. For :math:`X \\sim N(0, 1)` clamped to
    :math:`[-0.5, 0.5]` the variance is 0.284, the true one is 0.185.
    """
    return rectify_upper(rectify_lower(x, lower), upper)
