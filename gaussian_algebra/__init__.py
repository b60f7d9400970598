import jax

# Tail probabilities are evaluated in double precision.
jax.config.update("jax_enable_x64", True)

from .exceptions import GaussianAlgebraError, InvalidParameter, DomainError, InvalidBounds
from .value import GaussianValue
from . import arithmetic, rectify, truncate

__all__ = [
    "GaussianValue",
    "GaussianAlgebraError",
    "InvalidParameter",
    "DomainError",
    "InvalidBounds",
    "arithmetic",
    "rectify",
    "truncate",
]
