__all__ = [
    "normal_pdf",
    "normal_logpdf",
    "normal_cdf",
    "normal_sf",
    "log_normal_cdf",
    "mills_ratio",
    "log_interval_probability",
]
from jax import numpy as jnp
from jax.scipy.special import ndtr, log_ndtr
from jax.scipy.stats import norm
from jaxtyping import Array, Float
from typing import Union

Scalar = Union[float, Float[Array, ""]]


def normal_pdf(x: Scalar) -> Float[Array, ""]:
    return norm.pdf(x)


def normal_logpdf(x: Scalar) -> Float[Array, ""]:
    return norm.logpdf(x)


def normal_cdf(x: Scalar) -> Float[Array, ""]:
    return ndtr(x)


def normal_sf(x: Scalar) -> Float[Array, ""]:
    r"""Upper tail probability :math:`1 - \Phi(x)`, accurate for large ``x``."""
    return ndtr(-x)


def log_normal_cdf(x: Scalar) -> Float[Array, ""]:
    return log_ndtr(x)


def mills_ratio(c: Scalar) -> Float[Array, ""]:
    r"""Inverse Mills ratio of the standard normal distribution.

    .. math::

        \lambda(c) = \frac{\phi(c)}{1 - \Phi(c)}

    This is the mean of :math:`Z\vert Z \geq c`. Evaluated in log space, so that it stays finite far
    in the upper tail where both numerator and denominator underflow.

    Args:
        c: Standardized bound.

    Returns:
        The ratio.
    """
    return jnp.exp(normal_logpdf(c) - log_normal_cdf(-c))


def log_interval_probability(a: Scalar, b: Scalar) -> Float[Array, ""]:
    r"""Compute :math:`\log(\Phi(b) - \Phi(a))` for :math:`a < b`.

    The difference is formed relative to :math:`\Phi(b)`, which is accurate as long as the
    interval does not lie in the upper tail, i.e. :math:`a + b \leq 0`. Mirror the interval
    otherwise.

    Args:
        a: Standardized lower limit.
        b: Standardized upper limit.

    Returns:
        Log probability mass of the interval.
    """
    log_cdf_b = log_normal_cdf(b)
    return log_cdf_b + jnp.log1p(-jnp.exp(log_normal_cdf(a) - log_cdf_b))
