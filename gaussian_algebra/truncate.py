##################################################################################################
# This file is part of the Gaussian Algebra.                                                     #
#                                                                                                #
# It contains the truncation (conditioning on bounds) of Gaussian values.                        #
##################################################################################################

__all__ = ["truncate", "truncate_lower", "truncate_upper"]

import logging
from typing import Tuple, Union

from jax import numpy as jnp

from .constants import SIMILAR_BOUND_SPREAD, WELL_SEPARATED_BOUNDS
from .exceptions import InvalidBounds
from .utils.special import log_interval_probability, mills_ratio, normal_logpdf
from .utils.symmetry import mirror
from .value import GaussianValue

logger = logging.getLogger(__name__)

Bound = Union[float, GaussianValue]


def _bound_moments(bound: Bound) -> Tuple[float, float]:
    """Mean and variance of a bound, constants have zero variance."""
    if isinstance(bound, GaussianValue):
        return bound.mean, bound.variance
    return float(bound), 0.0


def _check_limit(bound: Bound, open_limit: float) -> Bound:
    """A Gaussian or finite bound, or ``open_limit`` for no bound on that side."""
    if isinstance(bound, GaussianValue):
        return bound
    bound = float(bound)
    if bound != open_limit and not jnp.isfinite(bound):
        raise InvalidBounds("Truncation bound must be finite or %s, got %s." % (open_limit, bound))
    return bound


def _is_open(bound: Bound, open_limit: float) -> bool:
    return not isinstance(bound, GaussianValue) and bound == open_limit


def _standardize(x: GaussianValue, bound: Bound) -> Tuple[float, float]:
    r"""Standardized position of a bound relative to :math:`X`.

    For :math:`D = B - X \sim N(\mu_b - \mu_x, s^2)` with :math:`s^2 = \sigma_x^2 + \sigma_b^2`
    this returns :math:`c = (\mu_b - \mu_x)/s` and :math:`s`.
    """
    bound_mean, bound_variance = _bound_moments(bound)
    scale = float(jnp.sqrt(x.variance + bound_variance))
    return (bound_mean - x.mean) / scale, scale


def truncate_lower(x: GaussianValue, lower: Bound) -> GaussianValue:
    r"""Moment matched :math:`X\vert X \geq L`.

    :math:`X` and :math:`D = X - L` are jointly normal with covariance :math:`\sigma_x^2`, so
    conditioning on :math:`D \geq 0` is closed form. With :math:`c, s` from the standardized bound
    and the inverse Mills ratio :math:`\lambda = \lambda(c)`

    .. math::

        \mathbb{E}[X\vert X \geq L] = \mu_x + \frac{\sigma_x^2}{s}\lambda,\quad
        {\rm Var}[X\vert X \geq L] = \sigma_x^2 - \frac{\sigma_x^4}{s^2}\lambda(\lambda - c).

    For a constant bound :math:`s = \sigma_x` and these are the moments of the truncated normal.

    Args:
        x: The variable.
        lower: Constant or Gaussian lower bound, independent of ``x``. ``-inf`` leaves ``x``
            unchanged.

    Raises:
        InvalidBounds: If the bound is ``nan`` or ``+inf``.

    Returns:
        The truncated variable.
    """
    lower = _check_limit(lower, -jnp.inf)
    if _is_open(lower, -jnp.inf):
        return x
    c, scale = _standardize(x, lower)
    ratio = mills_ratio(c)
    gain = x.variance / scale
    mean = x.mean + gain * ratio
    variance = x.variance - gain**2 * ratio * (ratio - c)
    return GaussianValue.from_moments(mean, variance)


def truncate_upper(x: GaussianValue, upper: Bound) -> GaussianValue:
    """Moment matched :math:`X\\vert X \\leq U`, i.e. :math:`-((-X)\\vert -X \\geq -U)`."""
    return mirror(truncate_lower, x, _check_limit(upper, jnp.inf))


def _truncate_window(x: GaussianValue, lower: Bound, upper: Bound) -> GaussianValue:
    r"""Condition on both bounds jointly.

    Uses :math:`1\{L \leq X \leq U\} = 1 - 1\{X < L\} - 1\{X > U\}`, which neglects the event
    :math:`U < X < L`. With standardized bounds :math:`a, b`, scales :math:`s_l, s_u`, gains
    :math:`k = \sigma_x^2/s` and :math:`Z = \Phi(b) - \Phi(a)`

    .. math::

        \mathbb{E}[X\vert\cdot] = \mu_x + \frac{k_l\phi(a) - k_u\phi(b)}{Z},

        {\rm Var}[X\vert\cdot] = \sigma_x^2 + \frac{k_l^2 a\phi(a) - k_u^2 b\phi(b)}{Z}
        - \left(\frac{k_l\phi(a) - k_u\phi(b)}{Z}\right)^2.

    For constant bounds these are the exact moments of the doubly truncated normal. Windows in the
    upper tail are mirrored, so that :math:`Z` is always taken from the lower tail.
    """
    a, lower_scale = _standardize(x, lower)
    b, upper_scale = _standardize(x, upper)
    if a + b > 0:
        return mirror(_truncate_window, x, upper, lower)
    log_mass = log_interval_probability(a, b)
    weight_a = jnp.exp(normal_logpdf(a) - log_mass)
    weight_b = jnp.exp(normal_logpdf(b) - log_mass)
    gain_lower, gain_upper = x.variance / lower_scale, x.variance / upper_scale
    shift = gain_lower * weight_a - gain_upper * weight_b
    variance = x.variance + gain_lower**2 * a * weight_a - gain_upper**2 * b * weight_b - shift**2
    return GaussianValue.from_moments(x.mean + shift, variance)


def _truncate_between_random(x: GaussianValue, lower: Bound, upper: Bound) -> GaussianValue:
    """Condition on two bounds of which at least one is random.

    Well separated bounds are applied jointly. Otherwise the two one-sided truncations are applied
    one after the other, and the order is picked from the positions and spreads of the bounds.
    """
    lower_mean, lower_variance = _bound_moments(lower)
    upper_mean, upper_variance = _bound_moments(upper)
    lower_std, upper_std = float(jnp.sqrt(lower_variance)), float(jnp.sqrt(upper_variance))
    gamma = float((upper_mean - lower_mean) / (upper_std + lower_std))
    delta = float(jnp.abs(jnp.log(lower_std) - jnp.log(upper_std)))
    if gamma > WELL_SEPARATED_BOUNDS and _standardize(x, lower)[0] < _standardize(x, upper)[0]:
        logger.debug("Truncation with joint bounds (gamma=%.4g).", gamma)
        return _truncate_window(x, lower, upper)
    if lower_mean > -upper_mean:
        lower_first = lower_std > upper_std and delta < SIMILAR_BOUND_SPREAD
    else:
        lower_first = not (upper_std > lower_std and delta < SIMILAR_BOUND_SPREAD)
    if lower_first:
        logger.debug("Truncation lower then upper (gamma=%.4g, delta=%.4g).", gamma, delta)
        return truncate_upper(truncate_lower(x, lower), upper)
    logger.debug("Truncation upper then lower (gamma=%.4g, delta=%.4g).", gamma, delta)
    return truncate_lower(truncate_upper(x, upper), lower)


def truncate(x: GaussianValue, lower: Bound, upper: Bound) -> GaussianValue:
    """Moment matched :math:`X\\vert L \\leq X \\leq U`.

    Args:
        x: The variable.
        lower: Constant or Gaussian lower bound, independent of ``x``. May be ``-inf``.
        upper: Constant or Gaussian upper bound, independent of ``x``. May be ``+inf``.

    Raises:
        InvalidBounds: If both bounds are constants and ``upper <= lower``, or a constant bound is
            ``nan`` or infinite on the wrong side.

    Returns:
        The truncated variable.
    """
    lower, upper = _check_limit(lower, -jnp.inf), _check_limit(upper, jnp.inf)
    if _is_open(lower, -jnp.inf):
        return truncate_upper(x, upper)
    if _is_open(upper, jnp.inf):
        return truncate_lower(x, lower)
    if isinstance(lower, GaussianValue) or isinstance(upper, GaussianValue):
        return _truncate_between_random(x, lower, upper)
    lower, upper = float(lower), float(upper)
    if upper <= lower:
        raise InvalidBounds(
            "Truncation window must have positive width, got lower=%s and upper=%s." % (lower, upper)
        )
    return _truncate_window(x, lower, upper)
