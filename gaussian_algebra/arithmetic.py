##################################################################################################
# This file is part of the Gaussian Algebra.                                                     #
#                                                                                                #
# It contains the multiplicative operations and the extrema of Gaussian values.                  #
##################################################################################################

__all__ = ["inverse", "product", "quotient", "maximum", "minimum"]

import logging

from jax import numpy as jnp

from .constants import INVERSE_MIN_SNR, RATIO_MAX_NUMERATOR_SNR
from .exceptions import DomainError
from .utils.special import normal_cdf, normal_pdf
from .utils.symmetry import mirror
from .value import GaussianValue

logger = logging.getLogger(__name__)


def _snr(x: GaussianValue) -> float:
    """Squared distance of the mean from zero, in units of the variance."""
    return x.mean**2 / x.variance


def inverse(x: GaussianValue) -> GaussianValue:
    r"""Second order delta method approximation of :math:`1/X`.

    With :math:`b = \mu^2/\sigma^2`

    .. math::

        \mathbb{E}[1/X] \approx \frac{1}{\mu}\left(1 + \frac{1}{b}\right),\quad
        {\rm Var}[1/X] \approx \frac{1}{\mu^2}\left(\frac{1}{b} + \frac{8}{b^2}\right).

    Args:
        x: The variable. Its mean must be at least 4 standard deviations away from zero.

    Raises:
        DomainError: If :math:`\mu^2/\sigma^2 < 16`. Close to zero :math:`1/X` is heavy tailed and
            the expansion is meaningless.

    Returns:
        The moment matched inverse.
    """
    b = _snr(x)
    if b < INVERSE_MIN_SNR:
        raise DomainError(
            "Variance too large relative to mean for inverse approximation "
            "(mean**2 / variance = %.4g < %g)." % (b, INVERSE_MIN_SNR)
        )
    mean = (1.0 + 1.0 / b) / x.mean
    variance = (1.0 / b + 8.0 / b**2) / x.mean**2
    return GaussianValue(mean, variance)


def product(x: GaussianValue, y: GaussianValue) -> GaussianValue:
    r"""Moments of :math:`XY` for independent :math:`X, Y`.

    .. math::

        {\rm Var}[XY] = \sigma_x^2\sigma_y^2 (1 + a + b)

    with :math:`a = \mu_x^2/\sigma_x^2` and :math:`b = \mu_y^2/\sigma_y^2`. Exact for independent
    operands.
    """
    a, b = _snr(x), _snr(y)
    return GaussianValue(x.mean * y.mean, x.variance * y.variance * (1.0 + a + b))


def quotient(x: GaussianValue, y: GaussianValue) -> GaussianValue:
    r"""Moment matched :math:`X/Y` for independent :math:`X, Y`.

    If the numerator is close to zero (:math:`a < 6.25`) and the denominator is far from it
    (:math:`b \geq 16`) the ratio moments are expanded directly. With :math:`r = \sigma_y^2/\sigma_x^2`

    .. math::

        m_1 = 1 + \frac{1}{b} + \frac{3}{b^2},\quad m_2 = 1 + \frac{3}{b} + \frac{15}{b^2},

        \mathbb{E}[X/Y] \approx \frac{\mu_x}{\mu_y} m_1,\quad
        {\rm Var}[X/Y] \approx \frac{(a + 1) m_2 - a m_1^2}{b r}.

    Otherwise the quotient is :math:`X \cdot (1/Y)`.

    Args:
        x: Numerator.
        y: Denominator.

    Raises:
        DomainError: If the denominator is too close to zero for its inverse.

    Returns:
        The moment matched quotient.
    """
    a, b = _snr(x), _snr(y)
    if a < RATIO_MAX_NUMERATOR_SNR and b >= INVERSE_MIN_SNR:
        logger.debug("Quotient via ratio moments (a=%.4g, b=%.4g).", a, b)
        r = y.variance / x.variance
        m1 = 1.0 + 1.0 / b + 3.0 / b**2
        m2 = 1.0 + 3.0 / b + 15.0 / b**2
        mean = x.mean / y.mean * m1
        variance = ((a + 1.0) * m2 - a * m1**2) / (b * r)
        return GaussianValue(mean, variance)
    logger.debug("Quotient via inverse of the denominator (a=%.4g, b=%.4g).", a, b)
    return product(x, inverse(y))


def maximum(x: GaussianValue, y: GaussianValue) -> GaussianValue:
    r"""Clark's moments of :math:`\max(X, Y)` for independent :math:`X, Y`.

    With :math:`\theta = \sqrt{\sigma_x^2 + \sigma_y^2}` and :math:`\alpha = (\mu_x - \mu_y)/\theta`

    .. math::

        \mathbb{E}[\max] = \mu_x\Phi(\alpha) + \mu_y\Phi(-\alpha) + \theta\phi(\alpha),

        \mathbb{E}[\max^2] = (\mu_x^2 + \sigma_x^2)\Phi(\alpha) + (\mu_y^2 + \sigma_y^2)\Phi(-\alpha)
        + (\mu_x + \mu_y)\theta\phi(\alpha).

    Evaluated relative to the larger of the two means.
    """
    if x.mean > y.mean:
        x, y = y, x
    theta = jnp.sqrt(x.variance + y.variance)
    shift = x.mean - y.mean
    alpha = shift / theta
    cdf, sf, pdf = normal_cdf(alpha), normal_cdf(-alpha), normal_pdf(alpha)
    first = shift * cdf + theta * pdf
    second = (shift**2 + x.variance) * cdf + y.variance * sf + shift * theta * pdf
    return GaussianValue.from_moments(y.mean + first, second - first**2)


def minimum(x: GaussianValue, y: GaussianValue) -> GaussianValue:
    """Moments of :math:`\\min(X, Y) = -\\max(-X, -Y)`."""
    return mirror(maximum, x, y)
