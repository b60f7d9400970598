##################################################################################################
# This file is part of the Gaussian Algebra.                                                     #
#                                                                                                #
# It contains the Gaussian value type and its exact linear operations.                           #
##################################################################################################

import logging
import math
import numbers

import jax
import numpy as np
from jax import numpy as jnp
from jax.random import PRNGKey
from jaxtyping import Array, Float
from dataclasses import dataclass
from typing import Union

from .exceptions import InvalidParameter

logger = logging.getLogger(__name__)

TINY_VARIANCE = float(jnp.finfo(jnp.float64).tiny)


def is_scalar(x) -> bool:
    """Whether ``x`` is a real number that can be combined with a Gaussian value."""
    if isinstance(x, numbers.Real):
        return True
    return isinstance(x, (np.ndarray, jax.Array)) and x.ndim == 0 and jnp.isrealobj(x)


@dataclass(frozen=True)
class GaussianValue:
    r"""An independent normal random variable, summarized by its first two moments.

    .. math::

        X \sim N(\mu, \sigma^2), \quad \sigma^2 > 0.

    Values are immutable. Every operation returns a new ``GaussianValue`` matching the first two
    moments of the (in general non-Gaussian) result. Operands are always treated as mutually
    independent.

    Args:
        mean: Mean :math:`\mu`. Defaults to 0.
        variance: Variance :math:`\sigma^2`. Defaults to 1.

    Raises:
        InvalidParameter: If the variance is not a positive finite number or the mean is not finite.
    """

    mean: float = 0.0
    variance: float = 1.0

    def __post_init__(self):
        mean, variance = float(self.mean), float(self.variance)
        if not math.isfinite(mean):
            raise InvalidParameter("GaussianValue: Mean must be finite, got %s." % mean)
        if not (variance > 0 and math.isfinite(variance)):
            raise InvalidParameter(
                "GaussianValue: Variance must be greater than 0 and finite, got %s." % variance
            )
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "variance", variance)

    @classmethod
    def standard_normal(cls) -> "GaussianValue":
        return cls(0.0, 1.0)

    @classmethod
    def from_moments(
        cls, mean: Union[float, Float[Array, ""]], variance: Union[float, Float[Array, ""]]
    ) -> "GaussianValue":
        """Build a value from computed moments.

        A variance below the smallest positive normal double is clamped to it. This happens when a
        bound lies so far in the tail that the result is a point mass up to machine precision.

        Args:
            mean: Mean of the result.
            variance: Variance of the result.

        Returns:
            The moment matched Gaussian value.
        """
        variance = float(variance)
        if variance < TINY_VARIANCE:
            logger.debug("Variance %s below double resolution, clamped to %s.", variance, TINY_VARIANCE)
            variance = TINY_VARIANCE
        return cls(mean, variance)

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    def sample(self, key: PRNGKey, num_samples: int) -> Float[Array, "N"]:
        """Sample from the normal distribution.

        Args:
            key: Jax pseudo random number generator.
            num_samples: Number of samples.

        Returns:
            Samples.
        """
        rand_nums = jax.random.normal(key, (num_samples,))
        return self.mean + self.std * rand_nums

    # Exact linear operations.

    def __neg__(self) -> "GaussianValue":
        return GaussianValue(-self.mean, self.variance)

    def __add__(self, other) -> "GaussianValue":
        if isinstance(other, GaussianValue):
            return GaussianValue(self.mean + other.mean, self.variance + other.variance)
        if is_scalar(other):
            return GaussianValue(self.mean + float(other), self.variance)
        return NotImplemented

    def __radd__(self, other) -> "GaussianValue":
        return self.__add__(other)

    def __sub__(self, other) -> "GaussianValue":
        if isinstance(other, GaussianValue):
            return GaussianValue(self.mean - other.mean, self.variance + other.variance)
        if is_scalar(other):
            return GaussianValue(self.mean - float(other), self.variance)
        return NotImplemented

    def __rsub__(self, other) -> "GaussianValue":
        if is_scalar(other):
            return GaussianValue(float(other) - self.mean, self.variance)
        return NotImplemented

    def scale(self, factor: float) -> "GaussianValue":
        """Multiply by a constant. Scaling by zero is rejected, since the result is degenerate."""
        factor = float(factor)
        return GaussianValue(factor * self.mean, factor**2 * self.variance)

    def __mul__(self, other) -> "GaussianValue":
        if isinstance(other, GaussianValue):
            from . import arithmetic

            return arithmetic.product(self, other)
        if is_scalar(other):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other) -> "GaussianValue":
        return self.__mul__(other)

    def __truediv__(self, other) -> "GaussianValue":
        if isinstance(other, GaussianValue):
            from . import arithmetic

            return arithmetic.quotient(self, other)
        if is_scalar(other):
            return self.scale(1.0 / float(other))
        return NotImplemented

    def __rtruediv__(self, other) -> "GaussianValue":
        if is_scalar(other):
            return self.inverse().scale(other)
        return NotImplemented

    # Approximations.

    def inverse(self) -> "GaussianValue":
        """Moment matched :math:`1/X`. See :func:`gaussian_algebra.arithmetic.inverse`."""
        from . import arithmetic

        return arithmetic.inverse(self)

    def maximum(self, other) -> "GaussianValue":
        """Moment matched :math:`\\max(X, Y)` for a Gaussian value or constant :math:`Y`."""
        from . import arithmetic, rectify

        if isinstance(other, GaussianValue):
            return arithmetic.maximum(self, other)
        return rectify.rectify_lower(self, other)

    def minimum(self, other) -> "GaussianValue":
        """Moment matched :math:`\\min(X, Y)` for a Gaussian value or constant :math:`Y`."""
        from . import arithmetic, rectify

        if isinstance(other, GaussianValue):
            return arithmetic.minimum(self, other)
        return rectify.rectify_upper(self, other)

    def rectify(self, lower: float, upper: float) -> "GaussianValue":
        """Moment matched :math:`{\\rm clamp}(X, l, u)`."""
        from . import rectify

        return rectify.rectify(self, lower, upper)

    def rectify_lower(self, lower: float) -> "GaussianValue":
        from . import rectify

        return rectify.rectify_lower(self, lower)

    def rectify_upper(self, upper: float) -> "GaussianValue":
        from . import rectify

        return rectify.rectify_upper(self, upper)

    def truncate(self, lower, upper) -> "GaussianValue":
        """Moment matched :math:`X\\vert l \\leq X \\leq u`, bounds are constants or Gaussian values."""
        from . import truncate

        return truncate.truncate(self, lower, upper)

    def truncate_lower(self, lower) -> "GaussianValue":
        from . import truncate

        return truncate.truncate_lower(self, lower)

    def truncate_upper(self, upper) -> "GaussianValue":
        from . import truncate

        return truncate.truncate_upper(self, upper)
