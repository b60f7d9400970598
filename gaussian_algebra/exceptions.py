__all__ = ["GaussianAlgebraError", "InvalidParameter", "DomainError", "InvalidBounds"]


class GaussianAlgebraError(Exception):
    """Base class of all errors raised by the Gaussian algebra."""


class InvalidParameter(GaussianAlgebraError, ValueError):
    """The parameters do not describe a normal random variable (variance <= 0 or non-finite values)."""


class DomainError(GaussianAlgebraError, ArithmeticError):
    """An approximation is requested outside the region where it can be trusted."""


class InvalidBounds(GaussianAlgebraError, ValueError):
    """A truncation window without positive width."""
