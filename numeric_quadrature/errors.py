"""Exceptions and warnings raised by numeric_quadrature."""


class QuadratureError(Exception):
    """Base class for every error raised by this package."""

    pass


class InvalidArgument(QuadratureError, ValueError):
    """A function or integration input was constructed with bad values."""

    pass


class Unsupported(QuadratureError, NotImplementedError):
    """The requested operation is not available for this function."""

    pass


class ConvergenceError(QuadratureError, ArithmeticError):
    """Refinement hit its panel limit before the stopping test held."""

    pass


class QuadratureWarning(UserWarning):
    """Warning for quadrature issues (e.g., refinement limit reached)."""

    pass
