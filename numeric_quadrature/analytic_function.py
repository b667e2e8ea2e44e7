"""
Analytic Functions — closed-form real functions that know their derivative.

Each AnalyticFunction is an immutable value from a fixed family (constant,
linear, quadratic, cubic, monomial, sum of monomials, and one special
transcendental function). Every member can be evaluated at a point or on a
numpy array, and can build a brand-new function equal to its exact
derivative.

Differentiation always moves down the family:
  Cubic -> Quadratic -> Linear -> Constant
  Monomial(a, n) -> Monomial(a*n, n-1), floored at degree 0
  AnalyticSpecial -> AnalyticSpecialDerivative (terminal)
so there are no cycles and no function holds a reference to another.
"""

import numpy as np
from dataclasses import dataclass, field
from numbers import Integral
from typing import Tuple, Union

from .errors import InvalidArgument, Unsupported


ArrayOrFloat = Union[float, np.ndarray]


def _fmt(value: float) -> str:
    """Coefficient with explicit sign and two decimals: +1.00, -3.00."""
    return f"{value:+.2f}"


# ================================================================
# BASE CLASS
# ================================================================

class AnalyticFunction:
    """A closed-form function with exact evaluation and differentiation.

    Subclasses implement _evaluate() on float arrays, derive() and
    symbolic_repr(). evaluate() takes care of scalar in / scalar out.
    """

    func_name: str = "function"

    # --- Abstract interface (subclasses must implement) ---

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        """Evaluate f(x) element-wise on a float array."""
        raise NotImplementedError

    def derive(self) -> "AnalyticFunction":
        """Return a new function equal to the exact derivative."""
        raise NotImplementedError

    def symbolic_repr(self) -> str:
        """Return a human-readable formula string."""
        raise NotImplementedError

    @property
    def coefficients(self) -> np.ndarray:
        return np.zeros(0)

    # --- Evaluation ---

    def evaluate(self, x: ArrayOrFloat) -> ArrayOrFloat:
        """Evaluate f(x) at a point (returns float) or on an array."""
        values = self._evaluate(np.asarray(x, dtype=float))
        if np.ndim(values) == 0:
            return float(values)
        return values

    def __call__(self, x: ArrayOrFloat) -> ArrayOrFloat:
        return self.evaluate(x)

    # --- Serialization ---

    def compress(self) -> dict:
        return {
            "func_type": type(self).__name__,
            "func_name": self.func_name,
            "coefficients": self.coefficients.tolist(),
        }

    def __str__(self):
        return self.symbolic_repr()


# ================================================================
# POLYNOMIAL TYPES (fixed degree)
# ================================================================

@dataclass(frozen=True)
class ConstantFunction(AnalyticFunction):
    """f(x) = c"""

    c: float = 0.0
    func_name = "constant"

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.c, dtype=float)

    def derive(self) -> "ConstantFunction":
        return ConstantFunction(0.0)

    @property
    def coefficients(self) -> np.ndarray:
        return np.array([self.c], dtype=float)

    def symbolic_repr(self) -> str:
        return _fmt(self.c)


@dataclass(frozen=True)
class LinearFunction(AnalyticFunction):
    """f(x) = a*x + c"""

    a: float = 0.0
    c: float = 0.0
    func_name = "linear"

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        return self.a * x + self.c

    def derive(self) -> ConstantFunction:
        return ConstantFunction(self.a)

    @property
    def coefficients(self) -> np.ndarray:
        return np.array([self.a, self.c], dtype=float)

    def symbolic_repr(self) -> str:
        return f"{_fmt(self.a)}·x {_fmt(self.c)}"


@dataclass(frozen=True)
class QuadraticFunction(AnalyticFunction):
    """f(x) = a*x^2 + b*x + c"""

    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    func_name = "quadratic"

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        return self.a * x * x + self.b * x + self.c

    def derive(self) -> LinearFunction:
        return LinearFunction(2 * self.a, self.b)

    @property
    def coefficients(self) -> np.ndarray:
        return np.array([self.a, self.b, self.c], dtype=float)

    def symbolic_repr(self) -> str:
        return f"{_fmt(self.a)}·x² {_fmt(self.b)}·x {_fmt(self.c)}"


@dataclass(frozen=True)
class CubicFunction(AnalyticFunction):
    """f(x) = a*x^3 + b*x^2 + c*x + d"""

    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0
    func_name = "cubic"

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        return self.a * x ** 3 + self.b * x ** 2 + self.c * x + self.d

    def derive(self) -> QuadraticFunction:
        return QuadraticFunction(3 * self.a, 2 * self.b, self.c)

    @property
    def coefficients(self) -> np.ndarray:
        return np.array([self.a, self.b, self.c, self.d], dtype=float)

    def symbolic_repr(self) -> str:
        return (
            f"{_fmt(self.a)}·x³ {_fmt(self.b)}·x² "
            f"{_fmt(self.c)}·x {_fmt(self.d)}"
        )


# ================================================================
# MONOMIALS AND SUMS OF MONOMIALS
# ================================================================

@dataclass(frozen=True)
class MonomialFunction(AnalyticFunction):
    """f(x) = a*x^n, with integer n >= 0"""

    a: float = 0.0
    n: int = 0
    func_name = "monomial"

    def __post_init__(self):
        if isinstance(self.n, bool) or not isinstance(self.n, Integral):
            raise InvalidArgument(
                f"Monomial exponent must be an integer, got {self.n!r}"
            )
        if self.n < 0:
            raise InvalidArgument(
                f"Monomial exponent must not be negative, got {self.n}"
            )
        object.__setattr__(self, "n", int(self.n))

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        return self.a * x ** self.n

    def derive(self) -> "MonomialFunction":
        if self.n == 0:
            return MonomialFunction(0.0, 0)
        return MonomialFunction(self.a * self.n, self.n - 1)

    @property
    def coefficients(self) -> np.ndarray:
        return np.array([self.a], dtype=float)

    def symbolic_repr(self) -> str:
        return f"{_fmt(self.a)}·x^{self.n}"

    def compress(self) -> dict:
        base = super().compress()
        base["degree"] = self.n
        return base


@dataclass(frozen=True)
class PolynomialSumFunction(AnalyticFunction):
    """f(x) = sum of a_i*x^n_i over an ordered tuple of monomials.

    An empty sum is the zero function. Derivatives keep the term order
    and do not drop terms that became constant zero.
    """

    terms: Tuple[MonomialFunction, ...] = field(default_factory=tuple)
    func_name = "polynomial_sum"

    def __post_init__(self):
        terms = tuple(self.terms)
        for term in terms:
            if not isinstance(term, MonomialFunction):
                raise InvalidArgument(
                    f"PolynomialSumFunction only holds monomials, got "
                    f"{type(term).__name__}"
                )
        object.__setattr__(self, "terms", terms)

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        total = np.zeros_like(x, dtype=float)
        for term in self.terms:
            total = total + term._evaluate(x)
        return total

    def derive(self) -> "PolynomialSumFunction":
        return PolynomialSumFunction(tuple(term.derive() for term in self.terms))

    @property
    def coefficients(self) -> np.ndarray:
        return np.array([term.a for term in self.terms], dtype=float)

    def symbolic_repr(self) -> str:
        if not self.terms:
            return _fmt(0.0)
        return " ".join(term.symbolic_repr() for term in self.terms)

    def compress(self) -> dict:
        base = super().compress()
        base["terms"] = [term.compress() for term in self.terms]
        return base


# ================================================================
# SPECIAL FUNCTION (hand-derived derivative)
# ================================================================

@dataclass(frozen=True)
class AnalyticSpecialFunction(AnalyticFunction):
    """f(x) = e^(-x) * sin(8 * x^(2/3)) + 1

    Real-valued for x >= 0 only; negative x gives nan like any real
    power of a negative base.
    """

    func_name = "analytic_special"

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        return np.exp(-x) * np.sin(8 * np.power(x, 2.0 / 3.0)) + 1

    def derive(self) -> "AnalyticSpecialDerivative":
        return AnalyticSpecialDerivative()

    def symbolic_repr(self) -> str:
        return "e^(-x) · sin(8 · x^(2/3)) + 1"


@dataclass(frozen=True)
class AnalyticSpecialDerivative(AnalyticFunction):
    """f'(x) = e^(-x) * [16*cos(8*x^(2/3)) / (3*x^(1/3)) - sin(8*x^(2/3))]

    Singular at x = 0. Its own derivative is not available.
    """

    func_name = "analytic_special_derivative"

    def _evaluate(self, x: np.ndarray) -> np.ndarray:
        inner = 8 * np.power(x, 2.0 / 3.0)
        return np.exp(-x) * (
            16 * np.cos(inner) / (3 * np.power(x, 1.0 / 3.0)) - np.sin(inner)
        )

    def derive(self) -> AnalyticFunction:
        raise Unsupported(
            "The derivative of the special function's derivative is not supported"
        )

    def symbolic_repr(self) -> str:
        return "1/3 · e^(-x) · [16·cos(8·x^(2/3))/x^(1/3) - 3·sin(8·x^(2/3))]"


FUNCTION_TYPES = (
    ConstantFunction,
    LinearFunction,
    QuadraticFunction,
    CubicFunction,
    MonomialFunction,
    PolynomialSumFunction,
    AnalyticSpecialFunction,
    AnalyticSpecialDerivative,
)
