"""
Quadrature rules — composite integration with geometric refinement.

All four rules share one loop:
  1. Seed with a single panel spanning [a, b].
  2. Double the panel count and recompute the whole composite sum.
  3. Stop once the relative change between the last two sums is at most
     epsilon.

The rules differ only in the contribution of one panel [l, r] of width h:

  TrapezoidI    h/2 * (f(l) + f(r))
  TrapezoidII   h/2 * (f(l) + f(r)) + h^2/4  * (f'(l) - f'(r))
  TrapezoidIII  h/2 * (f(l) + f(r)) + h^2/12 * (f'(l) - f'(r))
  Simpson       h/6 * (f(l) + 4*f((l+r)/2) + f(r))

The two corrected trapezoid rules take the derivative once, before the
loop, and reuse it on every pass.
"""

import warnings
from typing import Optional, Tuple, Type

import numpy as np

from .analytic_function import AnalyticFunction
from .compare import relative_change, is_finite
from .errors import InvalidArgument, ConvergenceError, QuadratureWarning
from .logging import logger
from .types import QuadratureResult, Refinement


# Panels summed per numpy call; bounds memory at high refinement levels.
PANEL_CHUNK = 1 << 16


class QuadratureRule:
    """Base class for the composite quadrature rules.

    Configuration:
        max_refinements: number of panel doublings allowed after the seed.
        zero_tolerance:  when |estimate| is at or below this, the stopping
                         test uses the absolute change instead of the
                         relative one.
        strict:          raise ConvergenceError instead of warning when
                         max_refinements is reached or an estimate is
                         inf or nan.
    """

    uses_derivative: bool = False

    def __init__(
        self,
        max_refinements: int = 30,
        zero_tolerance: float = 0.0,
        strict: bool = False,
    ):
        if max_refinements < 1:
            raise InvalidArgument(
                f"max_refinements must be at least 1, got {max_refinements}"
            )
        if zero_tolerance < 0:
            raise InvalidArgument(
                f"zero_tolerance must not be negative, got {zero_tolerance}"
            )
        self.max_refinements = max_refinements
        self.zero_tolerance = zero_tolerance
        self.strict = strict

    @property
    def name(self) -> str:
        return type(self).__name__

    # --- Abstract interface (subclasses must implement) ---

    def panel_sum(
        self,
        f: AnalyticFunction,
        df: Optional[AnalyticFunction],
        left: np.ndarray,
        right: np.ndarray,
        h: float,
    ) -> float:
        """Sum of the panel contributions for panels [left[i], right[i]]."""
        raise NotImplementedError

    # --- Composite sum ---

    def composite(
        self,
        f: AnalyticFunction,
        df: Optional[AnalyticFunction],
        a: float,
        b: float,
        panel_count: int,
    ) -> float:
        """Composite estimate over [a, b] with panel_count equal panels."""
        h = (b - a) / panel_count
        total = 0.0
        for start in range(0, panel_count, PANEL_CHUNK):
            stop = min(start + PANEL_CHUNK, panel_count)
            left = a + np.arange(start, stop, dtype=float) * h
            right = left + h
            total += self.panel_sum(f, df, left, right, h)
        return total

    # --- Refinement loop ---

    def integrate(
        self, f: AnalyticFunction, a: float, b: float, epsilon: float
    ) -> QuadratureResult:
        """Integrate f over [a, b] and return the full refinement trace."""
        _check_inputs(a, b, epsilon)
        df = f.derive() if self.uses_derivative else None

        panel_count = 1
        current = self.composite(f, df, a, b, panel_count)
        history = [Refinement(panel_count, current)]
        refinements = 0
        converged = False
        finite = bool(np.isfinite(current))

        # Always refine at least once: the seed alone proves nothing.
        while finite and refinements < self.max_refinements:
            previous = current
            panel_count *= 2
            current = self.composite(f, df, a, b, panel_count)
            change = relative_change(current, previous, self.zero_tolerance)
            refinements += 1
            history.append(Refinement(panel_count, current, change))
            logger.debug(
                f"{self.name}: panels={panel_count} estimate={current!r} "
                f"change={change:.3e}"
            )
            if not np.isfinite(current):
                finite = False
                break
            if change <= epsilon:
                converged = True
                break

        if not finite:
            message = (
                f"{self.name} produced a non-finite estimate {current!r} on "
                f"[{a}, {b}] with {panel_count} panels"
            )
        elif not converged:
            message = (
                f"{self.name} did not reach epsilon={epsilon} on [{a}, {b}] "
                f"after {refinements} refinements ({panel_count} panels)"
            )
        if not converged:
            if self.strict:
                raise ConvergenceError(message)
            warnings.warn(message, QuadratureWarning, stacklevel=2)

        return QuadratureResult(
            value=current,
            panel_count=panel_count,
            refinements=refinements,
            converged=converged,
            history=history,
        )

    def compute_integral(
        self, f: AnalyticFunction, a: float, b: float, epsilon: float
    ) -> float:
        """Converged composite estimate of the integral of f over [a, b]."""
        return self.integrate(f, a, b, epsilon).value

    def __str__(self):
        return self.name

    def __repr__(self):
        return (
            f"{self.name}(max_refinements={self.max_refinements}, "
            f"zero_tolerance={self.zero_tolerance}, strict={self.strict})"
        )


def _check_inputs(a: float, b: float, epsilon: float) -> None:
    if not is_finite(a, b, epsilon):
        raise InvalidArgument(
            f"Bounds and epsilon must be finite, got a={a}, b={b}, epsilon={epsilon}"
        )
    if not a < b:
        raise InvalidArgument(f"Lower bound must be below upper bound, got [{a}, {b}]")
    if not epsilon > 0:
        raise InvalidArgument(f"epsilon must be positive, got {epsilon}")


# ================================================================
# TRAPEZOID RULES
# ================================================================

class TrapezoidI(QuadratureRule):
    """Chord trapezoid rule."""

    def panel_sum(self, f, df, left, right, h):
        return float(np.sum(h / 2.0 * (f.evaluate(left) + f.evaluate(right))))


class CorrectedTrapezoid(QuadratureRule):
    """Chord trapezoid plus h^2/correction * (f'(l) - f'(r)) per panel."""

    uses_derivative = True
    correction: float

    def panel_sum(self, f, df, left, right, h):
        chord = h / 2.0 * (f.evaluate(left) + f.evaluate(right))
        tangent = h * h / self.correction * (df.evaluate(left) - df.evaluate(right))
        return float(np.sum(chord + tangent))


class TrapezoidII(CorrectedTrapezoid):
    """Tangent trapezoid rule, h^2/4 derivative correction."""

    correction = 4.0


class TrapezoidIII(CorrectedTrapezoid):
    """Averaged trapezoid rule, h^2/12 derivative correction.

    The endpoint-corrected trapezoid rule: exact for cubics.
    """

    correction = 12.0


# ================================================================
# SIMPSON
# ================================================================

class Simpson(QuadratureRule):
    """Simpson's rule (Kepler's barrel rule) per panel."""

    def panel_sum(self, f, df, left, right, h):
        middle = (left + right) / 2.0
        return float(np.sum(
            h / 6.0 * (f.evaluate(left) + 4 * f.evaluate(middle) + f.evaluate(right))
        ))


ALGORITHMS: Tuple[Type[QuadratureRule], ...] = (
    TrapezoidI,
    TrapezoidII,
    TrapezoidIII,
    Simpson,
)


def get_rule(name: str, **kwargs) -> QuadratureRule:
    """Instantiate the rule whose display name is name."""
    for rule_type in ALGORITHMS:
        if rule_type.__name__ == name:
            return rule_type(**kwargs)
    known = ", ".join(r.__name__ for r in ALGORITHMS)
    raise InvalidArgument(f"Unknown quadrature rule {name!r}; expected one of {known}")


def all_rules(**kwargs):
    """One instance of every rule, in display order."""
    return [rule_type(**kwargs) for rule_type in ALGORITHMS]
