"""
Shared data structures for the quadrature engine and the benchmark.

Refinement records one pass of the doubling loop.
QuadratureResult is what a rule hands back after it stops refining.
BenchmarkResult is one timed row of a benchmark report.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Refinement:
    """One composite estimate at a given panel count."""

    panel_count: int  # Number of equal-width panels over [a, b]
    estimate: float  # Composite sum at this panel count
    change: Optional[float] = None  # Stopping-test value vs. the previous pass (None for the seed)


@dataclass
class QuadratureResult:
    """Outcome of one integration run."""

    value: float
    panel_count: int
    refinements: int
    converged: bool
    history: List[Refinement] = field(default_factory=list)

    def changes(self) -> List[float]:
        """Absolute differences between successive estimates."""
        estimates = [r.estimate for r in self.history]
        return [abs(cur - prev) for prev, cur in zip(estimates, estimates[1:])]


@dataclass
class BenchmarkResult:
    """Timing and accuracy of one rule on one benchmark case."""

    rule_name: str
    value: float
    elapsed_ms: float
    within_tolerance: bool
