"""
Benchmark — times every quadrature rule on reference integrals.

Each BenchmarkCase bundles a function, an interval, the closed-form value
of the integral, the relative epsilon handed to the rules, and how often
the computation is repeated for timing. run_benchmark() runs every rule
on every case sequentially; format_report() renders one text table per
case.

Usage:
    for case in default_cases():
        results = [run_case(case, rule) for rule in all_rules()]
        print(format_report(case, results))
"""

import time
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from .analytic_function import (
    AnalyticFunction,
    LinearFunction,
    QuadraticFunction,
    CubicFunction,
    MonomialFunction,
    PolynomialSumFunction,
    AnalyticSpecialFunction,
)
from .compare import relative_error
from .errors import InvalidArgument, Unsupported
from .logging import logger
from .quadrature import QuadratureRule, all_rules
from .types import BenchmarkResult


DEFAULT_EPSILON = 1e-7
TABLE_WIDTH = 48


@dataclass(frozen=True)
class BenchmarkCase:
    """One reference integral and how to time it."""

    function: AnalyticFunction
    a: float
    b: float
    expected: float
    epsilon: float = DEFAULT_EPSILON
    repetitions: int = 1

    def __post_init__(self):
        if self.repetitions < 1:
            raise InvalidArgument(
                f"repetitions must be at least 1, got {self.repetitions}"
            )


def default_cases(
    epsilon: float = DEFAULT_EPSILON, repetition_scale: float = 1.0
) -> List[BenchmarkCase]:
    """The five reference integrals, with their closed-form values."""

    def reps(n: int) -> int:
        return max(1, int(round(n * repetition_scale)))

    polynomial_sum = PolynomialSumFunction((
        MonomialFunction(0.1, 15),
        MonomialFunction(-10, 6),
        MonomialFunction(50, 1),
    ))
    return [
        BenchmarkCase(LinearFunction(1, 1), 0, 3, 7.5, epsilon, reps(100000)),
        BenchmarkCase(QuadraticFunction(1, 0, 0), 0, 3, 9, epsilon, reps(1000)),
        BenchmarkCase(CubicFunction(1, 0, 0, 0), 0, 3, 20.25, epsilon, reps(100)),
        BenchmarkCase(polynomial_sum, 0, 1.65, 39.3608103118, epsilon, reps(10)),
        BenchmarkCase(AnalyticSpecialFunction(), 0.1, 3, 2.8847360777, epsilon, reps(10)),
    ]


def run_case(case: BenchmarkCase, rule: QuadratureRule) -> BenchmarkResult:
    """Run rule on case repetitions times and time the whole batch."""
    value = 0.0
    start = time.perf_counter()
    for _ in range(case.repetitions):
        value = rule.compute_integral(case.function, case.a, case.b, case.epsilon)
    elapsed_ms = (time.perf_counter() - start) * 1e3

    within = relative_error(value, case.expected) <= case.epsilon
    if not within:
        logger.info(
            f"{rule.name} missed {case.expected} on [{case.a}, {case.b}]: "
            f"got {value!r}"
        )
    return BenchmarkResult(
        rule_name=rule.name,
        value=value,
        elapsed_ms=elapsed_ms,
        within_tolerance=within,
    )


def run_benchmark(
    cases: Optional[Iterable[BenchmarkCase]] = None,
    rules: Optional[Iterable[QuadratureRule]] = None,
) -> Iterator[Tuple[BenchmarkCase, List[BenchmarkResult]]]:
    """Yield (case, results) with one result per rule, in order."""
    cases = default_cases() if cases is None else list(cases)
    rules = all_rules() if rules is None else list(rules)
    for case in cases:
        logger.info(
            f"Benchmarking f(x) = {case.function} on [{case.a}, {case.b}] "
            f"({case.repetitions} repetitions)"
        )
        yield case, [run_case(case, rule) for rule in rules]


def format_report(case: BenchmarkCase, results: Iterable[BenchmarkResult]) -> str:
    """Text table for one case: header lines, then one row per rule."""
    try:
        derivative = str(case.function.derive())
    except Unsupported:
        derivative = "n/a"

    lines = [
        f"Function:   f(x)  = {case.function}",
        f"Derivative: f'(x) = {derivative}",
        f"Interval:   i     = [{case.a:f}, {case.b:f}]",
        f"Epsilon:    ε     = {case.epsilon:g}",
        "",
        f"{'Algorithm':<30s} | Elapsed time",
        "-" * TABLE_WIDTH,
    ]
    for result in results:
        if result.within_tolerance:
            lines.append(f"{result.rule_name:<30s} | {result.elapsed_ms:12.6f} ms")
        else:
            lines.append(
                f"{result.rule_name:<30s} | Error: {result.value:.10f} "
                f"!= {case.expected:.10f}"
            )
    lines.append("-" * TABLE_WIDTH)
    return "\n".join(lines)
