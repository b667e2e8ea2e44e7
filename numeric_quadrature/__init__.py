"""
numeric_quadrature — composite quadrature rules over analytic functions.

An AnalyticFunction evaluates itself and builds its exact derivative.
A QuadratureRule integrates one over an interval by doubling the panel
count until the relative change between two passes drops below epsilon.
"""

from .analytic_function import (
    AnalyticFunction,
    ConstantFunction,
    LinearFunction,
    QuadraticFunction,
    CubicFunction,
    MonomialFunction,
    PolynomialSumFunction,
    AnalyticSpecialFunction,
    AnalyticSpecialDerivative,
    FUNCTION_TYPES,
)
from .quadrature import (
    QuadratureRule,
    TrapezoidI,
    TrapezoidII,
    TrapezoidIII,
    Simpson,
    ALGORITHMS,
    get_rule,
    all_rules,
)
from .types import Refinement, QuadratureResult, BenchmarkResult
from .compare import relative_change, relative_error
from .errors import (
    QuadratureError,
    InvalidArgument,
    Unsupported,
    ConvergenceError,
    QuadratureWarning,
)
from .benchmark import BenchmarkCase, default_cases, run_case, run_benchmark, format_report
from .logging import logger, set_log_level

__all__ = [
    "AnalyticFunction",
    "ConstantFunction",
    "LinearFunction",
    "QuadraticFunction",
    "CubicFunction",
    "MonomialFunction",
    "PolynomialSumFunction",
    "AnalyticSpecialFunction",
    "AnalyticSpecialDerivative",
    "FUNCTION_TYPES",
    "QuadratureRule",
    "TrapezoidI",
    "TrapezoidII",
    "TrapezoidIII",
    "Simpson",
    "ALGORITHMS",
    "get_rule",
    "all_rules",
    "Refinement",
    "QuadratureResult",
    "BenchmarkResult",
    "relative_change",
    "relative_error",
    "QuadratureError",
    "InvalidArgument",
    "Unsupported",
    "ConvergenceError",
    "QuadratureWarning",
    "BenchmarkCase",
    "default_cases",
    "run_case",
    "run_benchmark",
    "format_report",
    "logger",
    "set_log_level",
]
