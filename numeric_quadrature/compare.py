"""
Comparison operations used by the refinement stopping test.

The stopping test measures how much the composite estimate moved between
two refinement levels, relative to the newest estimate.
"""

import math


def relative_change(current: float, previous: float, zero_tolerance: float = 0.0) -> float:
    """Relative difference |current - previous| / |current|.

    Identical estimates give 0.0, even when both are zero. When
    |current| <= zero_tolerance the absolute difference is returned
    instead, so an integral that is exactly zero still has a finite
    stopping value.
    """
    difference = abs(current - previous)
    if difference == 0.0:
        return 0.0
    if abs(current) <= zero_tolerance:
        return difference
    return difference / abs(current)


def relative_error(value: float, expected: float) -> float:
    """Relative error of value against a known expected result.

    Falls back to the absolute error when expected is zero.
    """
    if expected == 0.0:
        return abs(value)
    return abs(value - expected) / abs(expected)


def is_finite(*values: float) -> bool:
    """True when every value is a finite real number."""
    return all(math.isfinite(v) for v in values)
