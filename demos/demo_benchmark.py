#!/usr/bin/env python3
"""
Demo: Compare the four quadrature rules on five reference integrals.

  f(x) = x + 1                               on [0, 3]     -> 7.5
  f(x) = x^2                                 on [0, 3]     -> 9
  f(x) = x^3                                 on [0, 3]     -> 20.25
  f(x) = 0.1*x^15 - 10*x^6 + 50*x            on [0, 1.65]  -> 39.3608103118
  f(x) = e^(-x) * sin(8 * x^(2/3)) + 1       on [0.1, 3]   -> 2.8847360777

Every rule refines until the relative change between two passes is at
most epsilon = 1e-7, repeated many times for timing. Rules whose result
misses the closed-form value by more than epsilon print the mismatch
instead of a time.

Pass a number to scale the repetition counts, e.g. 0.01 for a quick run.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from numeric_quadrature import default_cases, run_benchmark, format_report


def main():
    scale = float(sys.argv[1]) if len(sys.argv) > 1 else 1.0

    print("=" * 64)
    print("  NUMERICAL INTEGRATION: TRAPEZOID I/II/III vs SIMPSON")
    print("=" * 64)
    print()

    for case, results in run_benchmark(default_cases(repetition_scale=scale)):
        print(format_report(case, results))
        print()
        print()


if __name__ == "__main__":
    main()
