"""Tests for the composite quadrature rules and their refinement loop."""

import warnings

import numpy as np
import pytest

from numeric_quadrature.analytic_function import (
    AnalyticFunction,
    ConstantFunction,
    LinearFunction,
    QuadraticFunction,
    CubicFunction,
    MonomialFunction,
    PolynomialSumFunction,
    AnalyticSpecialFunction,
)
from numeric_quadrature.errors import (
    InvalidArgument,
    ConvergenceError,
    QuadratureWarning,
)
from numeric_quadrature.quadrature import (
    QuadratureRule,
    TrapezoidI,
    TrapezoidII,
    TrapezoidIII,
    Simpson,
    ALGORITHMS,
    PANEL_CHUNK,
    get_rule,
    all_rules,
)


EPSILON = 1e-7


def polynomial_sum():
    return PolynomialSumFunction((
        MonomialFunction(0.1, 15),
        MonomialFunction(-10, 6),
        MonomialFunction(50, 1),
    ))


REFERENCE_CASES = [
    ("linear", LinearFunction(1, 1), 0.0, 3.0, 7.5),
    ("quadratic", QuadraticFunction(1, 0, 0), 0.0, 3.0, 9.0),
    ("cubic", CubicFunction(1, 0, 0, 0), 0.0, 3.0, 20.25),
    ("polynomial_sum", polynomial_sum(), 0.0, 1.65, 39.3608103118),
    ("special", AnalyticSpecialFunction(), 0.1, 3.0, 2.8847360777),
]


class CountingFunction(AnalyticFunction):
    """Wraps a function and counts derive() and evaluate() calls."""

    def __init__(self, inner):
        self.inner = inner
        self.derive_calls = 0
        self.evaluate_calls = 0

    def _evaluate(self, x):
        self.evaluate_calls += 1
        return self.inner._evaluate(x)

    def derive(self):
        self.derive_calls += 1
        return self.inner.derive()

    def symbolic_repr(self):
        return self.inner.symbolic_repr()


# ================================================================
# REGISTRY TESTS
# ================================================================

class TestRegistry:

    def test_four_algorithms_in_order(self):
        assert [r.__name__ for r in ALGORITHMS] == [
            "TrapezoidI", "TrapezoidII", "TrapezoidIII", "Simpson",
        ]

    def test_display_name_is_identifier(self):
        for rule in all_rules():
            assert rule.name == type(rule).__name__
            assert str(rule) == rule.name

    def test_get_rule_by_name(self):
        rule = get_rule("Simpson", max_refinements=5)
        assert isinstance(rule, Simpson)
        assert rule.max_refinements == 5

    def test_get_rule_unknown(self):
        with pytest.raises(InvalidArgument):
            get_rule("Romberg")

    def test_correction_constants(self):
        assert TrapezoidII.correction == 4.0
        assert TrapezoidIII.correction == 12.0

    def test_derivative_flags(self):
        assert not TrapezoidI.uses_derivative
        assert TrapezoidII.uses_derivative
        assert TrapezoidIII.uses_derivative
        assert not Simpson.uses_derivative

    def test_rules_are_independent_classes(self):
        assert not isinstance(TrapezoidIII(), TrapezoidII)
        assert not isinstance(TrapezoidII(), TrapezoidIII)

    def test_bad_configuration(self):
        with pytest.raises(InvalidArgument):
            TrapezoidI(max_refinements=0)
        with pytest.raises(InvalidArgument):
            Simpson(zero_tolerance=-1.0)


# ================================================================
# REFERENCE INTEGRALS
# ================================================================

class TestReferenceIntegrals:

    @pytest.mark.parametrize("rule_type", ALGORITHMS, ids=lambda r: r.__name__)
    @pytest.mark.parametrize(
        "name,f,a,b,expected", REFERENCE_CASES, ids=[c[0] for c in REFERENCE_CASES]
    )
    def test_converges_to_closed_form(self, rule_type, name, f, a, b, expected):
        result = rule_type().integrate(f, a, b, EPSILON)
        assert result.converged
        assert result.value == pytest.approx(expected, rel=1e-6)

    @pytest.mark.parametrize("rule_type", ALGORITHMS, ids=lambda r: r.__name__)
    def test_linear_is_exact(self, rule_type):
        value = rule_type().compute_integral(LinearFunction(1, 1), 0, 3, EPSILON)
        assert value == pytest.approx(7.5, rel=EPSILON)

    def test_simpson_exact_for_cubic_after_one_refinement(self):
        result = Simpson().integrate(CubicFunction(1, 0, 0, 0), 0, 3, EPSILON)
        assert result.refinements == 1
        assert result.panel_count == 2
        assert result.value == pytest.approx(20.25, rel=1e-12)

    def test_trapezoid_iii_exact_for_cubic(self):
        result = TrapezoidIII().integrate(CubicFunction(1, 0, 0, 0), 0, 3, EPSILON)
        assert result.refinements == 1
        assert result.history[0].estimate == pytest.approx(20.25, rel=1e-12)

    def test_chord_rule_needs_many_panels_for_polynomial_sum(self):
        result = TrapezoidI().integrate(polynomial_sum(), 0, 1.65, EPSILON)
        assert result.panel_count >= 1024


# ================================================================
# REFINEMENT LOOP TESTS
# ================================================================

class TestRefinementLoop:

    @pytest.mark.parametrize("rule_type", ALGORITHMS, ids=lambda r: r.__name__)
    def test_always_refines_at_least_once(self, rule_type):
        result = rule_type().integrate(LinearFunction(1, 1), 0, 3, EPSILON)
        assert result.refinements >= 1
        assert [r.panel_count for r in result.history][:2] == [1, 2]

    def test_panel_count_doubles(self):
        result = TrapezoidI().integrate(QuadraticFunction(1, 0, 0), 0, 3, EPSILON)
        counts = [r.panel_count for r in result.history]
        assert counts == [2 ** i for i in range(len(counts))]
        assert result.panel_count == counts[-1]
        assert result.refinements == len(counts) - 1

    def test_seed_uses_panel_formula(self):
        # One panel of width 3 over x^2 on [0, 3]
        f = QuadraticFunction(1, 0, 0)
        assert TrapezoidI().integrate(f, 0, 3, EPSILON).history[0].estimate == 13.5
        assert TrapezoidII().integrate(f, 0, 3, EPSILON).history[0].estimate == 0.0
        assert TrapezoidIII().integrate(f, 0, 3, EPSILON).history[0].estimate == 9.0
        assert Simpson().integrate(f, 0, 3, EPSILON).history[0].estimate == 9.0

    def test_seed_has_no_change(self):
        result = Simpson().integrate(QuadraticFunction(1, 0, 0), 0, 3, EPSILON)
        assert result.history[0].change is None
        assert result.history[-1].change <= EPSILON

    @pytest.mark.parametrize("rule_type", [TrapezoidII, TrapezoidIII], ids=lambda r: r.__name__)
    def test_derivative_taken_once(self, rule_type):
        f = CountingFunction(QuadraticFunction(1, 0, 0))
        result = rule_type().integrate(f, 0, 3, EPSILON)
        assert result.refinements >= 1
        assert f.derive_calls == 1

    @pytest.mark.parametrize("rule_type", [TrapezoidI, Simpson], ids=lambda r: r.__name__)
    def test_derivative_not_taken(self, rule_type):
        f = CountingFunction(QuadraticFunction(1, 0, 0))
        rule_type().integrate(f, 0, 3, EPSILON)
        assert f.derive_calls == 0

    def test_evaluates_whole_pass_per_call(self):
        f = CountingFunction(QuadraticFunction(1, 0, 0))
        result = Simpson().integrate(f, 0, 3, EPSILON)
        # left, middle, right arrays for each pass
        assert f.evaluate_calls == 3 * len(result.history)

    def test_composite_spans_chunks(self):
        f = QuadraticFunction(1, 0, 0)
        rule = Simpson()
        value = rule.composite(f, None, 0.0, 3.0, 2 * PANEL_CHUNK + 4)
        assert value == pytest.approx(9.0, rel=1e-10)

    def test_changes_shrink(self):
        result = TrapezoidI().integrate(CubicFunction(1, 0, 0, 0), 0, 3, EPSILON)
        changes = result.changes()
        assert len(changes) > 3
        assert all(later < earlier for earlier, later in zip(changes, changes[1:]))

    @pytest.mark.parametrize("rule_type", ALGORITHMS, ids=lambda r: r.__name__)
    @pytest.mark.parametrize(
        "name,f,a,b,expected", REFERENCE_CASES, ids=[c[0] for c in REFERENCE_CASES]
    )
    def test_refinement_does_not_diverge(self, rule_type, name, f, a, b, expected):
        changes = rule_type().integrate(f, a, b, EPSILON).changes()
        assert changes[-1] <= changes[0]


# ================================================================
# PURITY TESTS
# ================================================================

class TestPurity:

    @pytest.mark.parametrize("rule_type", ALGORITHMS, ids=lambda r: r.__name__)
    def test_idempotent(self, rule_type):
        rule = rule_type()
        f = AnalyticSpecialFunction()
        first = rule.compute_integral(f, 0.1, 3, EPSILON)
        second = rule.compute_integral(f, 0.1, 3, EPSILON)
        assert first == second

    def test_separate_instances_agree(self):
        f = polynomial_sum()
        assert (
            TrapezoidIII().compute_integral(f, 0, 1.65, EPSILON)
            == TrapezoidIII().compute_integral(f, 0, 1.65, EPSILON)
        )

    def test_function_unchanged(self):
        f = polynomial_sum()
        before = f.compress()
        TrapezoidII().integrate(f, 0, 1.65, EPSILON)
        assert f.compress() == before


# ================================================================
# EDGE CASES
# ================================================================

class TestEdgeCases:

    @pytest.mark.parametrize("rule_type", ALGORITHMS, ids=lambda r: r.__name__)
    def test_zero_integrand_converges(self, rule_type):
        result = rule_type().integrate(ConstantFunction(0.0), 0, 1, EPSILON)
        assert result.converged
        assert result.value == 0.0
        assert result.refinements == 1

    def test_symmetric_odd_function_converges_to_zero(self):
        result = TrapezoidI().integrate(LinearFunction(1, 0), -1, 1, EPSILON)
        assert result.converged
        assert result.value == 0.0

    def test_zero_tolerance_switches_to_absolute_change(self):
        f = CubicFunction(1, 0, 0, 0)
        result = Simpson(zero_tolerance=1e-9).integrate(f, -1, 1, EPSILON)
        assert result.converged
        assert abs(result.value) < 1e-12

    def test_empty_polynomial_sum_integrates_to_zero(self):
        value = TrapezoidII().compute_integral(PolynomialSumFunction(), 0, 2, EPSILON)
        assert value == 0.0

    @pytest.mark.parametrize("a,b", [(3.0, 0.0), (1.0, 1.0)])
    def test_bad_bounds(self, a, b):
        with pytest.raises(InvalidArgument):
            Simpson().integrate(LinearFunction(1, 1), a, b, EPSILON)

    @pytest.mark.parametrize("epsilon", [0.0, -1e-7, float("nan"), float("inf")])
    def test_bad_epsilon(self, epsilon):
        with pytest.raises(InvalidArgument):
            TrapezoidI().compute_integral(LinearFunction(1, 1), 0, 3, epsilon)

    def test_non_finite_bound(self):
        with pytest.raises(InvalidArgument):
            TrapezoidI().compute_integral(LinearFunction(1, 1), 0, float("inf"), EPSILON)

    def test_refinement_limit_warns(self):
        rule = TrapezoidI(max_refinements=2)
        with pytest.warns(QuadratureWarning):
            result = rule.integrate(AnalyticSpecialFunction(), 0.1, 3, 1e-15)
        assert not result.converged
        assert result.refinements == 2
        assert result.panel_count == 4
        assert np.isfinite(result.value)

    @pytest.mark.parametrize("rule_type", [TrapezoidII, TrapezoidIII], ids=lambda r: r.__name__)
    def test_infinite_estimate_stops_refining(self, rule_type):
        # f' is singular at 0, so every estimate on [0, 3] is inf
        with np.errstate(divide="ignore", invalid="ignore"):
            with pytest.warns(QuadratureWarning, match="non-finite"):
                result = rule_type().integrate(AnalyticSpecialFunction(), 0.0, 3.0, EPSILON)
        assert not result.converged
        assert result.refinements <= 1
        assert not np.isfinite(result.value)

    @pytest.mark.parametrize("rule_type", ALGORITHMS, ids=lambda r: r.__name__)
    def test_nan_estimate_stops_refining(self, rule_type):
        with np.errstate(divide="ignore", invalid="ignore"):
            with pytest.warns(QuadratureWarning):
                result = rule_type().integrate(AnalyticSpecialFunction(), -1.0, 3.0, EPSILON)
        assert not result.converged
        assert result.refinements <= 1
        assert np.isnan(result.value)

    def test_non_finite_estimate_strict_raises(self):
        rule = TrapezoidII(strict=True)
        with np.errstate(divide="ignore", invalid="ignore"):
            with pytest.raises(ConvergenceError):
                rule.integrate(AnalyticSpecialFunction(), 0.0, 3.0, EPSILON)

    def test_refinement_limit_strict_raises(self):
        rule = Simpson(max_refinements=2, strict=True)
        with pytest.raises(ConvergenceError):
            rule.integrate(AnalyticSpecialFunction(), 0.1, 3, 1e-15)

    def test_no_warning_when_converged(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", QuadratureWarning)
            Simpson().compute_integral(QuadraticFunction(1, 0, 0), 0, 3, EPSILON)

    def test_base_rule_is_abstract(self):
        with pytest.raises(NotImplementedError):
            QuadratureRule().compute_integral(LinearFunction(1, 1), 0, 3, EPSILON)
