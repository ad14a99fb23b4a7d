"""
Tests for the Newton-Raphson root solver.
"""

import math

import pytest

from preimage_fractals.core.complex_number import ComplexValue
from preimage_fractals.core.polynomial import ComplexPolynomial
from preimage_fractals.core.solver import (
    DegenerateDerivativeError,
    DivergenceError,
    IterationLimitError,
    SolverError,
    Zero,
    solve,
    solve_all,
)


def assert_contains(zeros, expected, tol: float = 1e-5):
    """Every expected root is within ``tol`` of some found root."""
    found = [z.value.to_complex() for z in zeros]
    for e in expected:
        assert any(abs(f - complex(e)) < tol for f in found), f"{e} not in {found}"


class TestZero:
    """The root record."""

    def test_defaults_to_simple_root(self):
        zero = Zero(ComplexValue(1, 2))
        assert zero.multiplicity == 1
        assert zero.value == 1 + 2j

    def test_copies_value(self):
        v = ComplexValue(1, 2)
        zero = Zero(v, 2)
        v.add_(10)
        assert zero.value == 1 + 2j

    def test_value_cannot_be_changed_through_accessor(self):
        zero = Zero(ComplexValue(1, 2), 2)
        zero.value.add_(10)
        assert zero.value == 1 + 2j

    def test_hashable(self):
        a = Zero(ComplexValue(1, 2), 2)
        b = Zero(ComplexValue(1, 2), 2)
        assert a == b
        assert hash(a) == hash(b)
        assert a != Zero(ComplexValue(1, 2), 1)

    def test_rejects_multiplicity_below_one(self):
        with pytest.raises(ValueError):
            Zero(ComplexValue.zero(), 0)


class TestSolve:
    """Single root search."""

    def test_square(self):
        p = ComplexPolynomial(1, 0, -2)
        zero = solve(p, ComplexValue.one(), 1e-8)
        assert zero.value.to_complex() == pytest.approx(math.sqrt(2), abs=1e-5)
        assert zero.multiplicity == 1

    def test_seed_is_not_modified(self):
        seed = ComplexValue.one()
        solve(ComplexPolynomial(1, 0, -2), seed, 1e-8)
        assert seed == ComplexValue.one()

    def test_seed_on_root_reports_multiplicity_directly(self):
        p = ComplexPolynomial.from_roots([1, 1, 1])
        zero = solve(p, 1, max_iterations=0)
        assert zero.value == 1
        assert zero.multiplicity == 3

    def test_rejects_low_degree(self):
        with pytest.raises(ValueError):
            solve(ComplexPolynomial(1, 2))

    @pytest.mark.parametrize("eps2", [0.0, -1e-8])
    def test_rejects_non_positive_tolerance(self, eps2):
        with pytest.raises(ValueError):
            solve(ComplexPolynomial(1, 0, -2), 1, eps2)

    def test_critical_point_diverges(self):
        # p'(0) = 0, the Newton step is undefined
        with pytest.raises(DivergenceError):
            solve(ComplexPolynomial(1, 0, 0, 1), 0)

    def test_zero_polynomial_is_degenerate(self):
        with pytest.raises(DegenerateDerivativeError):
            solve(ComplexPolynomial(0, 0, 0), 1)

    def test_iteration_limit(self):
        with pytest.raises(IterationLimitError):
            solve(ComplexPolynomial(1, 0, -2), 1, 1e-16, max_iterations=1)

    def test_error_hierarchy(self):
        assert issubclass(DivergenceError, SolverError)
        assert issubclass(DegenerateDerivativeError, SolverError)
        assert issubclass(IterationLimitError, SolverError)
        assert issubclass(SolverError, ArithmeticError)


class TestSolveAll:
    """All roots by deflation."""

    def test_no_roots_for_constants(self):
        assert solve_all(ComplexPolynomial()) == []
        assert solve_all(ComplexPolynomial(5)) == []

    def test_linear(self):
        zeros = solve_all(ComplexPolynomial(2, -4))
        assert len(zeros) == 1
        assert zeros[0].value == 2
        assert zeros[0].multiplicity == 1

    def test_square_closed_form(self):
        zeros = solve_all(ComplexPolynomial(1, 0, -2))
        assert len(zeros) == 2
        assert_contains(zeros, [math.sqrt(2), -math.sqrt(2)])
        assert all(z.multiplicity == 1 for z in zeros)

    def test_double_root_closed_form(self):
        zeros = solve_all(ComplexPolynomial.from_roots([1, 1]))
        assert len(zeros) == 1
        assert zeros[0].value.to_complex() == pytest.approx(1)
        assert zeros[0].multiplicity == 2

    def test_cube(self):
        p = ComplexPolynomial.from_roots([3, -2, -1])
        zeros = solve_all(p, None, 1e-8)
        assert len(zeros) == 3
        assert_contains(zeros, [3, -2, -1])
        assert all(z.multiplicity == 1 for z in zeros)

    def test_degree_four(self):
        p = ComplexPolynomial(1, -2, -7, 8, 12)
        zeros = solve_all(p, 3.2, 1e-8)
        assert len(zeros) == 4
        assert_contains(zeros, [3, -2, -1, 2])

    def test_roots_satisfy_polynomial(self):
        p = ComplexPolynomial.from_roots([3, -2, -1])
        for zero in solve_all(p):
            assert p.apply(zero.value).abs() < 1e-6

    def test_triple_root_from_seed(self):
        zeros = solve_all(ComplexPolynomial.from_roots([1, 1, 1]), 1)
        assert len(zeros) == 1
        assert zeros[0].multiplicity == 3

    def test_multiplicities_sum_to_degree(self):
        p = ComplexPolynomial.from_roots([1, 1, -2])
        zeros = solve_all(p)
        assert sum(z.multiplicity for z in zeros) == p.degree()
        for zero in zeros:
            assert p.apply(zero.value).abs() < 1e-6

    def test_input_is_not_modified(self):
        p = ComplexPolynomial.from_roots([3, -2, -1])
        before = p.coefficients()
        solve_all(p)
        assert p.coefficients() == before

    def test_rejects_non_positive_tolerance(self):
        with pytest.raises(ValueError):
            solve_all(ComplexPolynomial(1, 0, -2), None, 0.0)
