"""
Tests for the mutable complex value type.
"""

import cmath
import math

import pytest

from preimage_fractals.core.complex_number import ComplexValue

APPROX = dict(rel=1e-7, abs=1e-5)


def close(z: ComplexValue, w, tol: float = 1e-10) -> bool:
    return z.to_complex() == pytest.approx(complex(w), abs=tol)


class TestConstruction:
    """Constructors and accessors."""

    def test_named_constants(self):
        assert ComplexValue.zero().to_tuple() == (0.0, 0.0)
        assert ComplexValue.one().to_tuple() == (1.0, 0.0)
        assert ComplexValue.i().to_tuple() == (0.0, 1.0)

    def test_components(self):
        z = ComplexValue(77.7, -2.718)
        assert z.real == 77.7
        assert z.imag == -2.718
        assert z.to_complex() == complex(77.7, -2.718)
        assert ComplexValue(2.718).imag == 0.0

    def test_of_coerces_numbers(self):
        assert ComplexValue.of(3) == ComplexValue(3.0, 0.0)
        assert ComplexValue.of(1.5) == ComplexValue(1.5, 0.0)
        assert ComplexValue.of(2 - 1j) == ComplexValue(2.0, -1.0)

    def test_of_returns_independent_copy(self):
        z = ComplexValue(1, 2)
        w = ComplexValue.of(z)
        w.add_(1)
        assert z == ComplexValue(1, 2)

    def test_of_rejects_non_numbers(self):
        with pytest.raises(TypeError):
            ComplexValue.of("1+2j")

    def test_assign(self):
        z = ComplexValue(77.7, -2.718)
        w = z.assign(4.7, 2.5)
        assert w is z
        assert z == ComplexValue(4.7, 2.5)

        z.assign(ComplexValue(-0.7, -1.3))
        assert z == ComplexValue(-0.7, -1.3)

    def test_copy_is_independent(self):
        z = ComplexValue(0.7, 1.3)
        w = z.copy()
        assert w == z
        z.neg_()
        assert w == ComplexValue(0.7, 1.3)

    def test_polar_argument(self):
        assert ComplexValue.zero().arg() == 0.0

        n = 36
        for i in range(-n // 2, n // 2):
            phi = 2 * math.pi * i / n
            z = ComplexValue.from_polar(1, phi)
            assert z.arg() == pytest.approx(phi, abs=1e-10)
            assert cmath.phase(z.to_complex()) == pytest.approx(phi, abs=1e-10)

            r, a = z.polar()
            assert r == pytest.approx(1.0, abs=1e-10)
            assert a == pytest.approx(phi, abs=1e-10)

    def test_argument_of_negative_real_axis_is_pi(self):
        assert ComplexValue(-2, 0).arg() == pytest.approx(math.pi)
        assert ComplexValue(-2, -0.0).arg() == pytest.approx(math.pi)

    def test_abs(self):
        z = ComplexValue(3, 4)
        assert z.abs_squared() == 25.0
        assert z.abs() == 5.0
        assert abs(z) == 5.0


class TestArithmetic:
    """In-place and pure arithmetic."""

    def test_involutions(self):
        z = ComplexValue.zero().neg_()
        assert close(z, 0)

        z.assign(-3, 4).neg_()
        assert z == ComplexValue(3, -4)

        z.conj_()
        assert z == ComplexValue(3, 4)

        z.inv_()
        assert close(z, 0.12 - 0.16j)
        assert close(z, 1 / (3 + 4j))
        z.inv_()
        assert close(z, 3 + 4j)

        z.assign(-3, 4).neg_().conj_().inv_().inv_()
        assert close(z, 3 + 4j)

    def test_pure_involutions(self, some_numbers):
        for z in some_numbers:
            assert z.conjugate().conjugate() == z
            assert z.negate().negate() == z
            assert close(z.reciprocal().reciprocal(), z.to_complex(), 1e-9)

    def test_addition_chain(self):
        z = ComplexValue.one().add_(ComplexValue.i())
        assert z == ComplexValue(1, 1)
        z.sub_(ComplexValue(2, 4)).add_(ComplexValue(0, 2))
        assert z == ComplexValue(-1, -1)

    def test_zero_multiplication(self, some_numbers):
        for z in some_numbers:
            assert close(z.scale(0), 0)
            assert close(z.imul(0), 0)
            assert close(z.multiply(ComplexValue.zero()), 0)

    def test_multiplication_and_division(self, some_numbers):
        for z in some_numbers:
            for w in some_numbers:
                assert close(z.multiply(w), z.to_complex() * w.to_complex(), 1e-9)
                assert close(z.divide(w), z.to_complex() / w.to_complex())

    def test_imaginary_scalar(self):
        assert ComplexValue(1, 2).imul_(3) == ComplexValue(-6, 3)

    def test_square_and_root(self, some_numbers):
        for z in some_numbers:
            c = z.to_complex()
            assert close(z.square(), c * c, 1e-9)
            assert close(z.sqrt(), cmath.sqrt(c))

    def test_sqrt_of_negative_real(self):
        assert ComplexValue(-4, 0).sqrt() == ComplexValue(0, 2)
        # a zero imaginary part counts as non-negative, whatever its sign
        assert ComplexValue(-4, -0.0).sqrt() == ComplexValue(0, 2)
        assert close(ComplexValue(-4, -1e-30).sqrt(), -2j)

    def test_power_by_zero(self, some_numbers):
        for z in some_numbers:
            assert z.pow(0) == ComplexValue.one()

    def test_power_by_integer(self, some_numbers):
        for z in some_numbers:
            for p in range(-3, 4):
                expected = z.to_complex() ** p
                assert z.pow(p).to_complex() == pytest.approx(expected, **APPROX)

    def test_power_by_complex(self, some_small_numbers):
        for z in some_small_numbers:
            for w in some_small_numbers:
                expected = z.to_complex() ** w.to_complex()
                assert z.pow(w).to_complex() == pytest.approx(expected, **APPROX)

    def test_pure_methods_leave_operands_untouched(self):
        z = ComplexValue(1, 2)
        w = ComplexValue(3, -1)
        z.add(w)
        z.multiply(w)
        z.divide(w)
        z.sqrt()
        z.exp()
        assert z == ComplexValue(1, 2)
        assert w == ComplexValue(3, -1)

    def test_in_place_methods_return_self(self):
        z = ComplexValue(1, 2)
        assert z.add_(1) is z
        assert z.mul_(2) is z
        assert z.sqrt_() is z
        assert z.log_() is z

    def test_operators(self):
        z = ComplexValue(1, 2)
        w = ComplexValue(3, -1)
        assert z + w == ComplexValue(4, 1)
        assert z - w == ComplexValue(-2, 3)
        assert z * w == ComplexValue(5, 5)
        assert close(z / w, (1 + 2j) / (3 - 1j))
        assert 1 + z == ComplexValue(2, 2)
        assert 2 * z == ComplexValue(2, 4)
        assert -z == ComplexValue(-1, -2)
        assert close(z ** 2, (1 + 2j) ** 2)
        assert complex(z) == 1 + 2j
        assert z == ComplexValue(1, 2)

    def test_equality_with_python_numbers(self):
        assert ComplexValue(1, 2) == 1 + 2j
        assert ComplexValue(3, 0) == 3
        assert ComplexValue(3, 0) != 3.5

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(ComplexValue(1, 2))

    def test_str(self):
        assert str(ComplexValue(1, -2)) == "1 - 2i"
        assert str(ComplexValue(1.5, 2)) == "1.5 + 2i"
        assert str(ComplexValue(-1, -0.0)) == "-1 + 0i"


class TestTranscendental:
    """Exponential, logarithm, trigonometric and hyperbolic functions."""

    def test_exp_and_log(self, some_small_numbers):
        for z in some_small_numbers:
            c = z.to_complex()
            assert z.exp().to_complex() == pytest.approx(cmath.exp(c), **APPROX)
            assert z.log().to_complex() == pytest.approx(cmath.log(c), **APPROX)

    @pytest.mark.parametrize("name", ["sin", "cos", "tan", "sinh", "cosh", "tanh"])
    def test_direct_functions(self, some_small_numbers, name):
        for z in some_small_numbers:
            expected = getattr(cmath, name)(z.to_complex())
            assert getattr(z, name)().to_complex() == pytest.approx(expected, **APPROX)

    @pytest.mark.parametrize("name", ["asin", "acos", "atan"])
    def test_inverse_trigonometric_functions(self, some_small_numbers, name):
        for z in some_small_numbers:
            expected = getattr(cmath, name)(z.to_complex())
            assert getattr(z, name)().to_complex() == pytest.approx(expected, **APPROX)

    @pytest.mark.parametrize("inverse, function", [
        ("acot", "cot"),
        ("arsinh", "sinh"),
        ("arcosh", "cosh"),
        ("artanh", "tanh"),
        ("arcoth", "coth"),
    ])
    def test_inverse_functions_round_trip(self, some_small_numbers, inverse, function):
        for z in some_small_numbers:
            w = getattr(getattr(z, inverse)(), function)()
            assert w.to_complex() == pytest.approx(z.to_complex(), **APPROX)

    def test_cot_and_coth(self, some_small_numbers):
        for z in some_small_numbers:
            c = z.to_complex()
            assert z.cot().to_complex() == pytest.approx(1 / cmath.tan(c), **APPROX)
            assert z.coth().to_complex() == pytest.approx(1 / cmath.tanh(c), **APPROX)


class TestFloatingPointDegeneracy:
    """Degenerate operations produce NaN or infinity instead of raising."""

    def test_division_by_zero(self):
        z = ComplexValue(1, 0).div_(ComplexValue.zero())
        assert z.is_infinite()
        assert z.is_nan()
        assert not z.is_finite()

    def test_reciprocal_of_zero(self):
        assert ComplexValue.zero().reciprocal().is_nan()

    def test_log_of_zero(self):
        z = ComplexValue.zero().log()
        assert z.real == -math.inf
        assert z.imag == 0.0

    def test_exp_overflow(self):
        z = ComplexValue(1000, 0).exp()
        assert z.real == math.inf

    def test_nan_propagates(self):
        z = ComplexValue(math.nan, 1).add(ComplexValue(1, 1)).multiply(2)
        assert z.is_nan()
        assert z.sqrt().is_nan()

    def test_predicates(self):
        assert ComplexValue.zero().is_zero()
        assert not ComplexValue(0, 1e-300).is_zero()
        assert ComplexValue(1, 2).is_finite()
        assert ComplexValue(math.inf, 0).is_infinite()
