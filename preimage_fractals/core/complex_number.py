"""
Mutable complex numbers with IEEE-754 semantics.

This module provides the complex value type used throughout the root
solver and the pre-image enumerator. Every operation is available twice:
as an in-place method with a trailing underscore (``z.add_(w)``), which
mutates ``z`` and returns it for chaining, and as a pure method or
operator (``z.add(w)``, ``z + w``) which leaves its operands untouched.

Values crossing a component boundary must be copied (``copy()``) or
produced by the pure API; in-place mutation is reserved for scopes that
own the value.

Division by zero, overflow and invalid operations never raise: they
produce infinite or NaN components exactly like hardware floating point,
so callers can detect such states with ``is_infinite()``/``is_nan()``.
"""

import math
from numbers import Complex as _ComplexNumber
from typing import Optional, Tuple, Union

import numpy as np

Number = Union['ComplexValue', complex, float, int]

_IEEE_ERRSTATE = {'divide': 'ignore', 'over': 'ignore', 'under': 'ignore', 'invalid': 'ignore'}


def _ieee(ufunc):
    """Wrap a numpy ufunc so it returns plain floats and never raises or warns."""
    def evaluate(*args):
        with np.errstate(**_IEEE_ERRSTATE):
            return float(ufunc(*args))
    evaluate.__name__ = ufunc.__name__
    return evaluate


_divide = _ieee(np.divide)
_power = _ieee(np.power)
_sqrt = _ieee(np.sqrt)
_exp = _ieee(np.exp)
_log = _ieee(np.log)
_sin = _ieee(np.sin)
_cos = _ieee(np.cos)
_sinh = _ieee(np.sinh)
_cosh = _ieee(np.cosh)
_arccos = _ieee(np.arccos)
_clip = _ieee(np.clip)


class ComplexValue:
    """Complex number ``real + i*imag`` backed by two doubles."""

    def __init__(self, real: float = 0.0, imag: float = 0.0):
        """
        Initialize complex value.

        Args:
            real: Real part
            imag: Imaginary part
        """
        self.real = float(real)
        self.imag = float(imag)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def zero(cls) -> 'ComplexValue':
        return cls(0.0, 0.0)

    @classmethod
    def one(cls) -> 'ComplexValue':
        return cls(1.0, 0.0)

    @classmethod
    def i(cls) -> 'ComplexValue':
        """The imaginary unit."""
        return cls(0.0, 1.0)

    @classmethod
    def from_polar(cls, r: float, phi: float) -> 'ComplexValue':
        """Create a value from modulus ``r`` and argument ``phi``."""
        return cls(r * _cos(phi), r * _sin(phi))

    @classmethod
    def of(cls, value: Number) -> 'ComplexValue':
        """
        Coerce a number into a new, independent complex value.

        Args:
            value: ComplexValue, Python/numpy complex, float or int

        Returns:
            A fresh ComplexValue (never the argument itself)
        """
        if isinstance(value, ComplexValue):
            return value.copy()
        if isinstance(value, _ComplexNumber):
            z = complex(value)
            return cls(z.real, z.imag)
        raise TypeError(f"Cannot convert {type(value).__name__} to ComplexValue")

    def copy(self) -> 'ComplexValue':
        """Return an independent copy of this value."""
        return ComplexValue(self.real, self.imag)

    def assign(self, real: Number, imag: Optional[float] = None) -> 'ComplexValue':
        """
        Overwrite this value in place.

        Accepts either two floats or a single number to copy from.
        """
        if imag is None:
            other = _coerce(real)
            self.real, self.imag = other.real, other.imag
        else:
            self.real, self.imag = float(real), float(imag)
        return self

    # ------------------------------------------------------------------
    # Accessors and predicates
    # ------------------------------------------------------------------

    def abs_squared(self) -> float:
        """Squared magnitude, ``re² + im²``."""
        return self.real * self.real + self.imag * self.imag

    def abs(self) -> float:
        return _sqrt(self.abs_squared())

    def arg(self) -> float:
        """Principal argument in ``(-pi, pi]``; the argument of zero is 0."""
        return self._arg(self.abs())

    def _arg(self, r: float) -> float:
        if r == 0.0:
            return 0.0
        ac = _arccos(_clip(self.real / r, -1.0, 1.0))
        return ac if self.imag >= 0.0 else -ac

    def polar(self) -> Tuple[float, float]:
        """Return ``(modulus, argument)``."""
        r = self.abs()
        return r, self._arg(r)

    def is_zero(self) -> bool:
        return self.real == 0.0 and self.imag == 0.0

    def is_nan(self) -> bool:
        return math.isnan(self.real) or math.isnan(self.imag)

    def is_infinite(self) -> bool:
        return math.isinf(self.real) or math.isinf(self.imag)

    def is_finite(self) -> bool:
        return math.isfinite(self.real) and math.isfinite(self.imag)

    def to_complex(self) -> complex:
        return complex(self.real, self.imag)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.real, self.imag)

    # ------------------------------------------------------------------
    # In-place arithmetic
    # ------------------------------------------------------------------

    def neg_(self) -> 'ComplexValue':
        self.real = -self.real
        self.imag = -self.imag
        return self

    def conj_(self) -> 'ComplexValue':
        self.imag = -self.imag
        return self

    def inv_(self) -> 'ComplexValue':
        """Replace this value by its reciprocal."""
        n = self.abs_squared()
        self.real = _divide(self.real, n)
        self.imag = _divide(self.imag, -n)
        return self

    def add_(self, w: Number) -> 'ComplexValue':
        w = _coerce(w)
        self.real += w.real
        self.imag += w.imag
        return self

    def sub_(self, w: Number) -> 'ComplexValue':
        w = _coerce(w)
        self.real -= w.real
        self.imag -= w.imag
        return self

    def mul_(self, w: Number) -> 'ComplexValue':
        w = _coerce(w)
        t = self.real * w.real - self.imag * w.imag
        self.imag = self.real * w.imag + self.imag * w.real
        self.real = t
        return self

    def scale_(self, t: float) -> 'ComplexValue':
        """Multiply by the real scalar ``t``."""
        self.real *= t
        self.imag *= t
        return self

    def imul_(self, t: float) -> 'ComplexValue':
        """Multiply by the imaginary scalar ``i*t``."""
        s = -self.imag * t
        self.imag = self.real * t
        self.real = s
        return self

    def div_(self, w: Number) -> 'ComplexValue':
        """
        Divide by ``w`` in place.

        A zero divisor yields infinite or NaN components instead of raising.
        """
        w = _coerce(w)
        nw = w.abs_squared()

        if nw == 0.0:
            self.real = _divide(self.real, 0.0)
            self.imag = _divide(self.imag, 0.0)
        else:
            t = _divide(self.real * w.real + self.imag * w.imag, nw)
            self.imag = _divide(self.imag * w.real - self.real * w.imag, nw)
            self.real = t
        return self

    def sqr_(self) -> 'ComplexValue':
        t = self.real * self.real - self.imag * self.imag
        self.imag *= 2 * self.real
        self.real = t
        return self

    def sqrt_(self) -> 'ComplexValue':
        """Principal square root; the sign of the result's imaginary part follows ``imag``."""
        a = self.abs()
        sign = 1.0 if self.imag >= 0.0 else -1.0

        self.imag = sign * _sqrt(max((a - self.real) / 2, 0.0))
        self.real = _sqrt(max((a + self.real) / 2, 0.0))
        return self

    def pow_(self, exponent: Number) -> 'ComplexValue':
        """
        Raise to ``exponent`` in place.

        Integer exponents use the polar form ``(r**n, n*phi)``, negative ones
        invert the positive power. Any other exponent ``w`` is evaluated as
        ``exp(w * log(z))`` on the principal branch.
        """
        if isinstance(exponent, (int, np.integer)):
            n = int(exponent)
            if n == 0:
                return self.assign(1.0, 0.0)
            if n < 0:
                return self.pow_(-n).inv_()
            if n > 1:
                r = self.abs()
                phin = self._arg(r) * n
                rn = _power(r, n)
                self.real = rn * _cos(phin)
                self.imag = rn * _sin(phin)
            return self

        w = ComplexValue.of(exponent)
        return self.log_().mul_(w).exp_()

    # ------------------------------------------------------------------
    # In-place transcendental functions
    # ------------------------------------------------------------------

    def exp_(self) -> 'ComplexValue':
        ex = _exp(self.real)
        return self.assign(ex * _cos(self.imag), ex * _sin(self.imag))

    def log_(self) -> 'ComplexValue':
        """Principal logarithm ``log|z| + i*arg(z)``."""
        r = self.abs()
        # argument first, it still needs the old real part
        self.imag = self._arg(r)
        self.real = _log(r)
        return self

    def sin_(self) -> 'ComplexValue':
        t = _sin(self.real) * _cosh(self.imag)
        self.imag = _cos(self.real) * _sinh(self.imag)
        self.real = t
        return self

    def cos_(self) -> 'ComplexValue':
        t = _cos(self.real) * _cosh(self.imag)
        self.imag = -_sin(self.real) * _sinh(self.imag)
        self.real = t
        return self

    def tan_(self) -> 'ComplexValue':
        w = self.copy().cos_()
        return self.sin_().div_(w)

    def cot_(self) -> 'ComplexValue':
        w = self.copy().sin_()
        return self.cos_().div_(w)

    def sinh_(self) -> 'ComplexValue':
        w = self.copy().neg_().exp_()
        return self.exp_().sub_(w).scale_(0.5)

    def cosh_(self) -> 'ComplexValue':
        w = self.copy().neg_().exp_()
        return self.exp_().add_(w).scale_(0.5)

    def tanh_(self) -> 'ComplexValue':
        w = self.copy().cosh_()
        return self.sinh_().div_(w)

    def coth_(self) -> 'ComplexValue':
        w = self.copy().sinh_()
        return self.cosh_().div_(w)

    def asin_(self) -> 'ComplexValue':
        """``-i * log(i*z + sqrt(1 - z²))``"""
        w = self.copy().sqr_().neg_()
        w.real += 1.0
        w.sqrt_().add_(self.imul_(1.0)).log_().imul_(-1.0)
        return self.assign(w)

    def acos_(self) -> 'ComplexValue':
        """``-i * log(z + i*sqrt(1 - z²))``"""
        w = self.copy().sqr_().neg_()
        w.real += 1.0
        w.sqrt_().imul_(1.0).add_(self).log_().imul_(-1.0)
        return self.assign(w)

    def atan_(self) -> 'ComplexValue':
        """``-i/2 * log((1 + i*z) / (1 - i*z))``"""
        self.imul_(1.0)
        w1 = ComplexValue.one().add_(self)
        w2 = ComplexValue.one().sub_(self)
        w1.div_(w2).log_().imul_(-0.5)
        return self.assign(w1)

    def acot_(self) -> 'ComplexValue':
        w = self.copy().atan_()
        return self.assign(math.pi / 2, 0.0).sub_(w)

    def arsinh_(self) -> 'ComplexValue':
        w = self.copy().sqr_().add_(ComplexValue.one()).sqrt_()
        return self.assign(w.add_(self).log_())

    def arcosh_(self) -> 'ComplexValue':
        w1 = self.copy().add_(ComplexValue.one()).sqrt_()
        w2 = self.copy().sub_(ComplexValue.one()).sqrt_()
        w1.mul_(w2).add_(self).log_()
        return self.assign(w1)

    def artanh_(self) -> 'ComplexValue':
        """``1/2 * log((1 + z) / (1 - z))``"""
        w = self.copy()
        w.real -= 1.0
        w.neg_()
        self.real += 1.0
        return self.div_(w).log_().scale_(0.5)

    def arcoth_(self) -> 'ComplexValue':
        """``1/2 * log((z + 1) / (z - 1))``"""
        w = self.copy()
        w.real -= 1.0
        self.real += 1.0
        return self.div_(w).log_().scale_(0.5)

    # ------------------------------------------------------------------
    # Pure counterparts
    # ------------------------------------------------------------------

    def negate(self) -> 'ComplexValue':
        return self.copy().neg_()

    def conjugate(self) -> 'ComplexValue':
        return self.copy().conj_()

    def reciprocal(self) -> 'ComplexValue':
        return self.copy().inv_()

    def add(self, w: Number) -> 'ComplexValue':
        return self.copy().add_(w)

    def subtract(self, w: Number) -> 'ComplexValue':
        return self.copy().sub_(w)

    def multiply(self, w: Number) -> 'ComplexValue':
        return self.copy().mul_(w)

    def scale(self, t: float) -> 'ComplexValue':
        return self.copy().scale_(t)

    def imul(self, t: float) -> 'ComplexValue':
        return self.copy().imul_(t)

    def divide(self, w: Number) -> 'ComplexValue':
        return self.copy().div_(w)

    def square(self) -> 'ComplexValue':
        return self.copy().sqr_()

    def sqrt(self) -> 'ComplexValue':
        return self.copy().sqrt_()

    def pow(self, exponent: Number) -> 'ComplexValue':
        return self.copy().pow_(exponent)

    def exp(self) -> 'ComplexValue':
        return self.copy().exp_()

    def log(self) -> 'ComplexValue':
        return self.copy().log_()

    def sin(self) -> 'ComplexValue':
        return self.copy().sin_()

    def cos(self) -> 'ComplexValue':
        return self.copy().cos_()

    def tan(self) -> 'ComplexValue':
        return self.copy().tan_()

    def cot(self) -> 'ComplexValue':
        return self.copy().cot_()

    def sinh(self) -> 'ComplexValue':
        return self.copy().sinh_()

    def cosh(self) -> 'ComplexValue':
        return self.copy().cosh_()

    def tanh(self) -> 'ComplexValue':
        return self.copy().tanh_()

    def coth(self) -> 'ComplexValue':
        return self.copy().coth_()

    def asin(self) -> 'ComplexValue':
        return self.copy().asin_()

    def acos(self) -> 'ComplexValue':
        return self.copy().acos_()

    def atan(self) -> 'ComplexValue':
        return self.copy().atan_()

    def acot(self) -> 'ComplexValue':
        return self.copy().acot_()

    def arsinh(self) -> 'ComplexValue':
        return self.copy().arsinh_()

    def arcosh(self) -> 'ComplexValue':
        return self.copy().arcosh_()

    def artanh(self) -> 'ComplexValue':
        return self.copy().artanh_()

    def arcoth(self) -> 'ComplexValue':
        return self.copy().arcoth_()

    # ------------------------------------------------------------------
    # Operators (all pure)
    # ------------------------------------------------------------------

    def __add__(self, other: Number) -> 'ComplexValue':
        if not _is_number(other):
            return NotImplemented
        return self.copy().add_(other)

    def __radd__(self, other: Number) -> 'ComplexValue':
        return self.__add__(other)

    def __sub__(self, other: Number) -> 'ComplexValue':
        if not _is_number(other):
            return NotImplemented
        return self.copy().sub_(other)

    def __rsub__(self, other: Number) -> 'ComplexValue':
        if not _is_number(other):
            return NotImplemented
        return ComplexValue.of(other).sub_(self)

    def __mul__(self, other: Number) -> 'ComplexValue':
        if not _is_number(other):
            return NotImplemented
        return self.copy().mul_(other)

    def __rmul__(self, other: Number) -> 'ComplexValue':
        return self.__mul__(other)

    def __truediv__(self, other: Number) -> 'ComplexValue':
        if not _is_number(other):
            return NotImplemented
        return self.copy().div_(other)

    def __rtruediv__(self, other: Number) -> 'ComplexValue':
        if not _is_number(other):
            return NotImplemented
        return ComplexValue.of(other).div_(self)

    def __pow__(self, exponent: Number) -> 'ComplexValue':
        if not _is_number(exponent):
            return NotImplemented
        return self.copy().pow_(exponent)

    def __neg__(self) -> 'ComplexValue':
        return self.copy().neg_()

    def __pos__(self) -> 'ComplexValue':
        return self.copy()

    def __abs__(self) -> float:
        return self.abs()

    def __complex__(self) -> complex:
        return self.to_complex()

    def __eq__(self, other) -> bool:
        if isinstance(other, ComplexValue):
            return self.real == other.real and self.imag == other.imag
        if isinstance(other, _ComplexNumber):
            z = complex(other)
            return self.real == z.real and self.imag == z.imag
        return NotImplemented

    # mutable, therefore unhashable
    __hash__ = None

    def __repr__(self) -> str:
        return f"ComplexValue({self.real!r}, {self.imag!r})"

    def __str__(self) -> str:
        if self.imag >= 0 or math.isnan(self.imag):
            return f"{self.real:.10g} + {abs(self.imag):.10g}i"
        return f"{self.real:.10g} - {-self.imag:.10g}i"


def _is_number(value) -> bool:
    return isinstance(value, (ComplexValue, _ComplexNumber))


def _coerce(value: Number) -> ComplexValue:
    """Return ``value`` itself when it already is a ComplexValue, else a converted copy."""
    if isinstance(value, ComplexValue):
        return value
    return ComplexValue.of(value)
