"""
Complex polynomials.

Polynomials are values: every producing operation returns a new
polynomial and coefficients are copied on the way in and on the way out,
so no caller can reach into another polynomial's storage. The only
mutator is ``move``, which shifts the constant term of a polynomial the
caller owns.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from .complex_number import ComplexValue, Number


class ComplexPolynomial:
    """Polynomial with complex coefficients."""

    def __init__(self, *coefficients: Number):
        """
        Initialize polynomial from its coefficients.

        The highest order coefficient comes first, as the polynomial is
        written on paper: ``ComplexPolynomial(1, 0, -2)`` is ``z² - 2``.
        Without arguments the empty polynomial (degree -1) is created.
        The leading coefficient of a non-constant polynomial must not be
        zero.

        Args:
            *coefficients: Coefficients, highest order first
        """
        # ascending storage, index == power
        self._coefficients: List[ComplexValue] = [ComplexValue.of(c) for c in reversed(coefficients)]

    @classmethod
    def _ascending(cls, coefficients: List[ComplexValue]) -> 'ComplexPolynomial':
        """Adopt an ascending coefficient list built by this module."""
        p = cls()
        p._coefficients = coefficients
        return p

    @classmethod
    def empty(cls) -> 'ComplexPolynomial':
        return cls()

    @classmethod
    def one(cls) -> 'ComplexPolynomial':
        return cls(ComplexValue.one())

    @classmethod
    def from_roots(cls, roots: Iterable[Number]) -> 'ComplexPolynomial':
        """
        Build the monic polynomial with the given roots.

        Args:
            roots: Roots, repeated according to their multiplicity

        Returns:
            Product of the linear factors ``(z - root)``; ``1`` for no roots
        """
        p = cls.one()
        for root in roots:
            p = p.multiply(cls(ComplexValue.one(), ComplexValue.of(root).neg_()))
        return p

    def degree(self) -> int:
        """Degree of this polynomial, -1 for the empty polynomial."""
        return len(self._coefficients) - 1

    def coefficient(self, k: int) -> ComplexValue:
        """Coefficient of ``z**k``; zero for ``k`` outside ``0..degree``."""
        if 0 <= k < len(self._coefficients):
            return self._coefficients[k].copy()
        return ComplexValue.zero()

    def coefficients(self) -> List[ComplexValue]:
        """All coefficients, highest order first."""
        return [c.copy() for c in reversed(self._coefficients)]

    def copy(self) -> 'ComplexPolynomial':
        return ComplexPolynomial._ascending([c.copy() for c in self._coefficients])

    def apply(self, z: Number) -> ComplexValue:
        """
        Evaluate this polynomial at ``z``.

        Args:
            z: Point of evaluation

        Returns:
            ``p(z)``; zero for the empty polynomial
        """
        n = self.degree()
        if n < 0:
            return ComplexValue.zero()

        z = ComplexValue.of(z)
        powers = []
        power = ComplexValue.one()
        for _ in range(n + 1):
            powers.append(power.copy())
            power.mul_(z)

        s = ComplexValue.zero()
        for c, zk in zip(self._coefficients, powers):
            s.add_(zk.mul_(c))
        return s

    __call__ = apply

    def normalize(self) -> 'ComplexPolynomial':
        """Return the monic polynomial obtained by dividing by the leading coefficient."""
        n = self.degree()
        if n < 0:
            return ComplexPolynomial()

        d = self._coefficients[n]
        coefficients = [c.divide(d) for c in self._coefficients[:n]]
        coefficients.append(ComplexValue.one())
        return ComplexPolynomial._ascending(coefficients)

    def move(self, offset: Number) -> None:
        """
        Add ``offset`` to the constant term in place.

        This is the only mutating operation; use ``translate_constant`` for
        a polynomial you do not own.
        """
        if self._coefficients:
            self._coefficients[0].add_(ComplexValue.of(offset))

    def translate_constant(self, offset: Number) -> 'ComplexPolynomial':
        """Return ``p(z) + offset`` as a new polynomial."""
        p = self.copy()
        p.move(offset)
        return p

    def derivative(self) -> 'ComplexPolynomial':
        """
        Formal derivative.

        Returns:
            The derivative; the empty polynomial for degree 0 or -1
        """
        n = self.degree()
        if n <= 0:
            return ComplexPolynomial()

        return ComplexPolynomial._ascending(
            [self._coefficients[k].scale(k) for k in range(1, n + 1)]
        )

    def derivatives(self) -> Iterator['ComplexPolynomial']:
        """Yield the first, second, ... derivative until the empty polynomial is reached."""
        p = self.derivative()
        while p.degree() >= 0:
            yield p
            p = p.derivative()

    def integral(self, constant: Optional[Number] = None) -> 'ComplexPolynomial':
        """
        Antiderivative.

        Args:
            constant: Additive constant, zero when omitted

        Returns:
            Polynomial ``P`` with ``P' == self`` and ``P(0) == constant``
        """
        c = ComplexValue.zero() if constant is None else ComplexValue.of(constant)
        coefficients = [c]
        coefficients.extend(a.scale(1.0 / (k + 1)) for k, a in enumerate(self._coefficients))
        return ComplexPolynomial._ascending(coefficients)

    def multiply(self, other: 'ComplexPolynomial') -> 'ComplexPolynomial':
        """
        Product of two polynomials.

        Multiplying with the empty polynomial yields the empty polynomial.
        """
        n = self.degree()
        m = other.degree()

        if n < 0 or m < 0:
            return ComplexPolynomial()

        if n < m:
            return other.multiply(self)

        a = self._coefficients
        b = other._coefficients

        if m == 0:
            b0 = b[0]
            return ComplexPolynomial._ascending([c.multiply(b0) for c in a])

        product = [ComplexValue.zero() for _ in range(n + m + 1)]
        for i, ai in enumerate(a):
            for j, bj in enumerate(b):
                product[i + j].add_(ai.multiply(bj))
        return ComplexPolynomial._ascending(product)

    def divide_by_root(self, root: Number) -> Tuple['ComplexPolynomial', ComplexValue]:
        """
        Synthetic division by the linear factor ``(z - root)``.

        Args:
            root: The root ``η`` to divide out

        Returns:
            Tuple of (quotient of degree ``n - 1``, remainder ``p(η)``)
        """
        n = self.degree()
        if n <= 0:
            return ComplexPolynomial(), self.coefficient(0)

        eta = ComplexValue.of(root)
        quotient = [ComplexValue.zero() for _ in range(n)]
        carry = ComplexValue.zero()

        for k in range(n - 1, -1, -1):
            carry.add_(self._coefficients[k + 1])
            quotient[k] = carry.copy()
            carry.mul_(eta)

        remainder = carry.add_(self._coefficients[0])
        return ComplexPolynomial._ascending(quotient), remainder

    def split_zero(self, root: Number) -> 'ComplexPolynomial':
        """Return ``p(z) / (z - root)`` for a root of this polynomial, dropping the remainder."""
        quotient, _ = self.divide_by_root(root)
        return quotient

    def __mul__(self, other: 'ComplexPolynomial') -> 'ComplexPolynomial':
        if not isinstance(other, ComplexPolynomial):
            return NotImplemented
        return self.multiply(other)

    def __len__(self) -> int:
        return len(self._coefficients)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ComplexPolynomial):
            return NotImplemented
        return self._coefficients == other._coefficients

    __hash__ = None

    def __repr__(self) -> str:
        args = ', '.join(str(c.to_complex()) for c in reversed(self._coefficients))
        return f"ComplexPolynomial({args})"

    def __str__(self) -> str:
        if not self._coefficients:
            return "0"
        terms = []
        for k in range(self.degree(), -1, -1):
            c = self._coefficients[k]
            if c.is_zero() and k > 0:
                continue
            power = "" if k == 0 else ("z" if k == 1 else f"z^{k}")
            terms.append(f"({c}){power}")
        return " + ".join(terms)
