"""
Newton-Raphson root finding for complex polynomials.

``solve`` finds a single root together with an estimate of its
multiplicity; ``solve_all`` finds all roots by repeatedly dividing out the
roots already found (deflation). Multiplicities are best-effort: the
returned multiplicities always sum to the degree, but a cluster of nearly
coinciding roots may be reported as several simple roots or vice versa.

Numerical failures are reported through the ``SolverError`` hierarchy and
never retried here; choosing another seed is up to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .complex_number import ComplexValue, Number
from .polynomial import ComplexPolynomial

logger = logging.getLogger(__name__)

# |p(z)|² threshold used when callers do not supply their own
DEFAULT_EPS2 = 1e-16


class SolverError(ArithmeticError):
    """Base class for numerical failures of the root solver."""


class DivergenceError(SolverError):
    """The Newton residual stopped decreasing before reaching the tolerance."""


class DegenerateDerivativeError(SolverError):
    """The polynomial and all its derivatives vanish at a point (zero polynomial)."""


class IterationLimitError(SolverError):
    """A caller-imposed iteration cap was reached before convergence."""


@dataclass(frozen=True)
class Zero:
    """A root of a polynomial with its multiplicity."""

    _value: ComplexValue = field(hash=False)
    multiplicity: int = 1

    def __post_init__(self):
        if self.multiplicity < 1:
            raise ValueError("multiplicity must be at least 1")
        # keep our own copy, the caller may go on mutating its value
        object.__setattr__(self, '_value', ComplexValue.of(self._value))

    @property
    def value(self) -> ComplexValue:
        """The root as a new complex value."""
        return self._value.copy()

    def __str__(self) -> str:
        return f"{self._value} (multiplicity {self.multiplicity})"


def _validate_eps2(eps2: float) -> None:
    if not eps2 > 0.0:
        raise ValueError("eps2 must be positive")


def _multiplicity(p: ComplexPolynomial, z: ComplexValue, eps2: float) -> int:
    """
    Order of the first derivative that does not vanish at ``z``.

    Raises:
        DegenerateDerivativeError: if every derivative vanishes at ``z``
    """
    for k, derivative in enumerate(p.derivatives(), start=1):
        if derivative.apply(z).abs_squared() > eps2:
            return k
    raise DegenerateDerivativeError(f"All derivatives of {p} vanish at {z}")


def solve(polynomial: ComplexPolynomial, seed: Optional[Number] = None,
          eps2: float = DEFAULT_EPS2, max_iterations: Optional[int] = None) -> Zero:
    """
    Find one root of a polynomial by Newton's method.

    Each step evaluates the candidates ``z - k * p(z)/p'(z)`` for
    ``k = 1 .. degree - 1`` and keeps the one with the smallest residual,
    which speeds up convergence towards multiple roots. Once
    ``|p(z)|² <= eps2`` the multiplicity is read off the chain of
    derivatives at ``z``.

    Args:
        polynomial: Polynomial of degree 2 or higher
        seed: Starting point, the origin when omitted
        eps2: Squared residual tolerance, must be positive
        max_iterations: Optional cap on the number of Newton steps

    Returns:
        The root found and its multiplicity

    Raises:
        ValueError: if the degree is below 2 or ``eps2`` is not positive
        DivergenceError: if the residual does not decrease strictly
        DegenerateDerivativeError: if the polynomial vanishes identically
        IterationLimitError: if ``max_iterations`` steps were not enough
    """
    d = polynomial.degree()
    if d < 2:
        raise ValueError("Degree of polynomial must be at least 2")
    _validate_eps2(eps2)

    pd = polynomial.derivative()
    z = ComplexValue.zero() if seed is None else ComplexValue.of(seed)
    residual = polynomial.apply(z).abs_squared()
    iterations = 0

    while not residual <= eps2:
        if max_iterations is not None and iterations >= max_iterations:
            raise IterationLimitError(
                f"No root within {max_iterations} iterations (residual {residual:.3g})"
            )
        iterations += 1

        w = polynomial.apply(z)
        quotient = w.divide(pd.apply(z))

        if not quotient.is_finite():
            # p'(z) vanishes: either p is degenerate or z is a critical point
            _multiplicity(polynomial, z, eps2)
            raise DivergenceError(f"Newton step undefined at critical point {z}")

        best = None
        best_residual = residual
        for k in range(1, d):
            candidate = z.subtract(quotient.scale(k))
            candidate_residual = polynomial.apply(candidate).abs_squared()
            if best is None or candidate_residual < best_residual:
                best = candidate
                best_residual = candidate_residual

        if not best_residual < residual:
            raise DivergenceError(
                f"Residual stopped decreasing at {z} "
                f"({residual:.3g} -> {best_residual:.3g}) after {iterations} iterations"
            )

        z = best
        residual = best_residual

    multiplicity = _multiplicity(polynomial, z, eps2)
    logger.debug(f"Root {z} (multiplicity {multiplicity}) after {iterations} iterations")
    return Zero(z, multiplicity)


def _solve_linear(p: ComplexPolynomial) -> List[Zero]:
    return [Zero(p.coefficient(0).div_(p.coefficient(1)).neg_())]


def _solve_quadratic(p: ComplexPolynomial, eps2: float) -> List[Zero]:
    pn = p.normalize()
    half = pn.coefficient(1).scale_(-0.5)
    discriminant = half.square().sub_(pn.coefficient(0)).sqrt_()

    if discriminant.abs_squared() <= eps2:
        return [Zero(half, 2)]
    return [Zero(half.add(discriminant)), Zero(half.subtract(discriminant))]


def solve_all(polynomial: ComplexPolynomial, seed: Optional[Number] = None,
              eps2: float = DEFAULT_EPS2, max_iterations: Optional[int] = None) -> List[Zero]:
    """
    Find all roots of a polynomial.

    Degrees 1 and 2 are solved in closed form. For higher degrees a root
    is located with ``solve``, divided out as often as its multiplicity,
    and the search continues on the deflated polynomial seeded with the
    root just found.

    Args:
        polynomial: Any polynomial; degree -1 and 0 have no roots
        seed: Starting point for the first Newton search, the origin when omitted
        eps2: Squared residual tolerance, must be positive
        max_iterations: Optional cap on Newton steps per root

    Returns:
        Roots in the order they were found
    """
    _validate_eps2(eps2)

    zeros: List[Zero] = []
    p = polynomial
    z0 = ComplexValue.zero() if seed is None else ComplexValue.of(seed)

    while p.degree() >= 3:
        zero = solve(p, z0, eps2, max_iterations)
        zeros.append(zero)
        for _ in range(zero.multiplicity):
            p = p.split_zero(zero.value)
        z0 = zero.value

    n = p.degree()
    if n == 2:
        zeros.extend(_solve_quadratic(p, eps2))
    elif n == 1:
        zeros.extend(_solve_linear(p))

    logger.debug(f"Found {len(zeros)} distinct roots of a degree {polynomial.degree()} polynomial")
    return zeros
