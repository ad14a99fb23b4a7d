"""
Fractal type definitions and parameter management.

A fractal is described by its generating map ``f``. Instead of iterating
``f`` forward, this library walks it backwards: every fractal type reports
how many pre-images a generic point has and computes the pre-images of a
given point. Two maps are provided, the quadratic map ``z -> z² + c``
(whose backward orbits trace Julia sets) and an arbitrary polynomial map.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .complex_number import ComplexValue
from .polynomial import ComplexPolynomial
from .solver import DivergenceError, Zero, solve, solve_all

logger = logging.getLogger(__name__)


@dataclass
class FractalParameters:
    """Base class for fractal parameters with validation."""

    def validate(self) -> None:
        """Validate parameter values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary."""
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FractalParameters':
        """Create parameters from dictionary."""
        return cls(**data)


class ComplexFractal(ABC):
    """Abstract base class for fractals given by a generating map."""

    def __init__(self, name: str, parameters: FractalParameters):
        """
        Initialize fractal type.

        Args:
            name: Human-readable name for the fractal
            parameters: Fractal-specific parameters
        """
        self.name = name
        self.parameters = parameters
        self.parameters.validate()

    @abstractmethod
    def dimensions(self) -> int:
        """Number of pre-images of a generic point (the branching factor)."""
        pass

    @abstractmethod
    def pre_images(self, z: ComplexValue) -> List[ComplexValue]:
        """
        Compute all pre-images of ``z`` under the generating map.

        Args:
            z: Target point; it is not modified

        Returns:
            New values ``w`` with ``f(w) == z``, in a deterministic order
        """
        pass

    def get_description(self) -> str:
        """Get a description of this fractal type."""
        return f"{self.name} fractal"


def _check_numeric(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be numeric")


@dataclass
class SquareParameters(FractalParameters):
    """Parameters of the quadratic map ``z -> z² + c``."""

    c_real: float = 1.0
    c_imag: float = 0.0

    def validate(self) -> None:
        _check_numeric("c_real", self.c_real)
        _check_numeric("c_imag", self.c_imag)

    @property
    def c(self) -> ComplexValue:
        """The additive constant as a new complex value."""
        return ComplexValue(self.c_real, self.c_imag)


class SquareFractal(ComplexFractal):
    """Backward orbits of ``z -> z² + c``."""

    def __init__(self, parameters: Optional[SquareParameters] = None):
        """
        Initialize the quadratic map.

        Args:
            parameters: Map constant, ``c = 1`` when omitted
        """
        if parameters is None:
            parameters = SquareParameters()
        super().__init__("Square", parameters)

    def dimensions(self) -> int:
        return 2

    def pre_images(self, z: ComplexValue) -> List[ComplexValue]:
        """The two square roots ``±sqrt(z - c)``, principal root first."""
        w = ComplexValue.of(z).sub_(self.parameters.c).sqrt_()
        return [w, w.negate()]

    def get_description(self) -> str:
        c = self.parameters.c
        return f"Square map: f(z) = z^2 + c, where c = {c}"


@dataclass
class PolynomialParameters(FractalParameters):
    """Parameters of a polynomial map ``z -> p(z)``."""

    # highest order first, each entry a number or a (real, imag) pair
    coefficients: Sequence[Any] = field(default_factory=lambda: [1.0, 0.0, 0.0])
    eps2: float = 1e-15
    # first starting point of every root search; chosen per point when unset
    seed_real: Optional[float] = None
    seed_imag: Optional[float] = None

    def validate(self) -> None:
        if len(self.coefficients) < 2:
            raise ValueError("coefficients must describe a polynomial of degree 1 or higher")
        leading = _coefficient(self.coefficients[0])
        if leading.is_zero():
            raise ValueError("leading coefficient must not be zero")
        if not self.eps2 > 0:
            raise ValueError("eps2 must be positive")
        for name in ("seed_real", "seed_imag"):
            if getattr(self, name) is not None:
                _check_numeric(name, getattr(self, name))

    def polynomial(self) -> ComplexPolynomial:
        return ComplexPolynomial(*[_coefficient(c) for c in self.coefficients])

    @property
    def seed(self) -> Optional[ComplexValue]:
        if self.seed_real is None and self.seed_imag is None:
            return None
        return ComplexValue(self.seed_real or 0.0, self.seed_imag or 0.0)


def _coefficient(value: Any) -> ComplexValue:
    """Accept numbers as well as ``(real, imag)`` pairs, as found in JSON configs."""
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ValueError(f"Invalid coefficient {value!r}: expected (real, imag)")
        return ComplexValue(value[0], value[1])
    try:
        return ComplexValue.of(value)
    except TypeError as e:
        raise ValueError(f"Invalid coefficient {value!r}") from e


class PolynomialFractal(ComplexFractal):
    """Backward orbits of a polynomial map."""

    def __init__(self, parameters: Optional[PolynomialParameters] = None):
        """
        Initialize the polynomial map.

        Args:
            parameters: Coefficients and solver settings, ``z²`` when omitted
        """
        if parameters is None:
            parameters = PolynomialParameters()
        super().__init__("Polynomial", parameters)
        self._polynomial = parameters.polynomial()
        logger.debug(f"Polynomial fractal of degree {self._polynomial.degree()}: {self._polynomial}")

    @property
    def polynomial(self) -> ComplexPolynomial:
        return self._polynomial.copy()

    def dimensions(self) -> int:
        return self._polynomial.degree()

    def pre_images(self, z: ComplexValue) -> List[ComplexValue]:
        """
        Roots of ``p(w) - z``.

        A root of multiplicity ``m`` is listed ``m`` times so that the
        number of pre-images always equals the degree.

        Raises:
            DivergenceError: if no starting point leads to a root
        """
        q = self._polynomial.translate_constant(ComplexValue.of(z).neg_())
        eps2 = self.parameters.eps2
        seeds = self._seeds(q)

        zeros: List[Zero] = []
        while q.degree() >= 3:
            zero = self._find_root(q, seeds, eps2)
            zeros.append(zero)
            for _ in range(zero.multiplicity):
                q = q.split_zero(zero.value)
        zeros.extend(solve_all(q, None, eps2))

        solutions = []
        for zero in zeros:
            solutions.extend(zero.value for _ in range(zero.multiplicity))
        return solutions

    def _seeds(self, q: ComplexPolynomial) -> List[ComplexValue]:
        """
        Starting points for the Newton search on ``q``.

        The n-th roots of ``-q(0) / lead`` solve the leading and constant
        terms alone, which makes them the exact pre-images for maps
        ``z^n + c``. Points on a circle of half the Cauchy root bound and
        the origin serve as fallbacks.
        """
        n = q.degree()
        lead = q.coefficient(n)

        r, phi = q.coefficient(0).neg_().div_(lead).polar()
        root_r = r ** (1.0 / n)
        seeds = [ComplexValue.from_polar(root_r, (phi + 2 * math.pi * k) / n) for k in range(n)]

        bound = 1.0 + max(q.coefficient(k).abs() / lead.abs() for k in range(n))
        seeds.extend(ComplexValue.from_polar(bound / 2, 2 * math.pi * k / n + 0.4) for k in range(n))
        seeds.append(ComplexValue.zero())
        return seeds

    def _find_root(self, q: ComplexPolynomial, seeds: List[ComplexValue], eps2: float) -> Zero:
        """Run ``solve`` from the seeds in order of increasing residual until one converges."""
        ordered = sorted(seeds, key=lambda s: q.apply(s).abs_squared())
        configured = self.parameters.seed
        if configured is not None:
            ordered.insert(0, configured)

        error: Optional[DivergenceError] = None
        for seed in ordered:
            try:
                return solve(q, seed, eps2)
            except DivergenceError as e:
                logger.debug(f"No root from seed {seed}: {e}")
                error = e
        raise error

    def get_description(self) -> str:
        return f"Polynomial map: f(z) = {self._polynomial}"


class FractalRegistry:
    """Registry of the available fractal types."""

    _fractals: Dict[str, type] = {
        'square': SquareFractal,
        'polynomial': PolynomialFractal,
    }

    _parameters: Dict[str, type] = {
        'square': SquareParameters,
        'polynomial': PolynomialParameters,
    }

    @classmethod
    def get(cls, name: str) -> type:
        """
        Get a fractal class by name.

        Args:
            name: Fractal identifier

        Returns:
            Fractal class
        """
        fractal_class = cls._fractals.get(name.lower())
        if fractal_class is None:
            available = ', '.join(cls._fractals.keys())
            raise ValueError(f"Unknown fractal type '{name}'. Available: {available}")
        return fractal_class

    @classmethod
    def list_fractals(cls) -> Dict[str, str]:
        """Get a dictionary of available fractals and their descriptions."""
        return {name: fractal_class().get_description()
                for name, fractal_class in cls._fractals.items()}

    @classmethod
    def create_fractal(cls, name: str, **kwargs) -> ComplexFractal:
        """
        Create a fractal instance with the given parameters.

        Args:
            name: Fractal type name
            **kwargs: Parameters for the fractal

        Returns:
            Configured fractal instance
        """
        fractal_class = cls.get(name)
        if not kwargs:
            return fractal_class()

        param_class = cls._parameters[name.lower()]
        return fractal_class(param_class(**kwargs))


# Constants c for which z -> z² + c has a well-known Julia set
SQUARE_PRESETS: Dict[str, SquareParameters] = {
    'dragon': SquareParameters(c_real=-0.75, c_imag=0.1),
    'spiral': SquareParameters(c_real=-0.4, c_imag=0.6),
    'dendrite': SquareParameters(c_real=0.0, c_imag=1.0),
    'lightning': SquareParameters(c_real=-0.8, c_imag=0.156),
    'rabbit': SquareParameters(c_real=-0.123, c_imag=0.745),
    'airplane': SquareParameters(c_real=-1.755, c_imag=0.0),
    'san_marco': SquareParameters(c_real=-0.75, c_imag=0.0),
    'siegel_disk': SquareParameters(c_real=-0.391, c_imag=-0.587),
}
