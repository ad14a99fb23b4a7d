"""
Core mathematics: complex values, polynomials, root finding and pre-image enumeration.
"""

from .complex_number import ComplexValue
from .polynomial import ComplexPolynomial
from .solver import (
    DEFAULT_EPS2,
    DegenerateDerivativeError,
    DivergenceError,
    IterationLimitError,
    SolverError,
    Zero,
    solve,
    solve_all,
)
from .fractal_types import (
    SQUARE_PRESETS,
    ComplexFractal,
    FractalParameters,
    FractalRegistry,
    PolynomialFractal,
    PolynomialParameters,
    SquareFractal,
    SquareParameters,
)
from .enumerator import (
    DEFAULT_MAX_NODES,
    EnumerationLimits,
    FractalNode,
    NodeLimitExceededError,
    enumerate_branching_tree,
    enumerate_pre_images,
    node_values,
    projected_node_count,
)

__all__ = [
    "ComplexValue",
    "ComplexPolynomial",
    "DEFAULT_EPS2",
    "DegenerateDerivativeError",
    "DivergenceError",
    "IterationLimitError",
    "SolverError",
    "Zero",
    "solve",
    "solve_all",
    "SQUARE_PRESETS",
    "ComplexFractal",
    "FractalParameters",
    "FractalRegistry",
    "PolynomialFractal",
    "PolynomialParameters",
    "SquareFractal",
    "SquareParameters",
    "DEFAULT_MAX_NODES",
    "EnumerationLimits",
    "FractalNode",
    "NodeLimitExceededError",
    "enumerate_branching_tree",
    "enumerate_pre_images",
    "node_values",
    "projected_node_count",
]
