"""
Pre-image fractals.

Instead of iterating a complex map forward, this library follows it
backwards: the pre-images of a point, their pre-images and so on form a
tree whose points accumulate on the Julia set of the map.

Key Features:
- Mutable complex values with IEEE-754 semantics
- Complex polynomial algebra
- Newton-Raphson root finding with deflation and multiplicities
- Bounded enumeration of iterated pre-images
- Point rasterization and PNG/JPEG/TIFF export

Example usage:
    >>> from preimage_fractals import FractalRenderer, SquareFractal, SquareParameters
    >>> fractal = SquareFractal(SquareParameters(c_real=-0.4, c_imag=0.6))
    >>> renderer = FractalRenderer()
    >>> image = renderer.render(fractal, 1.0)
"""

__version__ = "1.0.0"
__author__ = "Pre-image Fractals Team"

from preimage_fractals.core.complex_number import ComplexValue
from preimage_fractals.core.polynomial import ComplexPolynomial
from preimage_fractals.core.solver import Zero, solve, solve_all
from preimage_fractals.core.fractal_types import (
    FractalRegistry,
    PolynomialFractal,
    PolynomialParameters,
    SquareFractal,
    SquareParameters,
)
from preimage_fractals.core.enumerator import (
    EnumerationLimits,
    FractalNode,
    enumerate_branching_tree,
    enumerate_pre_images,
)
from preimage_fractals.rendering.image_output import ImageExporter
from preimage_fractals.rendering.point_renderer import PointRasterizer

# Main API classes
from preimage_fractals.api import FractalRenderer, RenderConfig

__all__ = [
    "FractalRenderer",
    "RenderConfig",
    "ComplexValue",
    "ComplexPolynomial",
    "Zero",
    "solve",
    "solve_all",
    "FractalRegistry",
    "PolynomialFractal",
    "PolynomialParameters",
    "SquareFractal",
    "SquareParameters",
    "EnumerationLimits",
    "FractalNode",
    "enumerate_branching_tree",
    "enumerate_pre_images",
    "ImageExporter",
    "PointRasterizer",
]
