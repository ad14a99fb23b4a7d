"""
Rasterization of point clouds in the complex plane.

The visible window is the bounding box of all finite points, widened so
that it always contains the origin. The image has a fixed width; its
height follows the aspect ratio of the window. Points are drawn as small
square dots on a white background.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

import numpy as np

from ..core.complex_number import ComplexValue
from ..core.enumerator import FractalNode
from .coloring import BLACK, WHITE, ColorRGB, Palette, get_palette

logger = logging.getLogger(__name__)

PointLike = Union[FractalNode, ComplexValue, complex]


@dataclass
class RasterResult:
    """Output of a rasterization."""
    image: np.ndarray  # (height, width, 3) uint8
    bounds: Tuple[float, float, float, float]  # xmin, xmax, ymin, ymax
    drawn: int
    skipped: int

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]


def _unpack(points: Iterable[PointLike]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split points into real parts, imaginary parts and tree depths."""
    re, im, depth = [], [], []
    for p in points:
        if isinstance(p, FractalNode):
            re.append(p.real)
            im.append(p.imag)
            depth.append(p.depth)
        elif isinstance(p, ComplexValue):
            re.append(p.real)
            im.append(p.imag)
            depth.append(0)
        else:
            z = complex(p)
            re.append(z.real)
            im.append(z.imag)
            depth.append(0)
    return (np.array(re, dtype=np.float64),
            np.array(im, dtype=np.float64),
            np.array(depth, dtype=np.int64))


class PointRasterizer:
    """Draws points of the complex plane into an RGB array."""

    def __init__(self, width: int = 800, palette: Optional[Union[Palette, str]] = None,
                 dot_size: int = 2, max_aspect: float = 8.0):
        """
        Initialize rasterizer.

        Args:
            width: Image width in pixels
            palette: Palette used to color points by depth; all points are
                black when omitted
            dot_size: Edge length of a drawn point in pixels
            max_aspect: Upper bound of height / width
        """
        if width < 1:
            raise ValueError("width must be positive")
        if dot_size < 1:
            raise ValueError("dot_size must be positive")
        if not max_aspect > 0:
            raise ValueError("max_aspect must be positive")

        self.width = width
        self.palette = get_palette(palette) if isinstance(palette, str) else palette
        self.dot_size = dot_size
        self.max_aspect = max_aspect

    @staticmethod
    def bounds(re: np.ndarray, im: np.ndarray) -> Tuple[float, float, float, float]:
        """Bounding box of the given coordinates, always including the origin."""
        if re.size == 0:
            return 0.0, 0.0, 0.0, 0.0
        return (min(0.0, float(re.min())), max(0.0, float(re.max())),
                min(0.0, float(im.min())), max(0.0, float(im.max())))

    def _height(self, span_x: float, span_y: float) -> int:
        if span_x <= 0.0 or span_y <= 0.0:
            return self.width
        height = int(self.width * span_y / span_x)
        if height <= 0:
            return self.width
        return min(height, int(self.width * self.max_aspect))

    def _colors(self, depth: np.ndarray) -> np.ndarray:
        if self.palette is None:
            return np.tile(np.array(BLACK.to_uint8_tuple(), dtype=np.uint8), (depth.size, 1))
        top = max(int(depth.max()), 1) if depth.size else 1
        return self.palette.to_uint8(depth / top)

    def render(self, points: Iterable[PointLike],
               background: ColorRGB = WHITE) -> RasterResult:
        """
        Rasterize points.

        Args:
            points: Tree nodes, complex values or Python complex numbers
            background: Background color

        Returns:
            Image and drawing statistics; NaN and infinite points are
            skipped and counted
        """
        re, im, depth = _unpack(points)

        finite = np.isfinite(re) & np.isfinite(im)
        skipped = int(re.size - np.count_nonzero(finite))
        if skipped:
            logger.warning(f"Skipping {skipped} non-finite points")
        re, im, depth = re[finite], im[finite], depth[finite]

        x_min, x_max, y_min, y_max = self.bounds(re, im)
        span_x = x_max - x_min
        span_y = y_max - y_min
        width = self.width
        height = self._height(span_x, span_y)

        image = np.empty((height, width, 3), dtype=np.uint8)
        image[:, :] = background.to_uint8_tuple()

        # a degenerate window is stretched to unit size
        scale_x = width / (span_x if span_x > 0.0 else 1.0)
        scale_y = height / (span_y if span_y > 0.0 else 1.0)

        # points on the right and bottom edge land on the last pixel
        x = np.minimum(np.floor(scale_x * (re - x_min)).astype(np.int64), width - 1)
        y = np.minimum(np.floor(scale_y * (y_max - im)).astype(np.int64), height - 1)
        colors = self._colors(depth)

        for dx in range(self.dot_size):
            for dy in range(self.dot_size):
                xs = x + dx
                ys = y + dy
                inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
                image[ys[inside], xs[inside]] = colors[inside]

        logger.debug(f"Rasterized {re.size} points into {width}x{height}")
        return RasterResult(image=image, bounds=(x_min, x_max, y_min, y_max),
                            drawn=int(re.size), skipped=skipped)
