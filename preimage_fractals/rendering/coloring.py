"""
Color palettes for point rendering.

Points of a pre-image tree are drawn in a single color or colored by
their depth in the tree. Depths are mapped to ``[0, 1]`` and looked up in
a palette by piecewise linear interpolation.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class ColorRGB:
    """RGB color representation."""
    r: float
    g: float
    b: float

    def __post_init__(self):
        """Validate RGB values."""
        for component in [self.r, self.g, self.b]:
            if not 0 <= component <= 1:
                raise ValueError("RGB components must be between 0 and 1")

    def to_tuple(self) -> Tuple[float, float, float]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_uint8_tuple(self) -> Tuple[int, int, int]:
        """Convert to 8-bit RGB tuple."""
        return (int(round(self.r * 255)), int(round(self.g * 255)), int(round(self.b * 255)))


BLACK = ColorRGB(0, 0, 0)
WHITE = ColorRGB(1, 1, 1)


class Palette:
    """Color palette management and interpolation."""

    def __init__(self, colors: Sequence[Union[ColorRGB, Tuple[float, float, float]]],
                 name: str = "Custom"):
        """
        Initialize color palette.

        Args:
            colors: List of colors in the palette
            name: Human-readable name for the palette
        """
        self.name = name
        self.colors: List[ColorRGB] = []

        for color in colors:
            if isinstance(color, ColorRGB):
                self.colors.append(color)
            elif isinstance(color, (tuple, list)) and len(color) == 3:
                self.colors.append(ColorRGB(*color))
            else:
                raise ValueError(f"Invalid color format: {color}")

        if len(self.colors) < 2:
            raise ValueError("Palette must contain at least 2 colors")

        self._stops = np.linspace(0.0, 1.0, len(self.colors))
        self._table = np.array([c.to_tuple() for c in self.colors], dtype=np.float64)

    def interpolate(self, t: Union[float, np.ndarray]) -> Union[ColorRGB, np.ndarray]:
        """
        Interpolate color at position t (0-1).

        Args:
            t: Position in palette (0-1) or array of positions

        Returns:
            A ColorRGB for a scalar, otherwise an array with a trailing
            axis of size 3
        """
        if isinstance(t, (int, float)):
            rgb = self._interpolate_array(np.array([t], dtype=np.float64))[0]
            return ColorRGB(*(float(v) for v in rgb))
        return self._interpolate_array(np.asarray(t, dtype=np.float64))

    def _interpolate_array(self, t: np.ndarray) -> np.ndarray:
        t = np.clip(t, 0.0, 1.0)
        channels = [np.interp(t, self._stops, self._table[:, k]) for k in range(3)]
        return np.stack(channels, axis=-1)

    def to_uint8(self, t: np.ndarray) -> np.ndarray:
        """8-bit RGB colors for an array of positions."""
        rgb = self._interpolate_array(np.asarray(t, dtype=np.float64))
        return np.round(rgb * 255).astype(np.uint8)


PALETTES: Dict[str, Palette] = {
    'black': Palette([BLACK, BLACK], name="Black"),
    'hot': Palette([
        ColorRGB(0, 0, 0),      # Black
        ColorRGB(1, 0, 0),      # Red
        ColorRGB(1, 1, 0),      # Yellow
    ], name="Hot"),
    'cool': Palette([
        ColorRGB(0, 0, 0),      # Black
        ColorRGB(0, 0, 1),      # Blue
        ColorRGB(0, 1, 1),      # Cyan
    ], name="Cool"),
    'fire': Palette([
        ColorRGB(0, 0, 0),          # Black
        ColorRGB(0.5, 0, 0),        # Dark red
        ColorRGB(1, 0, 0),          # Red
        ColorRGB(1, 0.5, 0),        # Orange
    ], name="Fire"),
    'ocean': Palette([
        ColorRGB(0, 0, 0.2),        # Deep blue
        ColorRGB(0, 0, 0.8),        # Blue
        ColorRGB(0, 0.5, 1),        # Light blue
        ColorRGB(0, 0.8, 0.8),      # Teal
    ], name="Ocean"),
    'rainbow': Palette([
        ColorRGB(1, 0, 0),      # Red
        ColorRGB(1, 0.5, 0),    # Orange
        ColorRGB(0.8, 0.8, 0),  # Yellow
        ColorRGB(0, 0.8, 0),    # Green
        ColorRGB(0, 0.8, 0.8),  # Cyan
        ColorRGB(0, 0, 1),      # Blue
        ColorRGB(0.5, 0, 1),    # Purple
    ], name="Rainbow"),
}


def get_palette(name: str) -> Palette:
    """Get color palette by name."""
    palette = PALETTES.get(name.lower())
    if palette is None:
        available = ', '.join(PALETTES.keys())
        raise ValueError(f"Unknown color palette '{name}'. Available: {available}")
    return palette


def list_palettes() -> List[str]:
    """Names of the built-in palettes."""
    return list(PALETTES.keys())
