"""
Rasterization of pre-image trees and image export.
"""

from .coloring import PALETTES, ColorRGB, Palette, get_palette, list_palettes
from .image_output import ImageExporter, RenderMetadata
from .point_renderer import PointRasterizer, RasterResult

__all__ = [
    "PALETTES",
    "ColorRGB",
    "Palette",
    "get_palette",
    "list_palettes",
    "ImageExporter",
    "RenderMetadata",
    "PointRasterizer",
    "RasterResult",
]
