"""
Main API classes for pre-image rendering.

This module provides the high-level interface, combining enumeration,
rasterization and export into easy-to-use classes.
"""

import json
import logging
import time
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from .core.complex_number import ComplexValue, Number
from .core.enumerator import (
    DEFAULT_MAX_NODES,
    EnumerationLimits,
    FractalNode,
    enumerate_branching_tree,
    enumerate_pre_images,
)
from .core.fractal_types import ComplexFractal
from .rendering.coloring import get_palette
from .rendering.image_output import ImageExporter, RenderMetadata
from .rendering.point_renderer import PointRasterizer, RasterResult

logger = logging.getLogger(__name__)


@dataclass
class RenderConfig:
    """Configuration for pre-image rendering."""

    # Image parameters
    width: int = 800
    dot_size: int = 2

    # Enumeration
    max_depth: int = 10
    max_nodes: int = DEFAULT_MAX_NODES

    # Coloring
    palette: str = 'hot'
    color_by_depth: bool = False

    # Output
    output_format: str = 'png'
    jpeg_quality: int = 95
    save_metadata: bool = True

    def validate(self):
        """Validate configuration parameters."""
        if self.width <= 0:
            raise ValueError("width must be positive")

        if self.dot_size <= 0:
            raise ValueError("dot_size must be positive")

        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")

        if self.max_nodes < 1:
            raise ValueError("max_nodes must be positive")

        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError("jpeg_quality must be between 1 and 100")

        if self.output_format.lower() not in ('png', 'jpeg', 'jpg', 'tiff', 'tif'):
            raise ValueError(f"Unsupported output format '{self.output_format}'")

        get_palette(self.palette)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderConfig':
        """
        Create configuration from a dictionary.

        Raises:
            ValueError: for keys that are not configuration parameters
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration parameter(s): {', '.join(sorted(unknown))}")
        config = cls(**data)
        config.validate()
        return config

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'RenderConfig':
        """Load configuration from a JSON file."""
        path = Path(path)
        with open(path, 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a JSON object")
        logger.debug(f"Loaded configuration from {path}")
        return cls.from_dict(data)


class FractalRenderer:
    """Enumerates pre-image trees and renders them to images."""

    def __init__(self, config: Optional[RenderConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Rendering configuration (uses defaults if None)
        """
        self.config = config or RenderConfig()
        self.config.validate()

        self.image_exporter = ImageExporter(self.config.jpeg_quality)

        logger.info(f"FractalRenderer initialized: width={self.config.width}, "
                    f"max_depth={self.config.max_depth}")

    @property
    def limits(self) -> EnumerationLimits:
        return EnumerationLimits(max_nodes=self.config.max_nodes)

    def _rasterizer(self) -> PointRasterizer:
        palette = self.config.palette if self.config.color_by_depth else None
        return PointRasterizer(self.config.width, palette=palette, dot_size=self.config.dot_size)

    def enumerate(self, fractal: ComplexFractal, start: Number) -> List[FractalNode]:
        """Pre-image tree of ``start`` down to the configured depth, in pre-order."""
        return enumerate_pre_images(fractal, start, self.config.max_depth, self.limits)

    def render_nodes(self, nodes: Sequence[Union[FractalNode, ComplexValue, complex]],
                     output_path: Optional[Union[str, Path]] = None,
                     metadata: Optional[RenderMetadata] = None) -> RasterResult:
        """
        Rasterize points and optionally save the image.

        Args:
            nodes: Points to draw
            output_path: Optional output file path
            metadata: Metadata to embed when saving; completed with the
                image size and point statistics

        Returns:
            Rasterization result
        """
        result = self._rasterizer().render(nodes)

        if output_path is not None:
            if metadata is not None:
                metadata.resolution = (result.width, result.height)
                metadata.skipped_points = result.skipped
            self._save_image(result.image, output_path, metadata)

        return result

    def render(self, fractal: ComplexFractal, start: Number,
               output_path: Optional[Union[str, Path]] = None) -> np.ndarray:
        """
        Render the pre-image tree of a point.

        Args:
            fractal: Generating map
            start: Root of the tree
            output_path: Optional output file path

        Returns:
            RGB image array (uint8)
        """
        start_time = time.time()
        logger.info(f"Starting render: {fractal.name}")

        nodes = self.enumerate(fractal, start)
        z = ComplexValue.of(start)
        metadata = RenderMetadata(
            fractal_type=fractal.name,
            start_point=z.to_tuple(),
            max_depth=self.config.max_depth,
            node_count=len(nodes),
            resolution=(self.config.width, 0),
            color_palette=self.config.palette if self.config.color_by_depth else 'black',
            fractal_parameters=fractal.parameters.to_dict(),
        )

        result = self.render_nodes(nodes)
        metadata.resolution = (result.width, result.height)
        metadata.skipped_points = result.skipped
        metadata.render_time_seconds = time.time() - start_time

        if output_path is not None:
            self._save_image(result.image, output_path, metadata)

        logger.info(f"Render complete: {metadata.render_time_seconds:.2f}s")
        return result.image

    def render_bytes(self, fractal: ComplexFractal, start: Number) -> bytes:
        """Render the pre-image tree of a point and encode it in the configured format."""
        image = self.render(fractal, start)
        return self.image_exporter.to_bytes(image, self.config.output_format)

    def render_branching_tree(self, spread: int,
                              output_path: Optional[Union[str, Path]] = None) -> RasterResult:
        """
        Render the self-similar tree with ``spread`` branches per node.

        Args:
            spread: Branches per node
            output_path: Optional output file path
        """
        start_time = time.time()
        nodes = enumerate_branching_tree(spread, self.config.max_depth, self.limits)
        metadata = RenderMetadata(
            fractal_type="BranchingTree",
            start_point=(0.0, 0.0),
            max_depth=self.config.max_depth,
            node_count=len(nodes),
            resolution=(self.config.width, 0),
            color_palette=self.config.palette if self.config.color_by_depth else 'black',
            fractal_parameters={'spread': spread},
        )
        result = self.render_nodes(nodes, output_path, metadata)
        logger.info(f"Render complete: {time.time() - start_time:.2f}s")
        return result

    def _save_image(self, image: np.ndarray, output_path: Union[str, Path],
                    metadata: Optional[RenderMetadata]) -> Path:
        """Save rendered image, with metadata if configured."""
        output_path = Path(output_path)
        if not output_path.suffix:
            output_path = output_path.with_suffix(f".{self.config.output_format.lower()}")

        if not self.config.save_metadata:
            metadata = None
        return self.image_exporter.save_image(image, output_path, metadata)

    def update_config(self, **kwargs):
        """Update rendering configuration."""
        for key, value in kwargs.items():
            if hasattr(self.config, key):
                setattr(self.config, key, value)
            else:
                raise ValueError(f"Unknown configuration parameter: {key}")

        self.config.validate()
        self.image_exporter = ImageExporter(self.config.jpeg_quality)
