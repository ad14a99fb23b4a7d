"""
Image export for rendered pre-image trees.

Rendered RGB arrays are written as PNG, TIFF or JPEG files, optionally
with the render parameters embedded as JSON, or encoded into an
in-memory byte string for callers that stream images themselves.
"""

import io
import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
from PIL import Image, PngImagePlugin

logger = logging.getLogger(__name__)

# TIFF ImageDescription and Software tags
_TIFF_DESCRIPTION = 270
_TIFF_SOFTWARE = 305

_FORMATS = {
    'png': 'PNG',
    'tiff': 'TIFF',
    'tif': 'TIFF',
    'jpg': 'JPEG',
    'jpeg': 'JPEG',
}


def _json_default(value: Any) -> Any:
    """Encode complex parameters as ``[real, imag]`` pairs."""
    if isinstance(value, complex):
        return [value.real, value.imag]
    if hasattr(value, 'to_tuple'):
        return list(value.to_tuple())
    if isinstance(value, np.generic):
        return value.item()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class RenderMetadata:
    """Metadata for pre-image renders."""

    fractal_type: str
    start_point: Tuple[float, float]
    max_depth: int
    node_count: int
    resolution: Tuple[int, int]  # width, height

    # number of points that could not be drawn (NaN or infinite)
    skipped_points: int = 0
    color_palette: str = "black"
    render_time_seconds: float = 0.0

    timestamp: str = ""
    software_version: str = "1.0.0"

    fractal_parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Set default timestamp if not provided."""
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderMetadata':
        """Create metadata from dictionary."""
        data = dict(data)
        for key in ('start_point', 'resolution'):
            if key in data:
                data[key] = tuple(data[key])
        return cls(**data)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=_json_default)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        return cls.from_dict(json.loads(json_str))


def _format_name(fmt: str) -> str:
    name = _FORMATS.get(fmt.lower().lstrip('.'))
    if name is None:
        supported = ', '.join(_FORMATS.keys())
        raise ValueError(f"Unsupported format '{fmt}'. Supported: {supported}")
    return name


class ImageExporter:
    """Image export with metadata support."""

    def __init__(self, jpeg_quality: int = 95):
        """
        Initialize image exporter.

        Args:
            jpeg_quality: JPEG quality (1-100)
        """
        if not 1 <= jpeg_quality <= 100:
            raise ValueError("jpeg_quality must be between 1 and 100")
        self.jpeg_quality = jpeg_quality

    def save_image(self, image_array: np.ndarray, filepath: Union[str, Path],
                   metadata: Optional[RenderMetadata] = None) -> Path:
        """
        Save RGB image array to file with metadata.

        The format is taken from the file suffix. PNG keeps the metadata in
        text chunks, TIFF in its description tag; JPEG gets a companion
        ``.json`` file.

        Args:
            image_array: RGB image array (height, width, 3)
            filepath: Output file path
            metadata: Render metadata to embed

        Returns:
            The path written
        """
        filepath = Path(filepath)
        fmt = _format_name(filepath.suffix or 'png')
        pil_image = self._to_pil(image_array)

        if fmt == 'PNG':
            pnginfo = None
            if metadata:
                pnginfo = PngImagePlugin.PngInfo()
                pnginfo.add_text("Title", f"Pre-images: {metadata.fractal_type}")
                pnginfo.add_text("Software", f"preimage-fractals v{metadata.software_version}")
                pnginfo.add_text("Creation Time", metadata.timestamp)
                pnginfo.add_text("FractalMetadata", metadata.to_json())
            pil_image.save(filepath, "PNG", pnginfo=pnginfo)

        elif fmt == 'TIFF':
            tiffinfo = {}
            if metadata:
                tiffinfo[_TIFF_DESCRIPTION] = metadata.to_json()
                tiffinfo[_TIFF_SOFTWARE] = f"preimage-fractals v{metadata.software_version}"
            pil_image.save(filepath, "TIFF", compression='tiff_lzw', tiffinfo=tiffinfo)

        else:
            pil_image.save(filepath, "JPEG", quality=self.jpeg_quality, optimize=True)
            if metadata:
                json_path = filepath.with_suffix('.json')
                json_path.write_text(metadata.to_json())
                logger.info(f"Saved metadata: {json_path}")

        logger.info(f"Saved image: {filepath} ({pil_image.size[0]}x{pil_image.size[1]})")
        return filepath

    def to_bytes(self, image_array: np.ndarray, fmt: str = "png") -> bytes:
        """
        Encode an RGB image array in memory.

        Args:
            image_array: RGB image array (height, width, 3)
            fmt: Format name, e.g. ``png`` or ``jpeg``

        Returns:
            The encoded image
        """
        name = _format_name(fmt)
        buffer = io.BytesIO()
        kwargs = {'quality': self.jpeg_quality} if name == 'JPEG' else {}
        self._to_pil(image_array).save(buffer, name, **kwargs)
        return buffer.getvalue()

    def extract_metadata_from_image(self, filepath: Union[str, Path]) -> Optional[RenderMetadata]:
        """
        Read the render metadata back from a saved image.

        Args:
            filepath: Path to image file

        Returns:
            Extracted metadata or None
        """
        filepath = Path(filepath)

        with Image.open(filepath) as img:
            text = getattr(img, 'text', None)
            if text and 'FractalMetadata' in text:
                return RenderMetadata.from_json(text['FractalMetadata'])

            tags = getattr(img, 'tag_v2', None)
            if tags is not None and _TIFF_DESCRIPTION in tags:
                return RenderMetadata.from_json(tags[_TIFF_DESCRIPTION])

        json_path = filepath.with_suffix('.json')
        if json_path.exists():
            return RenderMetadata.from_json(json_path.read_text())
        return None

    @staticmethod
    def _to_pil(image_array: np.ndarray) -> Image.Image:
        """Validate an RGB array and convert it to a PIL image."""
        if image_array.ndim != 3 or image_array.shape[2] != 3:
            raise ValueError(f"Expected RGB image array (H, W, 3), got {image_array.shape}")

        if image_array.dtype != np.uint8:
            if np.issubdtype(image_array.dtype, np.floating):
                # float images are in the 0-1 range
                image_array = (np.clip(image_array, 0.0, 1.0) * 255).astype(np.uint8)
            else:
                image_array = np.clip(image_array, 0, 255).astype(np.uint8)

        return Image.fromarray(np.ascontiguousarray(image_array))
