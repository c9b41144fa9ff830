"""
Palettemill

Extracts a small, representative color palette from image pixels using
modified median cut quantization.
"""

from palettemill.services.colors.extraction import (
    get_average_color, get_dominant_color, get_palette, sample_pixels
)
from palettemill.services.quantization import ColorMap, quantize

__version__ = "1.0.0"

__all__ = [
    "quantize", "ColorMap", "get_palette", "get_dominant_color",
    "get_average_color", "sample_pixels", "__version__",
]
