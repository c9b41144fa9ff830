"""
Palettemill Quantization Engine

Modified median cut color quantization: histogram reduction, box splitting and
the two-phase split driver that produces an ordered color map.
"""

from .color_map import ColorMap, PaletteEntry
from .histogram import (
    HISTO_SIDE, RSHIFT, SIGBITS, Histogram, as_pixel_array, build_histogram,
    color_index, reduce_color
)
from .quantizer import (
    MAX_COLORS, MAX_ITERATIONS_PER_COLOR, MIN_COLORS, PHASE_ONE_FRACTION,
    BoxQueue, quantize, quantize_histogram
)
from .splitter import longest_axis, split_box
from .vbox import VBox

__all__ = [
    "ColorMap", "PaletteEntry", "Histogram", "VBox", "BoxQueue",
    "build_histogram", "as_pixel_array", "color_index", "reduce_color",
    "split_box", "longest_axis", "quantize", "quantize_histogram",
    "SIGBITS", "RSHIFT", "HISTO_SIDE", "MIN_COLORS", "MAX_COLORS",
    "MAX_ITERATIONS_PER_COLOR", "PHASE_ONE_FRACTION",
]
