"""
Color conversion helpers used for display.
"""

import math
from typing import Iterable, Tuple


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rgb_to_hex(rgb: Iterable[int]) -> str:
    """Convert an RGB triple to a #RRGGBB string."""
    r, g, b = [int(x) for x in rgb]
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color string to RGB tuple."""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"Expected #RRGGBB, got {hex_color!r}")
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def rgb_to_hsl(rgb: Iterable[int]) -> Tuple[int, int, int]:
    """
    Convert an RGB triple to HSL.

    Returns:
        (hue in degrees 0-360, saturation percent, lightness percent),
        each rounded half-up
    """
    r, g, b = [int(x) / 255 for x in rgb]

    c_max = max(r, g, b)
    c_min = min(r, g, b)
    diff = c_max - c_min

    h = 0.0
    s = 0.0
    l = (c_max + c_min) / 2

    if diff != 0:
        s = diff / (2 - c_max - c_min) if l > 0.5 else diff / (c_max + c_min)

        if c_max == r:
            h = (g - b) / diff + (6 if g < b else 0)
        elif c_max == g:
            h = (b - r) / diff + 2
        else:
            h = (r - g) / diff + 4
        h /= 6

    return (_round_half_up(h * 360), _round_half_up(s * 100), _round_half_up(l * 100))
