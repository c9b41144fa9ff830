"""
Histogram Builder

Reduces 8-bit RGB samples to a coarser 5-bit-per-channel grid and counts the
pixel population of every grid cell. The histogram also keeps the running sum
of the original channel values per cell so box averages can be computed from
real pixel values rather than bucket centres.
"""

from typing import Iterable, Tuple, Union

import numpy as np
from loguru import logger

# Significant bits kept per channel
SIGBITS = 5
RSHIFT = 8 - SIGBITS
HISTO_SIDE = 1 << SIGBITS
HISTO_SIZE = 1 << (3 * SIGBITS)

RGB = Tuple[int, int, int]
PixelInput = Union[np.ndarray, Iterable[Iterable[int]]]


def reduce_color(rgb: Iterable[int]) -> RGB:
    """Drop the low RSHIFT bits of every channel."""
    r, g, b = (int(c) for c in rgb)
    return (r >> RSHIFT, g >> RSHIFT, b >> RSHIFT)


def color_index(r, g, b):
    """Flat histogram index of a reduced color. Works on ints and arrays."""
    return (r << (2 * SIGBITS)) + (g << SIGBITS) + b


def as_pixel_array(pixels: PixelInput) -> np.ndarray:
    """
    Normalise pixel input to an (N, 3) uint8 array.

    Args:
        pixels: Sequence of RGB triples or an array of shape (N, 3)

    Returns:
        Array of shape (N, 3), dtype uint8. Empty input gives shape (0, 3).

    Raises:
        ValueError: If the input is not a list of triples or a channel
            value falls outside 0..255
    """
    if isinstance(pixels, np.ndarray):
        arr = pixels
    else:
        arr = np.asarray(list(pixels))

    if arr.size == 0:
        return np.empty((0, 3), dtype=np.uint8)

    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"Expected RGB triples with shape (N, 3), got {arr.shape}")

    if arr.dtype != np.uint8:
        if not np.issubdtype(arr.dtype, np.integer):
            raise ValueError(f"Channel values must be integers, got {arr.dtype}")
        if arr.min() < 0 or arr.max() > 255:
            raise ValueError("Channel values must be within 0..255")
        arr = arr.astype(np.uint8)

    return arr


class Histogram:
    """
    Population histogram over the reduced color cube.

    Attributes:
        counts: int64 array (HISTO_SIDE, HISTO_SIDE, HISTO_SIDE) of pixel counts
        sums: int64 array (HISTO_SIDE, HISTO_SIDE, HISTO_SIDE, 3) of summed
            original channel values per cell
        bounds: (r1, r2, g1, g2, b1, b2) reduced-space bounding box of the
            populated cells
    """

    def __init__(self, counts: np.ndarray, sums: np.ndarray,
                 bounds: Tuple[int, int, int, int, int, int]):
        self.counts = counts
        self.sums = sums
        self.bounds = bounds

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    @property
    def distinct_colors(self) -> int:
        """Number of populated reduced cells."""
        return int(np.count_nonzero(self.counts))

    def count(self, r: int, g: int, b: int) -> int:
        """Population of a single reduced cell."""
        return int(self.counts[r, g, b])

    def __len__(self) -> int:
        return self.distinct_colors

    def __repr__(self) -> str:
        return (f"Histogram(total={self.total}, distinct={self.distinct_colors}, "
                f"bounds={self.bounds})")


def build_histogram(pixels: PixelInput) -> Histogram:
    """
    Build the reduced-color histogram for a set of pixel samples.

    Args:
        pixels: Non-empty sequence of RGB triples or (N, 3) array

    Returns:
        Histogram with per-cell counts, per-cell channel sums and the
        bounding box of the populated cells

    Raises:
        ValueError: If no pixels are supplied
    """
    arr = as_pixel_array(pixels)
    if arr.shape[0] == 0:
        raise ValueError("Cannot build a histogram from zero pixels")

    reduced = (arr >> RSHIFT).astype(np.int64)
    indices = color_index(reduced[:, 0], reduced[:, 1], reduced[:, 2])

    counts = np.bincount(indices, minlength=HISTO_SIZE).astype(np.int64)

    # bincount with weights returns float64; exact for any realistic pixel count
    sums = np.stack(
        [np.bincount(indices, weights=arr[:, c], minlength=HISTO_SIZE) for c in range(3)],
        axis=-1
    ).astype(np.int64)

    mins = reduced.min(axis=0)
    maxs = reduced.max(axis=0)
    bounds = (int(mins[0]), int(maxs[0]),
              int(mins[1]), int(maxs[1]),
              int(mins[2]), int(maxs[2]))

    histogram = Histogram(
        counts=counts.reshape(HISTO_SIDE, HISTO_SIDE, HISTO_SIDE),
        sums=sums.reshape(HISTO_SIDE, HISTO_SIDE, HISTO_SIDE, 3),
        bounds=bounds
    )

    logger.debug(f"Built histogram: {arr.shape[0]} pixels, "
                 f"{histogram.distinct_colors} distinct cells, bounds={bounds}")

    return histogram
