"""
Box Splitter

Median cut along the widest axis of a box. The cut point is the
population-weighted median, so dense regions get subdivided before sparse ones.
"""

from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from .vbox import VBox

AXIS_NAMES = ("red", "green", "blue")


def axes_by_extent(box: VBox) -> List[int]:
    """Axes ordered widest first; equal extents keep red, green, blue order."""
    extents = box.extents()
    return sorted(range(3), key=lambda axis: -extents[axis])


def longest_axis(box: VBox) -> int:
    return axes_by_extent(box)[0]


def _split_along(box: VBox, axis: int) -> Optional[Tuple[VBox, VBox]]:
    """Split at the weighted median of one axis, or None if it has one populated slice."""
    other_axes = tuple(a for a in range(3) if a != axis)
    slice_counts = box.cells().sum(axis=other_axes)

    populated = np.flatnonzero(slice_counts)
    if len(populated) < 2:
        return None

    partial = np.cumsum(slice_counts)
    total = int(partial[-1])

    # first slice where the running sum reaches half the population
    pos = int(np.searchsorted(2 * partial, total, side="left"))

    # keep at least one populated slice on the high side
    if pos >= populated[-1]:
        pos = int(populated[-2])

    lo, hi = box.axis_bounds(axis)
    cut = lo + pos

    low_box = box.with_axis_bounds(axis, lo, cut)
    high_box = box.with_axis_bounds(axis, cut + 1, hi)

    logger.debug(f"Split {box.bounds} on {AXIS_NAMES[axis]} at {cut}: "
                 f"{low_box.population()} | {high_box.population()}")

    return low_box, high_box


def split_box(box: VBox) -> Optional[Tuple[VBox, VBox]]:
    """
    Divide a box into two children at the weighted median of its widest axis.

    The widest axis is tried first. When all of the box's population sits in
    a single slice of that axis, the next widest axis is tried instead.

    Args:
        box: Box to split

    Returns:
        (low, high) children with non-zero population each, or None when the
        box's population occupies a single reduced cell
    """
    if box.is_single_cell() or box.population() == 0:
        return None

    for axis in axes_by_extent(box):
        lo, hi = box.axis_bounds(axis)
        if lo == hi:
            break
        halves = _split_along(box, axis)
        if halves is not None:
            return halves

    return None
