"""
Quantizer (modified median cut)

Drives the split loop over a single prioritized working set of boxes:

1. Population-first: repeatedly split the most populated box. This captures
   the dominant color masses.
2. Population x volume: re-key the same working set and keep splitting. Large
   sparse boxes rise to the top here, which recovers visually distinct
   minority colors that phase 1 would starve.

Boxes that cannot be split are retired. They stay in the working set and
still yield one palette color each.
"""

import heapq
import math
from itertools import count
from typing import Callable, List, Optional

from loguru import logger

from .color_map import ColorMap
from .histogram import Histogram, PixelInput, as_pixel_array, build_histogram
from .splitter import split_box
from .vbox import VBox

MIN_COLORS = 2
MAX_COLORS = 20

# Safety bound on split attempts, scaled by the requested count and shared
# by both phases
MAX_ITERATIONS_PER_COLOR = 1000

# Share of the requested colors reached with the population-first ordering
PHASE_ONE_FRACTION = 1.0

BoxKey = Callable[[VBox], int]


def population_key(box: VBox) -> int:
    return box.population()


def population_volume_key(box: VBox) -> int:
    return box.population() * box.volume()


class BoxQueue:
    """
    Working set of boxes ordered by a replaceable key.

    Splittable candidates live in a max-heap; ties pop in insertion order.
    Retired (terminal) boxes are kept aside but count towards len().
    """

    def __init__(self, key: BoxKey):
        self._key = key
        self._heap: list = []
        self._retired: List[VBox] = []
        self._sequence = count()

    def push(self, box: VBox) -> None:
        heapq.heappush(self._heap, (-self._key(box), next(self._sequence), box))

    def pop(self) -> VBox:
        return heapq.heappop(self._heap)[2]

    def retire(self, box: VBox) -> None:
        self._retired.append(box)

    def rekey(self, key: BoxKey) -> None:
        """Re-order the pending candidates under a new key."""
        self._key = key
        self._heap = [(-key(box), seq, box) for _, seq, box in self._heap]
        heapq.heapify(self._heap)

    def has_candidates(self) -> bool:
        return bool(self._heap)

    def boxes(self) -> List[VBox]:
        """Retired boxes in retirement order, then pending ones in insertion order."""
        pending = [(seq, box) for _, seq, box in self._heap]
        pending.sort(key=lambda item: item[0])
        return self._retired + [box for _, box in pending]

    def __len__(self) -> int:
        return len(self._heap) + len(self._retired)


def _split_until(queue: BoxQueue, target: int, ceiling: int, phase: str) -> int:
    """Split boxes until the queue holds target boxes. Returns iterations used."""
    iterations = 0
    while len(queue) < target and queue.has_candidates():
        if iterations >= ceiling:
            logger.warning(f"{phase}: iteration ceiling {ceiling} reached with "
                           f"{len(queue)}/{target} boxes")
            break
        iterations += 1

        box = queue.pop()
        halves = split_box(box)
        if halves is None:
            queue.retire(box)
            continue

        low, high = halves
        queue.push(low)
        queue.push(high)

    return iterations


def quantize_histogram(histogram: Histogram, max_colors: int) -> ColorMap:
    """
    Run both split phases over a prepared histogram.

    Args:
        histogram: Histogram with at least one populated cell
        max_colors: Requested palette size, MIN_COLORS..MAX_COLORS

    Returns:
        ColorMap with at most max_colors entries, most populated first

    Raises:
        ValueError: If the histogram is empty
    """
    if histogram.total == 0:
        raise ValueError("Cannot quantize an empty histogram")

    budget = MAX_ITERATIONS_PER_COLOR * max_colors

    queue = BoxQueue(population_key)
    queue.push(VBox.from_histogram(histogram))

    phase_one_target = min(max_colors, math.ceil(PHASE_ONE_FRACTION * max_colors))
    first = _split_until(queue, phase_one_target, budget, "population phase")

    queue.rekey(population_volume_key)
    second = _split_until(queue, max_colors, budget - first, "population x volume phase")

    logger.debug(f"Quantized {histogram.distinct_colors} cells into {len(queue)} boxes "
                 f"({first} + {second} iterations)")

    return ColorMap.from_boxes(queue.boxes())


def quantize(pixels: PixelInput, max_colors: int) -> Optional[ColorMap]:
    """
    Reduce pixel samples to a palette of at most max_colors colors.

    Args:
        pixels: RGB triples (sequence or (N, 3) array), already filtered
        max_colors: Requested palette size, MIN_COLORS..MAX_COLORS

    Returns:
        ColorMap ordered most dominant first, or None when there are no
        pixels or max_colors is out of range

    Raises:
        ValueError: If the pixel data is malformed
    """
    arr = as_pixel_array(pixels)

    if arr.shape[0] == 0:
        logger.info("No pixels to quantize")
        return None

    if not MIN_COLORS <= max_colors <= MAX_COLORS:
        logger.info(f"Color count {max_colors} outside {MIN_COLORS}..{MAX_COLORS}")
        return None

    histogram = build_histogram(arr)
    return quantize_histogram(histogram, max_colors)
