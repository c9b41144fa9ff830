"""
Color Box (VBox)

An axis-aligned box over the reduced color cube. Boxes are cheap value
objects: bounds plus a reference to the histogram they read from. Population
and average color are derived from the histogram on first use and cached.
"""

from typing import Iterable, Optional, Tuple

import numpy as np

from .histogram import RSHIFT, Histogram, RGB, reduce_color


class VBox:
    """Box with inclusive reduced-space bounds on each channel."""

    __slots__ = ("r1", "r2", "g1", "g2", "b1", "b2", "histogram",
                 "_population", "_average")

    def __init__(self, r1: int, r2: int, g1: int, g2: int, b1: int, b2: int,
                 histogram: Histogram):
        if r1 > r2 or g1 > g2 or b1 > b2:
            raise ValueError(f"Inverted box bounds: {(r1, r2, g1, g2, b1, b2)}")
        self.r1, self.r2 = r1, r2
        self.g1, self.g2 = g1, g2
        self.b1, self.b2 = b1, b2
        self.histogram = histogram
        self._population: Optional[int] = None
        self._average: Optional[RGB] = None

    @classmethod
    def from_histogram(cls, histogram: Histogram) -> "VBox":
        """Root box spanning every populated cell of the histogram."""
        return cls(*histogram.bounds, histogram=histogram)

    @property
    def bounds(self) -> Tuple[int, int, int, int, int, int]:
        return (self.r1, self.r2, self.g1, self.g2, self.b1, self.b2)

    def axis_bounds(self, axis: int) -> Tuple[int, int]:
        """(low, high) bounds along axis 0=red, 1=green, 2=blue."""
        lo, hi = self.bounds[2 * axis], self.bounds[2 * axis + 1]
        return lo, hi

    def extents(self) -> Tuple[int, int, int]:
        """Per-axis extent (max - min)."""
        return (self.r2 - self.r1, self.g2 - self.g1, self.b2 - self.b1)

    def with_axis_bounds(self, axis: int, lo: int, hi: int) -> "VBox":
        """New box over the same histogram with one axis re-bounded."""
        bounds = list(self.bounds)
        bounds[2 * axis] = lo
        bounds[2 * axis + 1] = hi
        return VBox(*bounds, histogram=self.histogram)

    def cells(self) -> np.ndarray:
        """View of the histogram counts covered by this box."""
        return self.histogram.counts[self.r1:self.r2 + 1,
                                     self.g1:self.g2 + 1,
                                     self.b1:self.b2 + 1]

    def volume(self) -> int:
        return ((self.r2 - self.r1 + 1) *
                (self.g2 - self.g1 + 1) *
                (self.b2 - self.b1 + 1))

    def population(self) -> int:
        if self._population is None:
            self._population = int(self.cells().sum())
        return self._population

    def is_single_cell(self) -> bool:
        return self.r1 == self.r2 and self.g1 == self.g2 and self.b1 == self.b2

    def average_color(self) -> RGB:
        """
        Population-weighted mean of the original pixel values in the box.

        Each channel is rounded half-up independently. An empty box falls back
        to the centre of its bucket range re-expanded to 8-bit space.
        """
        if self._average is not None:
            return self._average

        population = self.population()
        if population == 0:
            mult = 1 << RSHIFT
            self._average = tuple(
                min(255, ((lo + hi + 1) * mult) // 2)
                for lo, hi in (self.axis_bounds(a) for a in range(3))
            )
            return self._average

        sums = self.histogram.sums[self.r1:self.r2 + 1,
                                   self.g1:self.g2 + 1,
                                   self.b1:self.b2 + 1].sum(axis=(0, 1, 2))
        # integer half-up rounding keeps results identical across platforms
        self._average = tuple(
            int((2 * int(s) + population) // (2 * population)) for s in sums
        )
        return self._average

    def contains(self, rgb: Iterable[int]) -> bool:
        """Whether an 8-bit color falls inside this box after reduction."""
        r, g, b = reduce_color(rgb)
        return (self.r1 <= r <= self.r2 and
                self.g1 <= g <= self.g2 and
                self.b1 <= b <= self.b2)

    def __repr__(self) -> str:
        return f"VBox(bounds={self.bounds}, population={self.population()})"
