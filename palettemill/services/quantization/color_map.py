"""
Color Map

The result of a quantization run: palette entries ordered most dominant first,
plus nearest-color lookup against the palette.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .histogram import RGB
from .vbox import VBox


@dataclass(frozen=True)
class PaletteEntry:
    """One palette color and the box it was averaged from."""
    color: RGB
    population: int
    box: Optional[VBox] = None


class ColorMap:
    """Ordered palette with nearest-color lookup."""

    def __init__(self, entries: Sequence[PaletteEntry]):
        self._entries: List[PaletteEntry] = list(entries)

    @classmethod
    def from_boxes(cls, boxes: Iterable[VBox]) -> "ColorMap":
        """
        Build a map from terminal boxes.

        Ordering: population descending, then population x volume descending,
        then the order the boxes were supplied in.
        """
        boxes = list(boxes)
        order = sorted(
            range(len(boxes)),
            key=lambda i: (-boxes[i].population(),
                           -boxes[i].population() * boxes[i].volume(),
                           i)
        )
        return cls([
            PaletteEntry(color=boxes[i].average_color(),
                         population=boxes[i].population(),
                         box=boxes[i])
            for i in order
        ])

    @classmethod
    def from_colors(cls, colors: Iterable[Iterable[int]]) -> "ColorMap":
        """Lookup-only map over an existing palette, order preserved."""
        return cls([PaletteEntry(color=tuple(int(c) for c in color), population=0)
                    for color in colors])

    @property
    def entries(self) -> List[PaletteEntry]:
        return list(self._entries)

    def palette(self) -> List[RGB]:
        return [entry.color for entry in self._entries]

    def populations(self) -> List[int]:
        return [entry.population for entry in self._entries]

    def ratios(self) -> List[float]:
        """Share of the quantized population held by each entry."""
        total = sum(self.populations())
        if total == 0:
            return [0.0] * len(self._entries)
        return [entry.population / total for entry in self._entries]

    def nearest_index(self, rgb: Iterable[int]) -> int:
        """
        Index of the palette entry closest to rgb in squared Euclidean
        distance. Ties go to the earlier entry.

        Raises:
            ValueError: If the map is empty
        """
        if not self._entries:
            raise ValueError("Cannot look up a color in an empty color map")

        r, g, b = (int(c) for c in rgb)
        best_index = 0
        best_distance = None
        for index, entry in enumerate(self._entries):
            pr, pg, pb = entry.color
            distance = (r - pr) ** 2 + (g - pg) ** 2 + (b - pb) ** 2
            if best_distance is None or distance < best_distance:
                best_index, best_distance = index, distance
        return best_index

    def nearest_color(self, rgb: Iterable[int]) -> RGB:
        return self._entries[self.nearest_index(rgb)].color

    def map_color(self, rgb: Iterable[int]) -> RGB:
        """Color of the box containing rgb, falling back to the nearest entry."""
        rgb = tuple(int(c) for c in rgb)
        for entry in self._entries:
            if entry.box is not None and entry.box.contains(rgb):
                return entry.color
        return self.nearest_color(rgb)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self.palette())

    def __repr__(self) -> str:
        return f"ColorMap(palette={self.palette()})"
