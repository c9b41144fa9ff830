"""
Unit tests for the median cut box splitter.
"""
from palettemill.services.quantization.histogram import build_histogram
from palettemill.services.quantization.splitter import longest_axis, split_box
from palettemill.services.quantization.vbox import VBox


def root_box(pixels):
    return VBox.from_histogram(build_histogram(pixels))


class TestLongestAxis:
    """Test split axis selection"""

    def test_equal_extents_prefer_red(self):
        assert longest_axis(root_box([(0, 0, 0), (255, 255, 255)])) == 0

    def test_equal_green_and_blue_prefer_green(self):
        assert longest_axis(root_box([(0, 0, 0), (0, 255, 255)])) == 1

    def test_widest_axis_wins(self):
        assert longest_axis(root_box([(0, 0, 0), (0, 255, 40)])) == 1
        assert longest_axis(root_box([(0, 0, 0), (16, 8, 255)])) == 2


class TestSplitBox:
    """Test weighted median splitting"""

    def test_split_primary_colors(self, three_color_pixels):
        low, high = split_box(root_box(three_color_pixels))

        assert low.bounds == (0, 0, 0, 31, 0, 31)
        assert high.bounds == (1, 31, 0, 31, 0, 31)
        assert low.population() == 4
        assert high.population() == 4

    def test_split_at_weighted_median_not_midpoint(self):
        # reduced red coordinates 0, 10, 20 (x5), 31
        pixels = [(0, 0, 0), (80, 0, 0)] + [(160, 0, 0)] * 5 + [(248, 0, 0)]
        low, high = split_box(root_box(pixels))

        assert low.bounds == (0, 20, 0, 0, 0, 0)
        assert high.bounds == (21, 31, 0, 0, 0, 0)
        assert (low.population(), high.population()) == (7, 1)

    def test_split_moves_inward_when_mass_sits_at_the_top(self):
        pixels = [(0, 0, 0)] + [(255, 0, 0)] * 5
        low, high = split_box(root_box(pixels))

        assert low.bounds == (0, 0, 0, 0, 0, 0)
        assert high.bounds == (1, 31, 0, 0, 0, 0)
        assert (low.population(), high.population()) == (1, 5)

    def test_split_conserves_population(self):
        pixels = [(r, (r * 7) % 256, (r * 13) % 256) for r in range(0, 256, 3)]
        box = root_box(pixels)
        low, high = split_box(box)

        assert low.population() + high.population() == box.population()
        assert low.population() > 0 and high.population() > 0

    def test_single_cell_cannot_split(self):
        assert split_box(root_box([(10, 20, 30)] * 3)) is None

    def test_single_populated_cell_in_wide_box_cannot_split(self):
        histogram = build_histogram([(0, 0, 0)])
        box = VBox(0, 31, 0, 0, 0, 0, histogram=histogram)
        assert split_box(box) is None

    def test_falls_back_to_next_axis(self):
        # red is widest but all mass sits at r=0; green spreads it
        histogram = build_histogram([(0, 0, 0), (0, 80, 0)])
        box = VBox(0, 31, 0, 10, 0, 0, histogram=histogram)
        low, high = split_box(box)

        assert low.bounds == (0, 31, 0, 0, 0, 0)
        assert high.bounds == (0, 31, 1, 10, 0, 0)
