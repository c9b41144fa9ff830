"""
Unit tests for the two-phase median cut quantizer.

Covers the palette contract: count bounds, dominance ordering, determinism,
population conservation and the degenerate inputs that return no palette.
"""
import random

import numpy as np
import pytest

from palettemill.services.quantization import quantizer as quantizer_module
from palettemill.services.quantization.histogram import Histogram, HISTO_SIDE, build_histogram
from palettemill.services.quantization.quantizer import (
    BoxQueue, population_key, population_volume_key, quantize, quantize_histogram
)
from palettemill.services.quantization.vbox import VBox


@pytest.fixture
def random_pixels():
    """Deterministic noisy image: 5000 random RGB samples"""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(5000, 3), dtype=np.uint8)


class TestQuantizeScenarios:
    """End-to-end palette scenarios"""

    def test_primary_colors_in_dominance_order(self, three_color_pixels):
        cmap = quantize(three_color_pixels, 3)

        assert cmap.palette() == [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
        assert cmap.populations() == [4, 2, 2]

    def test_single_color_is_not_over_split(self):
        cmap = quantize([(10, 20, 30)] * 3, 5)

        assert cmap.palette() == [(10, 20, 30)]

    @pytest.mark.parametrize("target", [2, 3, 10, 20])
    def test_single_color_invariance(self, target):
        cmap = quantize([(31, 78, 121)] * 50, target)
        assert cmap.palette() == [(31, 78, 121)]

    def test_dominant_color_first(self):
        pixels = ([(200, 30, 30)] * 60 + [(30, 200, 30)] * 10 + [(30, 30, 200)] * 10 +
                  [(240, 240, 20)] * 10 + [(20, 20, 20)] * 9)
        random.Random(7).shuffle(pixels)
        cmap = quantize(pixels, 5)

        assert cmap.palette()[0] == (200, 30, 30)
        assert len(cmap) == 5

    def test_fewer_distinct_colors_than_requested(self):
        pixels = [(0, 0, 0)] * 5 + [(255, 255, 255)] * 3 + [(128, 0, 128)] * 2
        cmap = quantize(pixels, 10)

        assert cmap.palette() == [(0, 0, 0), (255, 255, 255), (128, 0, 128)]


class TestQuantizeProperties:
    """Properties that hold for any input"""

    @pytest.mark.parametrize("target", range(2, 21))
    def test_count_bound(self, random_pixels, target):
        cmap = quantize(random_pixels, target)
        assert 1 <= len(cmap) <= target

    def test_noisy_input_reaches_target(self, random_pixels):
        assert len(quantize(random_pixels, 8)) == 8

    def test_population_conservation(self, random_pixels):
        cmap = quantize(random_pixels, 12)
        assert sum(cmap.populations()) == len(random_pixels)

    def test_palette_sorted_by_population(self, random_pixels):
        populations = quantize(random_pixels, 16).populations()
        assert populations == sorted(populations, reverse=True)

    def test_determinism(self, random_pixels):
        first = quantize(random_pixels, 10).palette()
        second = quantize(random_pixels.copy(), 10).palette()
        shuffled = quantize(np.random.default_rng(1).permutation(random_pixels), 10).palette()

        assert first == second == shuffled

    def test_palette_channels_are_8bit_ints(self, random_pixels):
        for color in quantize(random_pixels, 6).palette():
            assert all(isinstance(c, int) and 0 <= c <= 255 for c in color)


class TestQuantizeEdgeCases:
    """Invalid input and soft degradation"""

    def test_empty_input_returns_none(self):
        assert quantize([], 5) is None

    @pytest.mark.parametrize("target", [0, 1, 21, 256])
    def test_out_of_range_target_returns_none(self, target):
        assert quantize([(1, 2, 3)], target) is None

    def test_malformed_pixels_raise(self):
        with pytest.raises(ValueError):
            quantize([(1, 2)], 3)

    def test_empty_histogram_fails_fast(self):
        empty = Histogram(
            counts=np.zeros((HISTO_SIDE,) * 3, dtype=np.int64),
            sums=np.zeros((HISTO_SIDE,) * 3 + (3,), dtype=np.int64),
            bounds=(0, 0, 0, 0, 0, 0)
        )
        with pytest.raises(ValueError):
            quantize_histogram(empty, 5)

    def test_iteration_ceiling_degrades_softly(self, monkeypatch, three_color_pixels):
        monkeypatch.setattr(quantizer_module, "MAX_ITERATIONS_PER_COLOR", 0)
        cmap = quantize(three_color_pixels, 3)

        # no split allowed: the root box is the whole palette
        assert len(cmap) == 1
        assert cmap.populations() == [8]

    def test_phases_share_one_iteration_budget(self, monkeypatch, random_pixels):
        calls = []
        split_until = quantizer_module._split_until

        def recording_split_until(queue, target, ceiling, phase):
            used = split_until(queue, target, ceiling, phase)
            calls.append((ceiling, used))
            return used

        monkeypatch.setattr(quantizer_module, "_split_until", recording_split_until)
        monkeypatch.setattr(quantizer_module, "PHASE_ONE_FRACTION", 0.5)
        quantize(random_pixels, 10)

        (first_ceiling, first_used), (second_ceiling, second_used) = calls
        assert first_ceiling == quantizer_module.MAX_ITERATIONS_PER_COLOR * 10
        assert first_used > 0
        assert second_ceiling == first_ceiling - first_used
        assert first_used + second_used <= first_ceiling

    def test_volume_phase_completes_the_palette(self, monkeypatch, random_pixels):
        monkeypatch.setattr(quantizer_module, "PHASE_ONE_FRACTION", 0.5)
        cmap = quantize(random_pixels, 10)

        assert len(cmap) == 10
        assert sum(cmap.populations()) == len(random_pixels)


class TestBoxQueue:
    """Test the prioritized working set"""

    @pytest.fixture
    def boxes(self):
        # dense small box vs sparse large box
        histogram = build_histogram([(0, 0, 0)] * 10 + [(200, 200, 200), (255, 255, 255)])
        dense = VBox(0, 0, 0, 0, 0, 0, histogram=histogram)
        sparse = VBox(20, 31, 20, 31, 20, 31, histogram=histogram)
        return dense, sparse

    def test_population_order(self, boxes):
        dense, sparse = boxes
        queue = BoxQueue(population_key)
        queue.push(sparse)
        queue.push(dense)

        assert queue.pop() is dense

    def test_rekey_prefers_large_sparse_boxes(self, boxes):
        dense, sparse = boxes
        queue = BoxQueue(population_key)
        queue.push(dense)
        queue.push(sparse)
        queue.rekey(population_volume_key)

        assert queue.pop() is sparse

    def test_ties_pop_in_insertion_order(self, boxes):
        dense, _ = boxes
        twin = VBox(0, 0, 0, 0, 0, 0, histogram=dense.histogram)
        queue = BoxQueue(population_key)
        queue.push(dense)
        queue.push(twin)

        assert queue.pop() is dense
        assert queue.pop() is twin

    def test_retired_boxes_count_towards_size(self, boxes):
        dense, sparse = boxes
        queue = BoxQueue(population_key)
        queue.push(sparse)
        queue.retire(dense)

        assert len(queue) == 2
        assert queue.has_candidates()
        assert queue.boxes() == [dense, sparse]
