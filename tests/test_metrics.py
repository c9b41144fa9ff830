"""
Unit tests for in-process metrics and request ids.
"""
import re

from palettemill.utils.ids import generate_request_id
from palettemill.utils.metrics import MetricsCollector


def test_timing_stats():
    """Test timing aggregation and percentiles."""
    metrics = MetricsCollector()
    for value in [10.0, 20.0, 30.0, 40.0]:
        metrics.record_timing("quantize", value)

    stats = metrics.get_timing_stats()["quantize_duration_ms"]
    assert stats["count"] == 4
    assert stats["mean"] == 25.0
    assert stats["min"] == 10.0
    assert stats["max"] == 40.0
    assert stats["p50"] == 25.0


def test_counters_and_reset():
    """Test counters accumulate and reset clears them."""
    metrics = MetricsCollector()
    metrics.increment_request_count("upload")
    metrics.increment_request_count("pixels")
    metrics.increment_failure_count("http_415")
    metrics.record_palette_size(3)
    metrics.record_palette_size(5)

    counters = metrics.get_counters()
    assert counters["palette_requests_total"] == 2
    assert counters["palette_failed_total_http_415"] == 1
    assert metrics.get_palette_size_stats()["mean"] == 4.0

    metrics.reset()
    assert metrics.get_counters() == {}
    assert metrics.get_palette_size_stats() == {}


def test_request_id_format():
    """Test request ids carry prefix and timestamp."""
    request_id = generate_request_id("pix")
    assert re.fullmatch(r"pix-\d{14}-[0-9a-f]{8}", request_id)
