"""
Observability Demo - Configuration Tests
=========================================

What:  Defaults, validation rules and environment overrides of Settings.
"""

import pytest
from pydantic import ValidationError

from obsdemo.config import LatencyRange, Settings


class TestLatencyRange:
    """Per-route simulated delay bounds."""

    def test_seconds_conversion(self):
        """Millisecond bounds convert to seconds for the sleep."""
        latency = LatencyRange(min_ms=50, max_ms=150)
        assert latency.min_seconds == 0.05
        assert latency.max_seconds == 0.15

    def test_equal_bounds_allowed(self):
        """A fixed delay (min == max) is valid."""
        assert LatencyRange(min_ms=10, max_ms=10).max_ms == 10

    def test_min_above_max_rejected(self):
        """Inverted bounds fail validation."""
        with pytest.raises(ValidationError, match="must not exceed"):
            LatencyRange(min_ms=200, max_ms=100)

    def test_negative_rejected(self):
        """Negative delays fail validation."""
        with pytest.raises(ValidationError):
            LatencyRange(min_ms=-1, max_ms=10)


class TestSettings:
    """Settings defaults, validation and environment."""

    def test_defaults(self):
        """Defaults match the documented port, trace id size and latency profiles."""
        s = Settings()
        assert s.port == 3000
        assert s.trace_id_bytes == 12
        assert s.unhealthy_ratio == 0.1
        assert s.latency_home == LatencyRange(min_ms=50, max_ms=150)
        assert s.latency_status == LatencyRange(min_ms=10, max_ms=50)
        assert s.latency_error == LatencyRange(min_ms=100, max_ms=300)
        assert s.histogram_buckets == [0.005, 0.01, 0.02, 0.05, 0.1, 0.5, 1, 2]

    def test_route_profiles_are_distinct(self):
        """Products, cart and account each get their own latency profile."""
        s = Settings()
        profiles = [s.latency_products, s.latency_cart, s.latency_account]
        assert len({(p.min_ms, p.max_ms) for p in profiles}) == 3

    def test_log_level_normalized(self):
        """Log level names are case-insensitive."""
        s = Settings(log_level="info")
        assert s.log_level == "INFO"
        assert s.log_level_value == 20

    def test_invalid_log_level_rejected(self):
        """Unknown log level names are rejected."""
        with pytest.raises(ValidationError, match="Invalid log_level"):
            Settings(log_level="LOUD")

    def test_trace_id_bytes_bounds(self):
        """Trace ids shorter than 4 bytes are rejected."""
        with pytest.raises(ValidationError):
            Settings(trace_id_bytes=2)

    def test_unhealthy_ratio_bounds(self):
        """The unhealthy share must be a probability."""
        with pytest.raises(ValidationError):
            Settings(unhealthy_ratio=1.5)

    def test_buckets_must_ascend(self):
        """Histogram buckets must be strictly ascending."""
        with pytest.raises(ValidationError, match="ascending"):
            Settings(histogram_buckets=[0.1, 0.05])

    def test_buckets_must_not_be_empty(self):
        """An empty bucket list is rejected."""
        with pytest.raises(ValidationError, match="empty"):
            Settings(histogram_buckets=[])

    def test_environment_overrides(self, monkeypatch):
        """Environment variables override defaults, including JSON latency ranges."""
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("LATENCY_HOME", '{"min_ms": 1, "max_ms": 2}')
        monkeypatch.setenv("COLLECT_PROCESS_METRICS", "false")

        s = Settings()

        assert s.port == 8080
        assert s.latency_home == LatencyRange(min_ms=1, max_ms=2)
        assert s.collect_process_metrics is False
