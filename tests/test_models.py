"""
Tests for core data models.
"""

import pytest

from weatherfx.core.models import (
    CacheEntry,
    ConversionRow,
    RateLimitMarker,
    WeatherSnapshot,
)


class TestCacheEntry:
    """Tests for CacheEntry dataclass."""

    def test_freshness_boundary(self):
        entry = CacheEntry(timestamp=1_000, payload={})

        assert entry.is_fresh(now=1_999, max_age_ms=1_000)
        assert not entry.is_fresh(now=2_000, max_age_ms=1_000)

    def test_future_timestamp_is_stale(self):
        entry = CacheEntry(timestamp=5_000, payload={})

        assert not entry.is_fresh(now=4_999, max_age_ms=60_000)
        assert entry.is_fresh(now=5_000, max_age_ms=60_000)

    def test_age(self):
        assert CacheEntry(timestamp=500, payload=None).age_ms(1_250) == 750

    def test_from_dict(self):
        entry = CacheEntry.from_dict({"timestamp": 1_709_294_400_000, "payload": {"CAD": 1.35}})

        assert entry.timestamp == 1_709_294_400_000
        assert entry.payload == {"CAD": 1.35}

    def test_float_timestamp_truncated(self):
        assert CacheEntry.from_dict({"timestamp": 12.9, "payload": 1}).timestamp == 12

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            "rates",
            {"timestamp": 1},
            {"payload": {}},
            {"timestamp": "yesterday", "payload": {}},
            {"timestamp": True, "payload": {}},
        ],
    )
    def test_from_dict_rejects_bad_shapes(self, data):
        with pytest.raises(ValueError):
            CacheEntry.from_dict(data)

    def test_to_dict(self):
        entry = CacheEntry(timestamp=7, payload=[1, 2])
        assert entry.to_dict() == {"timestamp": 7, "payload": [1, 2]}


class TestRateLimitMarker:
    """Tests for RateLimitMarker dataclass."""

    def test_to_dict(self):
        assert RateLimitMarker(42).to_dict() == {"last_attempt": 42}

    def test_from_dict(self):
        assert RateLimitMarker.from_dict({"last_attempt": 42}).last_attempt == 42

    @pytest.mark.parametrize("data", [None, {}, {"last_attempt": "soon"}, {"timestamp": 42}])
    def test_from_dict_rejects_bad_shapes(self, data):
        with pytest.raises(ValueError):
            RateLimitMarker.from_dict(data)


class TestWeatherSnapshot:
    """Tests for WeatherSnapshot dataclass."""

    def test_rounded_temp(self):
        assert WeatherSnapshot("Oslo", -3.6, "snow", 0).rounded_temp == -4
        assert WeatherSnapshot("Paris", 18.4, "clouds", 0).rounded_temp == 18

    def test_round_trip(self, sample_snapshot):
        assert WeatherSnapshot.from_dict(sample_snapshot.to_dict()) == sample_snapshot

    def test_from_dict_coerces_types(self):
        snapshot = WeatherSnapshot.from_dict(
            {"name": "Paris", "main_temp": "18", "description": "clear sky", "observed_at": 1.0}
        )

        assert snapshot.main_temp == 18.0
        assert snapshot.observed_at == 1

    def test_from_dict_missing_field(self):
        with pytest.raises(KeyError):
            WeatherSnapshot.from_dict({"name": "Paris"})

    def test_observed_datetime(self, sample_snapshot):
        assert int(sample_snapshot.observed_datetime.timestamp()) == sample_snapshot.observed_at


class TestConversionRow:
    """Tests for ConversionRow dataclass."""

    def test_converted(self):
        assert ConversionRow("CAD", 1.35, amount=10).converted == 13.5

    def test_converted_rounds_to_cents(self):
        assert ConversionRow("JPY", 149.8123, amount=3).converted == 449.44

    def test_no_amount(self):
        assert ConversionRow("EUR", 0.91).converted is None
