"""
Tests for the dashboard session lifecycle.
"""

import pytest

from weatherfx.collectors.proxy import ProxyClient
from weatherfx.core.config import Settings
from weatherfx.core.exceptions import CacheError, ConfigurationError, RateLimitedError
from weatherfx.core.models import CacheEntry
from weatherfx.proxy.backend import ProxyBackend
from weatherfx.services.dashboard import Dashboard, create_endpoint

ONE_HOUR = 60 * 60 * 1000
THIRTY_MINUTES = 30 * 60 * 1000


@pytest.fixture
def dashboard(mock_endpoint, store) -> Dashboard:
    return Dashboard(mock_endpoint, store, Settings(cache_path=store.db_path))


class TestStartup:
    """Tests for the startup sweep."""

    def test_sweeps_each_domain_with_its_window(self, dashboard, store, clock):
        now = clock()
        store.set("rates_USD", CacheEntry(now - THIRTY_MINUTES - 1, {}))
        store.set("rates_EUR", CacheEntry(now - 1000, {}))
        store.set_json("rateLimit_rates_USD", {"last_attempt": now - THIRTY_MINUTES - 1})
        store.set("weather_Paris", CacheEntry(now - THIRTY_MINUTES - 1, {}))
        store.set("weather_Oslo", CacheEntry(now - ONE_HOUR - 1, {}))

        removed = dashboard.startup()

        assert removed == 3
        assert store.keys() == ["rates_EUR", "weather_Paris"]

    def test_runs_once(self, dashboard, store, clock):
        dashboard.startup()
        store.set("rates_USD", CacheEntry(clock() - 2 * THIRTY_MINUTES, {}))

        assert dashboard.startup() == 0
        assert store.keys() == ["rates_USD"]

    @pytest.mark.asyncio
    async def test_marker_kept_for_longer_interval(self, mock_endpoint, store, clock):
        settings = Settings(
            cache_path=store.db_path,
            rates_cache_ttl_ms=THIRTY_MINUTES,
            rates_min_interval_ms=ONE_HOUR,
        )
        await Dashboard(mock_endpoint, store, settings).rates_for("USD")
        clock.advance(THIRTY_MINUTES + 60 * 1000)

        dashboard = Dashboard(mock_endpoint, store, settings)
        with pytest.raises(RateLimitedError) as exc_info:
            await dashboard.rates_for("USD")

        assert exc_info.value.retry_after_ms == THIRTY_MINUTES - 60 * 1000
        assert store.keys() == ["rateLimit_rates_USD"]
        mock_endpoint.fetch_rates.assert_awaited_once()

    def test_marker_swept_after_its_interval(self, mock_endpoint, store, clock):
        settings = Settings(
            cache_path=store.db_path,
            weather_cache_ttl_ms=ONE_HOUR,
            weather_min_interval_ms=THIRTY_MINUTES,
        )
        now = clock()
        store.set("weather_Paris", CacheEntry(now - THIRTY_MINUTES - 1, {}))
        store.set_json("rateLimit_weather_Paris", {"last_attempt": now - THIRTY_MINUTES - 1})

        removed = Dashboard(mock_endpoint, store, settings).startup()

        assert removed == 1
        assert store.keys() == ["weather_Paris"]

    @pytest.mark.asyncio
    async def test_sweep_failure_does_not_block_lookup(self, dashboard, mock_endpoint, monkeypatch):
        def locked(prefixes, max_age_ms):
            raise CacheError("sweep", "database is locked")

        monkeypatch.setattr(dashboard.store, "sweep", locked)

        rates = await dashboard.rates_for("USD")

        assert rates["CAD"] == 1.35
        assert dashboard.startup() == 0
        mock_endpoint.fetch_rates.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stale_entry_swept_before_fetch(self, dashboard, mock_endpoint, store, clock):
        store.set("rates_USD", CacheEntry(clock() - 2 * THIRTY_MINUTES, {"CAD": 9.9}))

        rates = await dashboard.rates_for("USD")

        assert rates["CAD"] == 1.35
        mock_endpoint.fetch_rates.assert_awaited_once()


class TestSession:
    """Tests for fetching and clearing through the dashboard."""

    @pytest.mark.asyncio
    async def test_weather_and_rates(self, dashboard, sample_snapshot):
        assert await dashboard.weather_for("Paris") == sample_snapshot
        rates = await dashboard.rates_for("USD")
        assert set(rates) == set(dashboard.settings.target_currencies)

    @pytest.mark.asyncio
    async def test_conversions(self, dashboard):
        rows = await dashboard.conversions("USD", amount=10)

        cad = next(row for row in rows if row.currency == "CAD")
        assert cad.converted == 13.5

    @pytest.mark.asyncio
    async def test_clear_cache_forces_refetch(self, dashboard, mock_endpoint, store):
        await dashboard.rates_for("USD")
        await dashboard.weather_for("Paris")

        removed = dashboard.clear_cache()

        assert removed == 4  # two entries and two markers
        assert store.keys() == []
        assert len(dashboard.memory) == 0

        await dashboard.rates_for("USD")
        await dashboard.weather_for("Paris")
        assert mock_endpoint.fetch_rates.await_count == 2
        assert mock_endpoint.fetch_weather.await_count == 2

    @pytest.mark.asyncio
    async def test_context_manager_closes_endpoint(self, mock_endpoint, store):
        async with Dashboard(mock_endpoint, store) as dashboard:
            await dashboard.weather_for("Paris")

        mock_endpoint.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_services_share_state(self, dashboard):
        assert dashboard.currency.store is dashboard.weather.store
        assert dashboard.currency.limiter is dashboard.weather.limiter
        assert dashboard.currency.memory is dashboard.memory


class TestCreateEndpoint:
    """Tests for endpoint selection."""

    @pytest.mark.asyncio
    async def test_proxy_by_default(self, settings):
        endpoint = create_endpoint(settings)

        assert isinstance(endpoint, ProxyClient)
        assert endpoint.base_url == settings.proxy_url
        await endpoint.close()

    @pytest.mark.asyncio
    async def test_direct_uses_backend(self, settings):
        endpoint = create_endpoint(settings, direct=True)

        assert isinstance(endpoint, ProxyBackend)
        await endpoint.close()

    def test_direct_requires_keys(self, tmp_cache_db):
        with pytest.raises(ConfigurationError):
            create_endpoint(Settings(cache_path=tmp_cache_db), direct=True)

    def test_from_settings_opens_cache(self, settings):
        dashboard = Dashboard.from_settings(settings)
        assert dashboard.store.db_path == settings.cache_path
