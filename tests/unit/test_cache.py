"""Unit tests for the TTL cache."""
import pytest

from sizingkit.core.cache import TTLCache
from sizingkit.core.exceptions import ConfigurationError


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class TestTTLCache:
    """Test expiry, eviction and sweeping."""

    def test_set_and_get(self, clock):
        cache = TTLCache(max_size=3, ttl_seconds=60, clock=clock)
        cache.set("AAPL", 1)

        assert cache.get("AAPL") == 1
        assert "AAPL" in cache
        assert len(cache) == 1

    def test_missing_key_returns_default(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        assert cache.get("MSFT") is None
        assert cache.get("MSFT", 0) == 0
        assert "MSFT" not in cache

    def test_entry_expires_on_access(self, clock):
        """Expired entries are dropped when read."""
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.set("AAPL", 1)

        clock.advance(60)
        assert cache.get("AAPL") == 1

        clock.advance(1)
        assert cache.get("AAPL") is None
        assert len(cache) == 0

    def test_evicts_least_recently_used(self, clock):
        """A full cache drops the entry read least recently."""
        cache = TTLCache(max_size=2, ttl_seconds=60, clock=clock)
        cache.set("AAPL", 1)
        cache.set("MSFT", 2)
        cache.get("AAPL")
        cache.set("NVDA", 3)

        assert "MSFT" not in cache
        assert cache.get("AAPL") == 1
        assert cache.get("NVDA") == 3

    def test_overwrite_refreshes_timestamp(self, clock):
        cache = TTLCache(max_size=2, ttl_seconds=60, clock=clock)
        cache.set("AAPL", 1)
        clock.advance(50)
        cache.set("AAPL", 2)
        clock.advance(50)

        assert cache.get("AAPL") == 2
        assert len(cache) == 1

    def test_falsy_values_are_cached(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.set("ZERO", 0)
        assert "ZERO" in cache

    def test_cleanup_sweeps_expired(self, clock):
        """cleanup() removes expired entries and counts them."""
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.set("AAPL", 1)
        cache.set("MSFT", 2)
        clock.advance(30)
        cache.set("NVDA", 3)
        clock.advance(40)

        assert cache.cleanup() == 2
        assert len(cache) == 1
        assert cache.get("NVDA") == 3

    def test_delete_and_clear(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.set("AAPL", 1)
        cache.set("MSFT", 2)

        assert cache.delete("AAPL") is True
        assert cache.delete("AAPL") is False

        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize("kwargs", [
        {"max_size": 0},
        {"ttl_seconds": 0},
        {"ttl_seconds": -5},
    ])
    def test_invalid_configuration_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            TTLCache(**kwargs)
