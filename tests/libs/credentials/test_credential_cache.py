"""
Tests for libs/credentials/cache.py - Thread-Safe Credential Cache with TTL.

Test Organization:
    - TestCredentialCacheBasicOperations: get, set, replacement, names
    - TestCredentialCacheTTLExpiration: expiry against an injected clock
    - TestCredentialCacheThreadSafety: concurrent writers and readers
"""

from datetime import UTC, datetime, timedelta
from threading import Thread

import pytest

from libs.credentials.cache import CredentialCache
from libs.credentials.models import Credentials


def _credentials(suffix: str = "") -> Credentials:
    return Credentials(
        primary_api_key=f"primary-key{suffix}",
        secondary_api_key=f"secondary-key-0000{suffix}",
        secondary_secret=f"secondary-secret-0{suffix}",
        last_updated="2024-01-01T00:00:00Z",
    )


class TestCredentialCacheBasicOperations:
    """Test basic cache operations."""

    @pytest.mark.unit()
    def test_get_missing_returns_none(self) -> None:
        cache = CredentialCache()

        assert cache.get("nonexistent") is None
        assert len(cache) == 0

    @pytest.mark.unit()
    def test_set_and_get(self, clock) -> None:
        cache = CredentialCache(clock=clock)
        credentials = _credentials()

        entry = cache.set("api/creds", credentials)

        assert cache.get("api/creds") is credentials
        assert entry.expiry == clock() + timedelta(minutes=5)

    @pytest.mark.unit()
    def test_set_replaces_entry(self, clock) -> None:
        cache = CredentialCache(clock=clock)
        first = cache.set("api/creds", _credentials("-a"))
        clock.advance(timedelta(minutes=1))

        second = cache.set("api/creds", _credentials("-b"))

        assert second is not first
        assert second.expiry > first.expiry
        assert cache.get("api/creds") == _credentials("-b")
        assert len(cache) == 1

    @pytest.mark.unit()
    def test_names_and_contains(self) -> None:
        cache = CredentialCache()
        cache.set("a", _credentials())
        cache.set("b", _credentials())

        assert cache.names() == ["a", "b"]
        assert "a" in cache
        assert "c" not in cache

    @pytest.mark.unit()
    def test_clear_removes_everything(self) -> None:
        cache = CredentialCache()
        cache.set("a", _credentials())
        cache.set("b", _credentials())

        cache.clear()

        assert len(cache) == 0
        assert cache.names() == []
        assert cache.get("a") is None

    @pytest.mark.unit()
    @pytest.mark.parametrize("ttl", [timedelta(0), timedelta(seconds=-1)])
    def test_non_positive_ttl_rejected(self, ttl: timedelta) -> None:
        with pytest.raises(ValueError, match="ttl must be positive"):
            CredentialCache(ttl=ttl)


class TestCredentialCacheTTLExpiration:
    """Test TTL expiry using a fake clock."""

    @pytest.mark.unit()
    def test_hit_just_before_expiry(self, clock) -> None:
        cache = CredentialCache(ttl=timedelta(minutes=5), clock=clock)
        cache.set("api/creds", _credentials())

        clock.advance(timedelta(minutes=5) - timedelta(microseconds=1))

        assert cache.get("api/creds") is not None

    @pytest.mark.unit()
    def test_miss_at_expiry(self, clock) -> None:
        cache = CredentialCache(ttl=timedelta(minutes=5), clock=clock)
        cache.set("api/creds", _credentials())

        clock.advance(timedelta(minutes=5))

        assert cache.get("api/creds") is None

    @pytest.mark.unit()
    def test_expired_entry_still_reported_until_replaced(self, clock) -> None:
        cache = CredentialCache(ttl=timedelta(seconds=1), clock=clock)
        cache.set("api/creds", _credentials())
        clock.advance(timedelta(seconds=2))

        assert cache.get("api/creds") is None
        assert cache.names() == ["api/creds"]

    @pytest.mark.unit()
    def test_default_clock_is_utc(self) -> None:
        cache = CredentialCache()

        entry = cache.set("api/creds", _credentials())

        assert entry.expiry.tzinfo is UTC
        assert entry.expiry > datetime.now(UTC)


class TestCredentialCacheThreadSafety:
    """Test concurrent access."""

    @pytest.mark.unit()
    def test_concurrent_set_and_get(self) -> None:
        cache = CredentialCache()
        errors: list[BaseException] = []

        def worker(index: int) -> None:
            try:
                for i in range(200):
                    name = f"secret-{index}-{i % 10}"
                    cache.set(name, _credentials(str(i)))
                    assert cache.get(name) is not None
                    cache.names()
            except BaseException as e:  # noqa: BLE001 - surfaced via errors list
                errors.append(e)

        threads = [Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(cache) == 80
