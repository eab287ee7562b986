"""
Thread-safe in-memory cache for validated credentials with TTL expiration.

Architecture:
    - Thread-safe with threading.Lock for concurrent access
    - In-memory only (NO disk persistence for security)
    - Entries carry an absolute expiry (fetch time + TTL)
    - Entries are replaced on refresh, never mutated in place
    - Only bulk clearing is supported (no per-key invalidation)
    - Clock is injectable so TTL expiry can be tested deterministically

Example Usage:
    >>> from datetime import timedelta
    >>> cache = CredentialCache(ttl=timedelta(minutes=5))
    >>> cache.set("signal9-advisor/api-credentials", credentials)
    >>> cache.get("signal9-advisor/api-credentials")
    Credentials(...)
    >>> cache.clear()
    >>> len(cache)
    0
"""

import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from libs.credentials.models import CacheEntry, Credentials


def utc_now() -> datetime:
    """Default clock: current time in UTC."""
    return datetime.now(UTC)


class CredentialCache:
    """
    Thread-safe in-memory cache mapping secret names to CacheEntry values.

    A lookup is a hit only while ``now < entry.expiry``. Expired entries are
    left in place until they are overwritten by the next successful fetch or
    removed by clear(), so ``len()`` and ``names()`` report every secret the
    cache has served since the last clear.

    Attributes:
        _entries: Internal storage dict mapping secret names to CacheEntry
        _ttl: Time-to-live added to the fetch time to compute expiry
        _clock: Zero-argument callable returning the current aware datetime
        _lock: Threading lock for concurrent access protection

    Thread Safety:
        All public methods are thread-safe and can be called from multiple
        threads concurrently without external synchronization.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=5),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize CredentialCache.

        Args:
            ttl: Time-to-live for cached entries. Default: 5 minutes.
            clock: Source of the current time. Default: datetime.now(UTC).

        Raises:
            ValueError: If ttl is not positive
        """
        if ttl <= timedelta(0):
            raise ValueError(f"ttl must be positive, got {ttl}")

        self._entries: dict[str, CacheEntry] = {}
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get(self, name: str) -> Credentials | None:
        """
        Return cached credentials if present and not yet expired.

        Args:
            name: Secret name the credentials were fetched from

        Returns:
            Credentials on a cache hit, None on a miss or after expiry
        """
        with self._lock:
            entry = self._entries.get(name)

        if entry is None:
            return None
        if self._clock() < entry.expiry:
            return entry.credentials
        return None

    def set(self, name: str, credentials: Credentials) -> CacheEntry:
        """
        Store credentials with ``expiry = now + ttl``, replacing any previous entry.

        Args:
            name: Secret name the credentials were fetched from
            credentials: Fully validated credentials

        Returns:
            The newly created CacheEntry
        """
        entry = CacheEntry(credentials=credentials, expiry=self._clock() + self._ttl)
        with self._lock:
            self._entries[name] = entry
        return entry

    def clear(self) -> None:
        """Remove all cached entries."""
        with self._lock:
            self._entries.clear()

    def names(self) -> list[str]:
        """Return the cached secret names in insertion order."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entries
