"""
Resilient API credential client.

CredentialClient fetches a structured secret (primaryApiKey, secondaryApiKey,
secondarySecret) from a SecretStore, validates it, and caches the validated
value in memory for a configurable TTL.

Control flow:
    get_credentials()
    ├── cache hit (now < expiry) → return cached Credentials
    └── cache miss/expired
        ├── retry loop (tenacity): fetch → parse → validate
        │   └── wait base_retry_delay * 2**(attempt-1) between attempts (no jitter)
        ├── success → cache entry (expiry = now + cache_ttl) → return
        └── exhausted → CredentialRetrievalError (nothing cached)

Every failure from the raw fetch, including parse and validation failures,
goes through the same retry path.

Usage Example:
    >>> client = CredentialClient(secret_name="signal9-advisor/api-credentials")
    >>> primary_key = client.get_primary_key()
    >>> pair = client.get_secondary_credentials()
    >>> client.test_credentials()  # health checks
    True
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timedelta
from types import TracebackType
from typing import TYPE_CHECKING, NoReturn

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from libs.credentials.cache import CredentialCache, utc_now
from libs.credentials.exceptions import (
    CredentialClientError,
    CredentialRetrievalError,
    SecretStoreError,
)
from libs.credentials.factory import create_secret_store
from libs.credentials.models import CacheStats, Credentials, SecondaryCredentials
from libs.credentials.store import SecretStore
from libs.credentials.validation import parse_credentials

if TYPE_CHECKING:
    from config.settings import CredentialSettings

logger = logging.getLogger(__name__)

DEFAULT_SECRET_NAME = "signal9-advisor/api-credentials"
DEFAULT_CACHE_TTL = timedelta(minutes=5)
DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_RETRY_DELAY = timedelta(milliseconds=1000)


class CredentialClient:
    """
    Cached, retrying, validating client for API credentials.

    Each client owns its cache; independently configured clients never share
    state. All public methods are safe to call from multiple threads.
    Concurrent cache misses are not collapsed: each caller fetches and the
    last write wins.

    Attributes:
        secret_name: Secret served by this client
        cache_ttl: How long a validated value stays fresh
        max_retries: Total fetch attempts per cache miss (>= 1)
        base_retry_delay: Delay before the second attempt; doubles afterwards
    """

    def __init__(
        self,
        secret_name: str = DEFAULT_SECRET_NAME,
        cache_ttl: timedelta = DEFAULT_CACHE_TTL,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_retry_delay: timedelta = DEFAULT_BASE_RETRY_DELAY,
        store: SecretStore | None = None,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize CredentialClient.

        Args:
            secret_name: Secret identifier in the store
            cache_ttl: Cache time-to-live. Default: 5 minutes.
            max_retries: Total attempts per fetch, must be >= 1. Default: 3.
            base_retry_delay: Initial backoff delay. Default: 1000 ms.
            store: Secret store. Default: create_secret_store() (CREDENTIALS_BACKEND).
            clock: Current-time source, used for TTL and last_updated fallback.
            sleep: Blocking sleep used between attempts (seconds).

        Raises:
            ValueError: Invalid secret_name, max_retries, base_retry_delay or cache_ttl
        """
        if not secret_name or not secret_name.strip():
            raise ValueError("secret_name must be a non-empty string")
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        if base_retry_delay < timedelta(0):
            raise ValueError(f"base_retry_delay must be >= 0, got {base_retry_delay}")

        self.secret_name = secret_name
        self.cache_ttl = cache_ttl
        self.max_retries = max_retries
        self.base_retry_delay = base_retry_delay
        self._clock = clock
        self._sleep = sleep
        self._cache = CredentialCache(ttl=cache_ttl, clock=clock)
        self._store = store if store is not None else create_secret_store()

    @classmethod
    def from_settings(
        cls,
        settings: "CredentialSettings",
        store: SecretStore | None = None,
    ) -> "CredentialClient":
        """Build a client from CredentialSettings (CREDENTIALS_* environment variables)."""
        if store is None:
            store = create_secret_store(backend=settings.backend, region_name=settings.region)
        return cls(
            secret_name=settings.secret_name,
            cache_ttl=timedelta(seconds=settings.cache_ttl_seconds),
            max_retries=settings.max_retries,
            base_retry_delay=timedelta(milliseconds=settings.base_retry_delay_ms),
            store=store,
        )

    def get_credentials(self) -> Credentials:
        """
        Return validated credentials, from cache when fresh.

        Raises:
            CredentialRetrievalError: All attempts failed; wraps the last error.
                Failures are never cached, so the next call starts over.
        """
        cached = self._cache.get(self.secret_name)
        if cached is not None:
            logger.debug("Credentials cache hit", extra={"secret_name": self.secret_name})
            return cached

        logger.info(
            "Credentials cache miss or expired, fetching from secret store",
            extra={"secret_name": self.secret_name, "backend": self._store.backend},
        )
        credentials = self._build_retryer()(self._fetch_credentials)

        self._cache.set(self.secret_name, credentials)
        logger.info(
            "Credentials retrieved and cached",
            extra={
                "secret_name": self.secret_name,
                "ttl_seconds": self.cache_ttl.total_seconds(),
            },
        )
        return credentials

    def get_primary_key(self) -> str:
        """Return only the primary API key."""
        return self.get_credentials().primary_api_key

    def get_secondary_credentials(self) -> SecondaryCredentials:
        """Return the secondary API key/secret pair."""
        credentials = self.get_credentials()
        return SecondaryCredentials(
            api_key=credentials.secondary_api_key,
            api_secret=credentials.secondary_secret,
        )

    def test_credentials(self) -> bool:
        """
        Health check: True if credentials can be retrieved, False otherwise.

        This is the only method that downgrades a failure to a soft signal;
        the error is logged, not raised.
        """
        try:
            self.get_credentials()
        except Exception as e:
            logger.error(
                "Credential test failed",
                extra={
                    "secret_name": self.secret_name,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            )
            return False
        return True

    def clear_cache(self) -> None:
        """Drop every cached entry; the next get_credentials() always fetches."""
        self._cache.clear()
        logger.info("Credentials cache cleared", extra={"secret_name": self.secret_name})

    def cache_stats(self) -> CacheStats:
        """Return cache size and cached secret names without fetching anything."""
        return CacheStats(size=len(self._cache), entries=tuple(self._cache.names()))

    def close(self) -> None:
        """Clear the cache and release the store."""
        self._cache.clear()
        self._store.close()

    def __enter__(self) -> "CredentialClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def _build_retryer(self) -> Retrying:
        # A fresh Retrying per call keeps attempt state local to the caller's thread.
        return Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.base_retry_delay.total_seconds(), exp_base=2),
            retry=retry_if_exception_type(Exception),
            before_sleep=self._log_retry,
            retry_error_callback=self._raise_retrieval_error,
            sleep=self._sleep,
        )

    def _fetch_credentials(self) -> Credentials:
        """One attempt: fetch the raw payload, parse it and validate it."""
        try:
            payload = self._store.fetch_secret_string(self.secret_name)
            return parse_credentials(payload, clock=self._clock, secret_name=self.secret_name)
        except CredentialClientError:
            raise
        except Exception as e:
            raise SecretStoreError(
                reason=f"{type(e).__name__}: {e}",
                secret_name=self.secret_name,
                backend=self._store.backend,
            ) from e

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "Credential fetch attempt %d failed, retrying in %dms",
            retry_state.attempt_number,
            int(delay * 1000),
            extra={
                "secret_name": self.secret_name,
                "attempt": retry_state.attempt_number,
                "max_retries": self.max_retries,
                "delay_ms": int(delay * 1000),
                "error": str(error),
            },
        )

    def _raise_retrieval_error(self, retry_state: RetryCallState) -> NoReturn:
        outcome = retry_state.outcome
        last_error = outcome.exception() if outcome is not None else None
        if last_error is None:
            raise RuntimeError("Retries exhausted without a recorded failure")
        logger.error(
            "All %d credential fetch attempts failed",
            retry_state.attempt_number,
            extra={
                "secret_name": self.secret_name,
                "attempts": retry_state.attempt_number,
                "error": str(last_error),
            },
        )
        raise CredentialRetrievalError(
            secret_name=self.secret_name,
            attempts=retry_state.attempt_number,
            last_error=last_error,
        ) from last_error
