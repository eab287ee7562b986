"""
API Credentials Library.

Resilient retrieval of the platform's API credentials (a vendor API key and a
paired API key/secret) from a secret store, with in-memory TTL caching,
exponential-backoff retries and strict payload validation.

Architecture:
    - CredentialClient: cache → retry → fetch → parse → validate (client.py)
    - SecretStore: store interface (store.py)
    - Store implementations: AWSSecretStore, EnvSecretStore, InMemorySecretStore
    - Factory: create_secret_store() selects a store via CREDENTIALS_BACKEND
    - Cache: 5-minute TTL in-memory cache, owned per client (cache.py)

Quick Start:
    >>> from libs.credentials import CredentialClient
    >>> client = CredentialClient()  # Reads CREDENTIALS_BACKEND env var
    >>> primary_key = client.get_primary_key()
    >>> pair = client.get_secondary_credentials()

Security Requirements:
    - Secret values NEVER logged (only secret and field names)
    - Partially valid payloads never leave the client
"""

from typing import TYPE_CHECKING, Any

# Lazy imports: store backends are only imported when explicitly accessed, so
# boto3 is not required for env/in-memory usage.
if TYPE_CHECKING:
    from libs.credentials.aws_store import AWSSecretStore as AWSSecretStore
    from libs.credentials.env_store import EnvSecretStore as EnvSecretStore

from libs.credentials.cache import CredentialCache
from libs.credentials.client import CredentialClient
from libs.credentials.exceptions import (
    CredentialClientError,
    CredentialRetrievalError,
    EmptySecretError,
    InvalidFormatError,
    MissingFieldsError,
    SecretAccessError,
    SecretNotFoundError,
    SecretParseError,
    SecretStoreError,
)
from libs.credentials.factory import create_secret_store
from libs.credentials.models import CacheEntry, CacheStats, Credentials, SecondaryCredentials
from libs.credentials.store import InMemorySecretStore, SecretStore


def __getattr__(name: str) -> Any:
    """Lazy load store implementations to avoid importing optional dependencies."""
    if name == "AWSSecretStore":
        from libs.credentials.aws_store import AWSSecretStore

        return AWSSecretStore
    if name == "EnvSecretStore":
        from libs.credentials.env_store import EnvSecretStore

        return EnvSecretStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Client
    "CredentialClient",
    # Value objects
    "Credentials",
    "SecondaryCredentials",
    "CacheEntry",
    "CacheStats",
    # Cache
    "CredentialCache",
    # Stores
    "SecretStore",
    "InMemorySecretStore",
    "AWSSecretStore",
    "EnvSecretStore",
    "create_secret_store",
    # Exceptions (callers should catch these)
    "CredentialClientError",
    "EmptySecretError",
    "SecretParseError",
    "MissingFieldsError",
    "InvalidFormatError",
    "SecretStoreError",
    "SecretNotFoundError",
    "SecretAccessError",
    "CredentialRetrievalError",
]
