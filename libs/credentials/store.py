"""
Abstract SecretStore Interface for Pluggable Credential Sources.

The credential client only needs one thing from a store: the raw string
payload of a named secret. Everything else (caching, retries, parsing,
validation) lives in CredentialClient, so stores stay thin.

Architecture:
    SecretStore (ABC)
    ├── AWSSecretStore - AWS Secrets Manager via boto3 (aws_store.py)
    ├── EnvSecretStore - Environment variables / .env file (env_store.py)
    └── InMemorySecretStore - Dict-backed store for tests and fixtures

Backend selection via factory (factory.py):
    - CREDENTIALS_BACKEND=aws → AWSSecretStore
    - CREDENTIALS_BACKEND=env → EnvSecretStore (local dev only)

Security Requirements:
    - Secret payloads are NEVER logged (only secret names)
    - Stores MUST NOT persist payloads to disk
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import TracebackType


class SecretStore(ABC):
    """
    Abstract base class for secret stores consumed by CredentialClient.

    Implementations:
        - AWSSecretStore: AWS Secrets Manager via boto3
        - EnvSecretStore: Environment variables (local development only)
        - InMemorySecretStore: Static mapping (tests)

    Thread Safety:
        Implementations MUST tolerate concurrent fetch_secret_string() calls.
    """

    backend: str = "unknown"

    @abstractmethod
    def fetch_secret_string(self, name: str) -> str | None:
        """
        Retrieve the raw string payload of a secret.

        Args:
            name: Secret identifier (e.g., "signal9-advisor/api-credentials")

        Returns:
            The secret payload as a string, or None when the secret holds no
            string payload.

        Raises:
            SecretNotFoundError: Secret doesn't exist in the store
            SecretAccessError: Authentication, permission or network failure
        """

    def close(self) -> None:  # noqa: B027 - Intentionally optional hook with default no-op
        """Release connections held by the store (default: no-op)."""

    def __enter__(self) -> "SecretStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class InMemorySecretStore(SecretStore):
    """
    Secret store backed by a plain mapping.

    Useful for tests and for wiring fixed payloads in local tooling. Missing
    names return None, which the client reports as an empty secret.

    Example:
        >>> store = InMemorySecretStore({"api/creds": '{"primaryApiKey": "..."}'})
        >>> store.fetch_secret_string("api/creds")
        '{"primaryApiKey": "..."}'
    """

    backend = "memory"

    def __init__(self, secrets: Mapping[str, str] | None = None) -> None:
        self._secrets: dict[str, str] = dict(secrets or {})

    def fetch_secret_string(self, name: str) -> str | None:
        return self._secrets.get(name)

    def put(self, name: str, payload: str) -> None:
        self._secrets[name] = payload
