"""Value objects returned by the credential client."""

from dataclasses import dataclass, field
from datetime import datetime


def _mask(value: str) -> str:
    """Mask a secret for repr(), keeping only the last 4 characters."""
    if len(value) <= 4:
        return "****"
    return f"****{value[-4:]}"


@dataclass(frozen=True)
class Credentials:
    """
    Validated API credentials.

    Instances are only built after presence and format validation succeeded,
    so every field is trimmed and meets its minimum length.

    Attributes:
        primary_api_key: Vendor API key (wire field ``primaryApiKey``, >= 8 chars)
        secondary_api_key: Paired API key (wire field ``secondaryApiKey``, >= 16 chars)
        secondary_secret: Paired API secret (wire field ``secondarySecret``, >= 16 chars)
        last_updated: ``lastUpdated`` from the payload (non-strings converted with
            str()), or the fetch time when absent or empty
    """

    primary_api_key: str = field(repr=False)
    secondary_api_key: str = field(repr=False)
    secondary_secret: str = field(repr=False)
    last_updated: str

    def __repr__(self) -> str:
        return (
            "Credentials(primary_api_key='****', "
            f"secondary_api_key='{_mask(self.secondary_api_key)}', "
            f"secondary_secret='****', last_updated='{self.last_updated}')"
        )


@dataclass(frozen=True)
class SecondaryCredentials:
    """API key/secret pair projected from Credentials."""

    api_key: str = field(repr=False)
    api_secret: str = field(repr=False)


@dataclass(frozen=True)
class CacheEntry:
    """Cached credentials with an absolute expiry time."""

    credentials: Credentials
    expiry: datetime


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of the credential cache for observability."""

    size: int
    entries: tuple[str, ...]
