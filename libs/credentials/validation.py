"""
Parsing and validation of raw credential payloads.

Turns the opaque string returned by a SecretStore into a Credentials value,
or raises a distinct error for each failure mode:

    1. No payload                      → EmptySecretError
    2. Not a JSON object               → SecretParseError
    3. Required fields absent/blank    → MissingFieldsError (all fields, fixed order)
    4. Wrong type or too short         → InvalidFormatError (first field, fixed order)

Field order is always primaryApiKey, secondaryApiKey, secondarySecret.
"""

import json
from collections.abc import Callable
from datetime import datetime
from typing import Any, Final

from libs.credentials.exceptions import (
    EmptySecretError,
    InvalidFormatError,
    MissingFieldsError,
    SecretParseError,
)
from libs.credentials.models import Credentials

PRIMARY_API_KEY: Final = "primaryApiKey"
SECONDARY_API_KEY: Final = "secondaryApiKey"
SECONDARY_SECRET: Final = "secondarySecret"
LAST_UPDATED: Final = "lastUpdated"

# Wire field name → minimum length, in validation order.
REQUIRED_FIELDS: Final[dict[str, int]] = {
    PRIMARY_API_KEY: 8,
    SECONDARY_API_KEY: 16,
    SECONDARY_SECRET: 16,
}


def parse_payload(payload: str | None, secret_name: str | None = None) -> dict[str, Any]:
    """
    Parse a raw secret payload into a JSON object.

    Raises:
        EmptySecretError: payload is None or empty
        SecretParseError: payload is rejected by the JSON parser or is not a JSON object
    """
    if not payload:
        raise EmptySecretError(secret_name=secret_name)

    try:
        parsed = json.loads(payload)
    except (ValueError, RecursionError) as e:
        # Oversized integers raise ValueError; deep nesting raises RecursionError.
        raise SecretParseError(str(e), secret_name=secret_name) from e

    if not isinstance(parsed, dict):
        raise SecretParseError(
            f"expected a JSON object, got {type(parsed).__name__}",
            secret_name=secret_name,
        )
    return parsed


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    # Non-string values count as present; the format check rejects them.
    return False


def find_missing_fields(data: dict[str, Any]) -> tuple[str, ...]:
    """Return every required field that is absent or blank, in field order."""
    return tuple(name for name in REQUIRED_FIELDS if _is_blank(data.get(name)))


def validate_credentials(
    data: dict[str, Any],
    fetched_at: datetime,
    secret_name: str | None = None,
) -> Credentials:
    """
    Validate a parsed payload and build trimmed Credentials.

    Args:
        data: Parsed JSON object
        fetched_at: Fallback for last_updated when the payload has none
        secret_name: Secret name for error context

    Raises:
        MissingFieldsError: One or more required fields absent/blank
        InvalidFormatError: First field (in order) with wrong type or length
    """
    missing = find_missing_fields(data)
    if missing:
        raise MissingFieldsError(missing, secret_name=secret_name)

    for name, min_length in REQUIRED_FIELDS.items():
        value = data[name]
        if not isinstance(value, str) or len(value) < min_length:
            raise InvalidFormatError(name, min_length, secret_name=secret_name)

    last_updated = data.get(LAST_UPDATED)
    if last_updated is None or last_updated == "":
        last_updated = fetched_at.isoformat()
    elif not isinstance(last_updated, str):
        last_updated = str(last_updated)

    return Credentials(
        primary_api_key=data[PRIMARY_API_KEY].strip(),
        secondary_api_key=data[SECONDARY_API_KEY].strip(),
        secondary_secret=data[SECONDARY_SECRET].strip(),
        last_updated=last_updated,
    )


def parse_credentials(
    payload: str | None,
    clock: Callable[[], datetime],
    secret_name: str | None = None,
) -> Credentials:
    """Parse and validate a raw payload in one step."""
    data = parse_payload(payload, secret_name=secret_name)
    return validate_credentials(data, fetched_at=clock(), secret_name=secret_name)
