"""Shared fixtures for credential client tests."""

import json
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from libs.credentials.store import SecretStore

SECRET_NAME = "test-secret-name"

VALID_PAYLOAD: dict[str, str] = {
    "primaryApiKey": "test-primary-key-12345",
    "secondaryApiKey": "test-secondary-key-1234567890",
    "secondarySecret": "test-secondary-secret-1234567890",
    "lastUpdated": "2024-01-01T00:00:00Z",
}


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class RecordingSleep:
    """Sleep replacement that records requested delays instead of blocking."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class ScriptedStore(SecretStore):
    """
    Store that replays a script of outcomes, one per call.

    Each item is either a payload (str or None) or an exception instance to
    raise. The last item repeats once the script is exhausted.
    """

    backend = "scripted"

    def __init__(self, *outcomes: Any) -> None:
        if not outcomes:
            raise ValueError("ScriptedStore needs at least one outcome")
        self._outcomes = list(outcomes)
        self.calls: list[str] = []
        self.closed = False

    def fetch_secret_string(self, name: str) -> str | None:
        self.calls.append(name)
        index = min(len(self.calls), len(self._outcomes)) - 1
        outcome = self._outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


def payload(**overrides: Any) -> str:
    """Return VALID_PAYLOAD as JSON, with fields overridden (None removes a field)."""
    data: dict[str, Any] = dict(VALID_PAYLOAD)
    for key, value in overrides.items():
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
    return json.dumps(data)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def secret_name() -> str:
    return SECRET_NAME


@pytest.fixture()
def valid_data() -> dict[str, str]:
    return dict(VALID_PAYLOAD)


@pytest.fixture()
def valid_payload() -> str:
    return payload()


@pytest.fixture()
def make_payload() -> Callable[..., str]:
    return payload


@pytest.fixture()
def make_store() -> Callable[..., ScriptedStore]:
    return ScriptedStore


@pytest.fixture()
def clean_credentials_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    """Remove environment variables that influence store selection."""
    for var in (
        "CREDENTIALS_BACKEND",
        "DEPLOYMENT_ENV",
        "SECRET_DOTENV_PATH",
        "SECRET_ALLOW_ENV_IN_NON_LOCAL",
        "AWS_REGION",
        "AWS_DEFAULT_REGION",
    ):
        monkeypatch.delenv(var, raising=False)
    yield monkeypatch
