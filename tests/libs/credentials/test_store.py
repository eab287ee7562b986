"""Tests for the SecretStore interface and InMemorySecretStore."""

import pytest

from libs.credentials.store import InMemorySecretStore, SecretStore


class _ClosingStore(SecretStore):
    backend = "closing"

    def __init__(self) -> None:
        self.closed = False

    def fetch_secret_string(self, name: str) -> str | None:
        return None

    def close(self) -> None:
        self.closed = True


class TestSecretStoreInterface:
    """Test the abstract interface."""

    @pytest.mark.unit()
    def test_cannot_instantiate_abstract_store(self) -> None:
        with pytest.raises(TypeError):
            SecretStore()  # type: ignore[abstract]

    @pytest.mark.unit()
    def test_context_manager_closes_store(self) -> None:
        store = _ClosingStore()

        with store as entered:
            assert entered is store
            assert store.closed is False

        assert store.closed is True

    @pytest.mark.unit()
    def test_default_close_is_noop(self) -> None:
        store = InMemorySecretStore()

        store.close()

        assert store.fetch_secret_string("anything") is None


class TestInMemorySecretStore:
    """Test the mapping-backed store."""

    @pytest.mark.unit()
    def test_fetch_known_secret(self) -> None:
        store = InMemorySecretStore({"api/creds": '{"primaryApiKey": "x"}'})

        assert store.fetch_secret_string("api/creds") == '{"primaryApiKey": "x"}'
        assert store.backend == "memory"

    @pytest.mark.unit()
    def test_missing_secret_returns_none(self) -> None:
        assert InMemorySecretStore().fetch_secret_string("api/creds") is None

    @pytest.mark.unit()
    def test_put_replaces_payload(self) -> None:
        store = InMemorySecretStore({"api/creds": "old"})

        store.put("api/creds", "new")

        assert store.fetch_secret_string("api/creds") == "new"

    @pytest.mark.unit()
    def test_input_mapping_is_copied(self) -> None:
        secrets = {"api/creds": "original"}
        store = InMemorySecretStore(secrets)

        secrets["api/creds"] = "mutated"

        assert store.fetch_secret_string("api/creds") == "original"
