"""Tests for the credential exception hierarchy (libs/credentials/exceptions.py)."""

import pytest

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


class TestExceptionHierarchy:
    """Every error is catchable through the base class."""

    @pytest.mark.unit()
    @pytest.mark.parametrize(
        "error",
        [
            EmptySecretError(),
            SecretParseError("bad"),
            MissingFieldsError(("primaryApiKey",)),
            InvalidFormatError("primaryApiKey", 8),
            SecretStoreError("boom"),
            SecretNotFoundError("api/creds", "aws"),
            SecretAccessError("api/creds", "aws", "denied"),
            CredentialRetrievalError("api/creds", 3, EmptySecretError()),
        ],
    )
    def test_all_derive_from_base(self, error: CredentialClientError) -> None:
        assert isinstance(error, CredentialClientError)

    @pytest.mark.unit()
    def test_store_errors_share_parent(self) -> None:
        assert issubclass(SecretNotFoundError, SecretStoreError)
        assert issubclass(SecretAccessError, SecretStoreError)


class TestExceptionMessages:
    """Test message formatting and context."""

    @pytest.mark.unit()
    def test_context_appended(self) -> None:
        error = CredentialClientError("Timeout", secret_name="api/creds", backend="aws")

        assert str(error) == "Timeout (secret: api/creds, backend: aws)"

    @pytest.mark.unit()
    def test_no_context(self) -> None:
        assert str(CredentialClientError("Timeout")) == "Timeout"

    @pytest.mark.unit()
    def test_missing_fields_message(self) -> None:
        error = MissingFieldsError(("primaryApiKey", "secondaryApiKey", "secondarySecret"))

        assert str(error) == (
            "Missing or empty required API credentials: "
            "primaryApiKey, secondaryApiKey, secondarySecret"
        )

    @pytest.mark.unit()
    def test_missing_fields_requires_fields(self) -> None:
        with pytest.raises(TypeError):
            MissingFieldsError(())

    @pytest.mark.unit()
    def test_retrieval_error_embeds_last_message(self) -> None:
        last = SecretAccessError("api/creds", "aws", "Token expired")

        error = CredentialRetrievalError("api/creds", 3, last)

        assert str(error) == (
            "Failed to get API credentials: Access denied: Token expired "
            "(secret: api/creds, backend: aws)"
        )
        assert error.attempts == 3
        assert error.last_error is last

    @pytest.mark.unit()
    @pytest.mark.parametrize(
        ("secret_name", "backend"),
        [("", "aws"), ("api/creds", "")],
    )
    def test_not_found_rejects_blank_context(self, secret_name: str, backend: str) -> None:
        with pytest.raises(TypeError):
            SecretNotFoundError(secret_name, backend)

    @pytest.mark.unit()
    def test_access_error_rejects_blank_reason(self) -> None:
        with pytest.raises(TypeError):
            SecretAccessError("api/creds", "aws", "")
