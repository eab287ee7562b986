"""
Credential Client Exception Hierarchy.

This module defines all exceptions raised while retrieving, parsing and
validating API credentials from a secret store.

Exception hierarchy:
    CredentialClientError (base)
    ├── EmptySecretError - Store returned no payload
    ├── SecretParseError - Payload is not a JSON object
    ├── MissingFieldsError - One or more required fields absent/empty
    ├── InvalidFormatError - A present field fails its type/length rule
    ├── SecretStoreError - Unexpected store or parser failure (wrapped)
    │   ├── SecretNotFoundError - Secret doesn't exist in the store
    │   └── SecretAccessError - Permission/authentication/network failure
    └── CredentialRetrievalError - All retry attempts exhausted

All exceptions carry structured context (secret name, backend) and name the
offending fields only. Secret values never appear in messages.
"""


class CredentialClientError(Exception):
    """
    Base exception for all credential client errors.

    Attributes:
        message: Human-readable error message (MUST NOT include secret values)
        secret_name: Name of the secret being resolved (e.g., "signal9-advisor/api-credentials")
        backend: Store type ("aws", "env", "memory")

    Example:
        >>> try:
        ...     creds = client.get_credentials()
        ... except CredentialClientError as e:
        ...     logger.error("Credential error", extra={"secret_name": e.secret_name})
    """

    def __init__(
        self,
        message: str,
        secret_name: str | None = None,
        backend: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.secret_name = secret_name
        self.backend = backend

    def __str__(self) -> str:
        """
        Format error message with context (secret name + backend).

        Example:
            >>> str(CredentialClientError("Timeout", "api/creds", "aws"))
            'Timeout (secret: api/creds, backend: aws)'
        """
        context_parts = []
        if self.secret_name:
            context_parts.append(f"secret: {self.secret_name}")
        if self.backend:
            context_parts.append(f"backend: {self.backend}")

        if context_parts:
            return f"{self.message} ({', '.join(context_parts)})"
        return self.message


class EmptySecretError(CredentialClientError):
    """Raised when the store returns no string payload for the secret."""

    def __init__(self, secret_name: str | None = None) -> None:
        super().__init__(
            message="Secret string is empty or not found",
            secret_name=secret_name,
        )


class SecretParseError(CredentialClientError):
    """
    Raised when the secret payload is not a well-formed JSON object.

    The underlying parser message is kept in the error message so operators
    can locate the problem without seeing the payload itself.
    """

    def __init__(self, reason: str, secret_name: str | None = None) -> None:
        super().__init__(
            message=f"Failed to parse secret JSON: {reason}",
            secret_name=secret_name,
        )
        self.reason = reason


class MissingFieldsError(CredentialClientError):
    """
    Raised when required credential fields are absent or blank.

    Every offending field is reported at once, in the fixed field order
    (primaryApiKey, secondaryApiKey, secondarySecret).

    Example:
        >>> raise MissingFieldsError(("primaryApiKey", "secondarySecret"))
        MissingFieldsError: Missing or empty required API credentials: primaryApiKey, secondarySecret
    """

    def __init__(self, fields: tuple[str, ...], secret_name: str | None = None) -> None:
        if not fields:
            raise TypeError("fields must name at least one missing field")

        super().__init__(
            message=f"Missing or empty required API credentials: {', '.join(fields)}",
            secret_name=secret_name,
        )
        self.fields = tuple(fields)


class InvalidFormatError(CredentialClientError):
    """Raised when a present field has the wrong type or is too short."""

    def __init__(self, field: str, min_length: int, secret_name: str | None = None) -> None:
        super().__init__(
            message=(
                f"Invalid {field} format: expected a string of at least {min_length} characters"
            ),
            secret_name=secret_name,
        )
        self.field = field
        self.min_length = min_length


class SecretStoreError(CredentialClientError):
    """
    Raised when the secret store (or anything underneath it) fails unexpectedly.

    Used to wrap foreign exceptions so that their message survives while the
    caller only needs to catch CredentialClientError.
    """

    def __init__(
        self,
        reason: str,
        secret_name: str | None = None,
        backend: str | None = None,
    ) -> None:
        super().__init__(message=reason, secret_name=secret_name, backend=backend)
        self.reason = reason


class SecretNotFoundError(SecretStoreError):
    """
    Raised when the requested secret doesn't exist in the store.

    Common causes:
    - Secret not yet created in the target account/region
    - Wrong secret name in configuration (CREDENTIALS_SECRET_NAME)
    - Wrong region (AWS_REGION)
    """

    def __init__(
        self,
        secret_name: str,
        backend: str,
        additional_context: str | None = None,
    ) -> None:
        if not isinstance(secret_name, str) or not secret_name:
            raise TypeError("secret_name must be a non-empty string")
        if not isinstance(backend, str) or not backend:
            raise TypeError("backend must be a non-empty string")

        message = f"Secret '{secret_name}' not found in {backend.upper()}"
        if additional_context:
            message += f". {additional_context}"

        super().__init__(reason=message, secret_name=secret_name, backend=backend)


class SecretAccessError(SecretStoreError):
    """
    Raised when authentication, authorization or connectivity to the store fails.

    Common causes:
    - Missing secretsmanager:GetSecretValue permission
    - Expired or invalid AWS credentials
    - Network timeout (store unreachable)
    """

    def __init__(self, secret_name: str, backend: str, reason: str) -> None:
        if not isinstance(secret_name, str) or not secret_name:
            raise TypeError("secret_name must be a non-empty string")
        if not isinstance(backend, str) or not backend:
            raise TypeError("backend must be a non-empty string")
        if not isinstance(reason, str) or not reason:
            raise TypeError("reason must be a non-empty string")

        super().__init__(
            reason=f"Access denied: {reason}",
            secret_name=secret_name,
            backend=backend,
        )


class CredentialRetrievalError(CredentialClientError):
    """
    Raised when every retry attempt to fetch credentials has failed.

    Wraps the last attempt's error: its message is embedded in this error's
    message and the error itself is available as ``last_error`` (and as
    ``__cause__`` when raised with ``from``).

    Attributes:
        attempts: Number of attempts made before giving up
        last_error: Exception raised by the final attempt
    """

    def __init__(self, secret_name: str, attempts: int, last_error: BaseException) -> None:
        super().__init__(
            message=f"Failed to get API credentials: {last_error}",
            secret_name=secret_name,
        )
        self.attempts = attempts
        self.last_error = last_error

    def __str__(self) -> str:
        # The last error already carries its own secret/backend context.
        return self.message
