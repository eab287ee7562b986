"""
Factory for creating SecretStore instances based on environment configuration.

    - CREDENTIALS_BACKEND="aws" → AWSSecretStore (default)
    - CREDENTIALS_BACKEND="env" → EnvSecretStore (local development only)

Production Guardrails:
    - EnvSecretStore is ONLY allowed when DEPLOYMENT_ENV="local"
    - Staging/production MUST use AWS Secrets Manager unless
      SECRET_ALLOW_ENV_IN_NON_LOCAL is set (emergency rollback only)

Environment Variables:
    CREDENTIALS_BACKEND (str): "aws" or "env" (default: "aws")
    DEPLOYMENT_ENV (str): "local", "staging" or "production" (default: "local")
    SECRET_DOTENV_PATH (str, optional): .env file for EnvSecretStore
    SECRET_ALLOW_ENV_IN_NON_LOCAL (bool, optional): allow EnvSecretStore outside local
    AWS_REGION / AWS_DEFAULT_REGION (str, optional): region for AWSSecretStore
"""

import logging
import os
from pathlib import Path
from typing import Final

from libs.credentials.exceptions import CredentialClientError
from libs.credentials.store import SecretStore

logger = logging.getLogger(__name__)

_TRUTHY_VALUES: Final[set[str]] = {"1", "true", "yes", "on"}
VALID_BACKENDS: Final[tuple[str, ...]] = ("aws", "env")


def _is_truthy(value: str | None) -> bool:
    """Return True when the provided environment variable looks truthy."""
    return bool(value and value.strip().lower() in _TRUTHY_VALUES)


def _resolve_dotenv_path() -> Path | None:
    """
    Resolve the .env file path to load for EnvSecretStore.

    Priority:
        1. SECRET_DOTENV_PATH (must exist, otherwise raise)
        2. "./.env" (if present)
        3. No .env file
    """
    override_path = os.getenv("SECRET_DOTENV_PATH")
    if override_path:
        candidate = Path(override_path).expanduser().resolve()
        if not candidate.is_file():
            raise CredentialClientError(
                f"SECRET_DOTENV_PATH is set to '{candidate}', but the file does not exist."
            )
        return candidate

    default_path = Path.cwd() / ".env"
    return default_path if default_path.is_file() else None


def create_secret_store(
    backend: str | None = None,
    deployment_env: str | None = None,
    region_name: str | None = None,
) -> SecretStore:
    """
    Create a SecretStore based on arguments or environment configuration.

    Args:
        backend: "aws" or "env". If None, reads CREDENTIALS_BACKEND (default: "aws").
        deployment_env: "local", "staging", "production". If None, reads
                        DEPLOYMENT_ENV (default: "local").
        region_name: AWS region override for the aws backend.

    Returns:
        Configured SecretStore instance

    Raises:
        CredentialClientError: Unknown backend, or env backend outside local
                               without the override flag

    Examples:
        >>> store = create_secret_store(backend="aws", region_name="us-west-2")
        >>> store = create_secret_store(backend="env")  # local development
    """
    selected_backend_raw = (
        backend if backend is not None else os.getenv("CREDENTIALS_BACKEND", "aws")
    )
    selected_env_raw = (
        deployment_env if deployment_env is not None else os.getenv("DEPLOYMENT_ENV", "local")
    )

    selected_backend = selected_backend_raw.lower().strip() or "aws"
    selected_env = selected_env_raw.lower().strip()

    allow_env_override = _is_truthy(os.getenv("SECRET_ALLOW_ENV_IN_NON_LOCAL"))
    if selected_backend == "env" and selected_env != "local":
        if not allow_env_override:
            raise CredentialClientError(
                f"EnvSecretStore not allowed in {selected_env} environment. "
                f"Plain-text environment credentials are LOCAL DEVELOPMENT ONLY. "
                f"Use CREDENTIALS_BACKEND='aws' for staging/production."
            )
        logger.warning(
            "EnvSecretStore override enabled for %s environment. "
            "Use only for rollback/emergency scenarios.",
            selected_env,
        )

    # Imported lazily so boto3 is only needed when the aws backend is used.
    if selected_backend == "env":
        from libs.credentials.env_store import EnvSecretStore

        return EnvSecretStore(dotenv_path=_resolve_dotenv_path())

    elif selected_backend == "aws":
        from libs.credentials.aws_store import AWSSecretStore

        return AWSSecretStore(region_name=region_name)

    raise CredentialClientError(
        f"Invalid CREDENTIALS_BACKEND: '{selected_backend}'. "
        f"Valid options: {', '.join(repr(b) for b in VALID_BACKENDS)}."
    )
