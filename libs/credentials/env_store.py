"""
Environment Variable Secret Store.

This module implements EnvSecretStore, a local development store that reads
a secret's JSON payload from an environment variable, optionally loading a
.env file first. It MUST NOT be used in staging or production (the factory
enforces this).

Naming Convention:
    The secret name is upper-cased and "/", "-" and "." become "_":
    "signal9-advisor/api-credentials" → "SIGNAL9_ADVISOR_API_CREDENTIALS"

Usage Example:
    >>> store = EnvSecretStore(dotenv_path=".env")
    >>> store.fetch_secret_string("signal9-advisor/api-credentials")
    '{"primaryApiKey": "...", ...}'
"""

import logging
import os
import re
from pathlib import Path

from dotenv import load_dotenv

from libs.credentials.exceptions import SecretAccessError
from libs.credentials.store import SecretStore

logger = logging.getLogger(__name__)

_ENV_NAME_SEPARATORS = re.compile(r"[/\-.]")


def env_var_name(secret_name: str) -> str:
    """Convert a secret name to its environment variable name."""
    return _ENV_NAME_SEPARATORS.sub("_", secret_name).upper()


class EnvSecretStore(SecretStore):
    """
    Environment variable secret store for local development.

    **WARNING**: LOCAL DEVELOPMENT ONLY. Use AWSSecretStore in staging/production.
    """

    backend = "env"

    def __init__(self, dotenv_path: str | Path | None = None) -> None:
        """
        Initialize EnvSecretStore with optional .env file loading.

        Args:
            dotenv_path: Optional path to a .env file to load (overrides
                         already-set variables).

        Raises:
            SecretAccessError: If dotenv_path is given but the file doesn't exist
        """
        self._dotenv_path = Path(dotenv_path) if dotenv_path is not None else None

        if self._dotenv_path is not None:
            if not self._dotenv_path.is_file():
                raise SecretAccessError(
                    secret_name="dotenv_file",
                    backend=self.backend,
                    reason=f".env file not found: {self._dotenv_path}",
                )
            load_dotenv(dotenv_path=self._dotenv_path, override=True)
            logger.info(
                "Loaded .env file for credential store",
                extra={"dotenv_path": str(self._dotenv_path), "backend": self.backend},
            )
        else:
            logger.info(
                "Using environment variables without .env file",
                extra={"backend": self.backend},
            )

    def fetch_secret_string(self, name: str) -> str | None:
        """
        Read the secret payload from the environment.

        Returns:
            The variable's value, or None when the variable is not set.
        """
        variable = env_var_name(name)
        value = os.environ.get(variable)
        if value is None:
            logger.warning(
                "Secret environment variable not set",
                extra={"secret_name": name, "env_var": variable, "backend": self.backend},
            )
            return None

        logger.debug(
            "Secret loaded from environment",
            extra={"secret_name": name, "env_var": variable, "backend": self.backend},
        )
        return value
