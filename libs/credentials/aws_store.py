"""
AWS Secrets Manager Store for Production Credentials.

This module implements AWSSecretStore, which reads a secret's SecretString
from AWS Secrets Manager via boto3.

Architecture:
    - Uses boto3 client for the AWS Secrets Manager API
    - IAM role-based authentication (recommended) or access key authentication
    - Region resolution: argument > AWS_REGION > AWS_DEFAULT_REGION > us-east-1
    - Single SDK attempt per call: CredentialClient owns retries and backoff,
      so the botocore retry layer is limited to one attempt

Security Considerations:
    - Secret payloads NEVER logged (only names)
    - IAM permission required: secretsmanager:GetSecretValue
    - Secrets encrypted at rest with AWS KMS (automatic)

Usage Example:
    >>> from libs.credentials.aws_store import AWSSecretStore
    >>> store = AWSSecretStore(region_name="us-east-1")
    >>> payload = store.fetch_secret_string("signal9-advisor/api-credentials")
"""

import logging
import os
from typing import Any, cast

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from libs.credentials.exceptions import SecretAccessError, SecretNotFoundError
from libs.credentials.store import SecretStore

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"


def resolve_region(region_name: str | None = None) -> str:
    """Resolve the AWS region: explicit value, AWS_REGION, AWS_DEFAULT_REGION, then us-east-1."""
    return (
        region_name
        or os.environ.get("AWS_REGION")
        or os.environ.get("AWS_DEFAULT_REGION")
        or DEFAULT_REGION
    )


class AWSSecretStore(SecretStore):
    """
    AWS Secrets Manager store.

    Example:
        >>> # IAM role authentication (recommended)
        >>> store = AWSSecretStore(region_name="us-east-1")
        >>>
        >>> # Access key authentication (local testing only)
        >>> store = AWSSecretStore(
        ...     region_name="us-east-1",
        ...     aws_access_key_id="AKIA...",
        ...     aws_secret_access_key="..."
        ... )
    """

    backend = "aws"

    def __init__(
        self,
        region_name: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
    ) -> None:
        """
        Initialize AWSSecretStore.

        Args:
            region_name: AWS region. If None, resolved from the environment.
            aws_access_key_id: AWS access key ID (optional, for local testing)
            aws_secret_access_key: AWS secret access key (optional, for local testing)

        Raises:
            SecretAccessError: boto3 client could not be created
        """
        self._region_name = resolve_region(region_name)

        client_kwargs: dict[str, Any] = {
            "region_name": self._region_name,
            "config": Config(retries={"max_attempts": 1, "mode": "standard"}),
        }
        if aws_access_key_id is not None and aws_secret_access_key is not None:
            client_kwargs["aws_access_key_id"] = aws_access_key_id
            client_kwargs["aws_secret_access_key"] = aws_secret_access_key
            auth_mode = "access_key"
        else:
            auth_mode = "iam_role"

        try:
            self._client = boto3.client("secretsmanager", **client_kwargs)
        except (BotoCoreError, ClientError) as e:
            raise SecretAccessError(
                secret_name="aws_initialization",
                backend=self.backend,
                reason=f"AWS SDK error during initialization: {e}",
            ) from e

        logger.info(
            "AWS secret store initialized",
            extra={"region": self._region_name, "backend": self.backend, "auth": auth_mode},
        )

    @property
    def region_name(self) -> str:
        return self._region_name

    def fetch_secret_string(self, name: str) -> str | None:
        """
        Retrieve a secret's SecretString from AWS Secrets Manager.

        Args:
            name: Secret ID (name or ARN)

        Returns:
            SecretString, or None when the secret only holds SecretBinary

        Raises:
            SecretNotFoundError: ResourceNotFoundException
            SecretAccessError: Any other AWS API or SDK failure
        """
        try:
            response = self._client.get_secret_value(SecretId=name)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")

            if error_code == "ResourceNotFoundException":
                raise SecretNotFoundError(
                    secret_name=name,
                    backend=self.backend,
                    additional_context=(
                        f"Verify secret exists in region {self._region_name} with: "
                        f"aws secretsmanager describe-secret --secret-id {name}"
                    ),
                ) from e
            elif error_code == "AccessDeniedException":
                raise SecretAccessError(
                    secret_name=name,
                    backend=self.backend,
                    reason=(
                        f"Access denied for secret '{name}'. "
                        f"Verify IAM role has secretsmanager:GetSecretValue permission."
                    ),
                ) from e
            else:
                raise SecretAccessError(
                    secret_name=name,
                    backend=self.backend,
                    reason=f"AWS API error: {error_code}",
                ) from e
        except BotoCoreError as e:
            raise SecretAccessError(
                secret_name=name,
                backend=self.backend,
                reason=f"AWS SDK error retrieving secret: {e}",
            ) from e

        if "SecretString" not in response:
            logger.warning(
                "Secret has no SecretString (binary secret)",
                extra={"secret_name": name, "backend": self.backend},
            )
            return None

        logger.debug(
            "Secret loaded from AWS Secrets Manager",
            extra={"secret_name": name, "backend": self.backend},
        )
        return cast(str, response["SecretString"])

    def close(self) -> None:
        self._client.close()
