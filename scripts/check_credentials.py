#!/usr/bin/env python3
"""Health check for the API credentials secret.

Resolves the configured secret once through CredentialClient, which fetches,
validates and caches it, and reports whether it is usable. Secret values are
never printed.

Usage:
    python scripts/check_credentials.py
    check-credentials --secret-name staging/api-credentials --backend env

Exit codes:
    0 - Credentials retrieved and valid
    1 - Credentials missing, malformed or unreachable
    2 - Configuration error
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Add project root to path so the script runs without an install
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pydantic import ValidationError

from config.settings import CredentialSettings
from libs.common.logging import configure_logging
from libs.credentials import CredentialClient, CredentialClientError

EXIT_OK = 0
EXIT_UNHEALTHY = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Verify that the API credentials secret can be retrieved and validated",
    )
    parser.add_argument(
        "--secret-name",
        help="Secret identifier (default: CREDENTIALS_SECRET_NAME)",
    )
    parser.add_argument(
        "--backend",
        choices=["aws", "env"],
        help="Secret store backend (default: CREDENTIALS_BACKEND)",
    )
    parser.add_argument(
        "--region",
        help="AWS region for the aws backend",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        help="Total fetch attempts (default: CREDENTIALS_MAX_RETRIES)",
    )
    parser.add_argument(
        "--log-level",
        help="Log level (default: CREDENTIALS_LOG_LEVEL)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the health check.

    Returns:
        Exit code.
    """
    args = build_parser().parse_args(argv)

    overrides = {
        "secret_name": args.secret_name,
        "backend": args.backend,
        "region": args.region,
        "max_retries": args.max_retries,
        "log_level": args.log_level,
    }
    try:
        settings = CredentialSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    # Logs go to stderr so stdout carries only the JSON report.
    configure_logging(
        service_name="credential_health_check",
        log_level=settings.log_level,
        stream=sys.stderr,
    )

    try:
        client = CredentialClient.from_settings(settings)
    except CredentialClientError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    with client:
        healthy = client.test_credentials()
        stats = client.cache_stats()

    report = {
        "secret_name": settings.secret_name,
        "backend": settings.backend,
        "healthy": healthy,
        "cache_ttl_seconds": settings.cache_ttl_seconds,
        "cache": {"size": stats.size, "entries": stats.entries},
    }
    print(json.dumps(report, indent=2))
    return EXIT_OK if healthy else EXIT_UNHEALTHY


if __name__ == "__main__":
    sys.exit(main())
