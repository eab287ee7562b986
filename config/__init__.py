"""Configuration management."""

from config.settings import CredentialSettings, get_settings

__all__ = [
    "CredentialSettings",
    "get_settings",
]
