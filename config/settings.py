"""
Configuration management for the cookie session service.

This module provides centralized configuration loading and validation using Pydantic settings.
The signing secret is loaded from the APP_KEY environment variable or a .env file.

A missing APP_KEY is never fatal: the Key Provider logs a
CONFIG_WARNING and falls back to a publicly known placeholder secret.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Literal, Optional, Tuple
from urllib.parse import urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Supported deployment environments."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


def _detect_environment() -> Environment:
    """
    Detect the current environment from the ENVIRONMENT variable.

    Returns:
        Environment: The detected environment, defaults to DEVELOPMENT if not set.
    """
    env_value = os.environ.get("ENVIRONMENT", "development").lower().strip()
    try:
        return Environment(env_value)
    except ValueError:
        return Environment.DEVELOPMENT


def _get_env_files(environment: Environment) -> Tuple[str, ...]:
    """
    Get the list of .env files to load for the given environment.

    The base .env file is loaded first, then the environment-specific file
    overrides it.
    """
    env_file_map = {
        Environment.DEVELOPMENT: ".env.development",
        Environment.STAGING: ".env.staging",
        Environment.PRODUCTION: ".env.production",
    }
    return (".env", env_file_map.get(environment, ".env.development"))


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment-specific configuration is supported through:
    - .env.development - Development environment settings
    - .env.staging - Staging environment settings
    - .env.production - Production environment settings

    The ENVIRONMENT variable determines which file to load.
    """

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment environment (development, staging, production)"
    )

    # Signing secret
    app_key: Optional[str] = Field(
        default=None,
        description="Secret used to derive the HS512 session signing key"
    )

    # Session cookie
    session_cookie_name: str = Field(
        default="sessionId",
        description="Name of the cookie carrying the signed session token"
    )
    session_cookie_path: str = Field(
        default="/",
        description="Path attribute of the session cookie"
    )
    session_cookie_httponly: bool = Field(
        default=True,
        description="Hide the session cookie from client-side scripts"
    )
    session_cookie_secure: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS"
    )
    session_cookie_samesite: Literal["lax", "strict", "none"] = Field(
        default="lax",
        description="SameSite attribute of the session cookie"
    )

    # Demo routes
    logout_redirect_origins: list[str] = Field(
        default=[],
        description="Absolute origins the logout redirect may send users to"
    )

    # Observability
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("app_key")
    @classmethod
    def validate_app_key(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank APP_KEY the same as a missing one."""
        if v is None or not v.strip():
            return None
        return v

    @field_validator("session_cookie_name")
    @classmethod
    def validate_session_cookie_name(cls, v: str) -> str:
        """Validate that the cookie name is a non-empty token."""
        v = v.strip()
        if not v:
            raise ValueError("session_cookie_name cannot be empty")
        if any(ch in v for ch in " ;,=\t\r\n\""):
            raise ValueError("session_cookie_name contains characters not allowed in a cookie name")
        return v

    @field_validator("session_cookie_path")
    @classmethod
    def validate_session_cookie_path(cls, v: str) -> str:
        """Validate that the cookie path is absolute."""
        v = v.strip()
        if not v.startswith("/"):
            raise ValueError("session_cookie_path must start with '/'")
        return v

    @field_validator("session_cookie_samesite", mode="before")
    @classmethod
    def normalize_samesite(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("logout_redirect_origins")
    @classmethod
    def validate_logout_redirect_origins(cls, v: list[str]) -> list[str]:
        """Validate redirect origins as exact scheme://host[:port] values."""
        validated = []
        for origin in v:
            origin = origin.strip().rstrip("/")
            if "*" in origin:
                raise ValueError(f"Wildcard patterns are not allowed in redirect origins: {origin}")
            parts = urlsplit(origin)
            if parts.scheme not in {"http", "https"} or not parts.netloc or parts.path:
                raise ValueError(f"Redirect origin must be scheme://host[:port]: {origin}")
            validated.append(origin)
        return validated

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a valid logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.strip().upper()
        if v not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(valid_levels))}")
        return v


class ConfigurationError(Exception):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, missing_fields: Optional[list[str]] = None,
                 invalid_fields: Optional[dict] = None):
        self.message = message
        self.missing_fields = missing_fields or []
        self.invalid_fields = invalid_fields or {}
        super().__init__(self.format_error_message())

    def format_error_message(self) -> str:
        """Format a descriptive error message listing all issues."""
        parts = [self.message]

        if self.missing_fields:
            parts.append(f"\nMissing required fields: {', '.join(self.missing_fields)}")

        if self.invalid_fields:
            invalid_parts = [f"  - {field}: {error}" for field, error in self.invalid_fields.items()]
            parts.append("\nInvalid field values:\n" + "\n".join(invalid_parts))

        return "".join(parts)


def create_settings_for_environment(environment: Optional[Environment] = None) -> Settings:
    """
    Factory function to create Settings for a specific environment.

    Args:
        environment: Optional environment override. If not provided, detected from
                    ENVIRONMENT variable.

    Returns:
        Settings: Validated settings for the specified environment.

    Raises:
        ConfigurationError: If settings are invalid.
    """
    if environment is None:
        environment = _detect_environment()

    env_files = tuple(f for f in _get_env_files(environment) if Path(f).exists())

    try:
        class EnvironmentSettings(Settings):
            model_config = SettingsConfigDict(
                env_file=env_files or None,
                env_file_encoding="utf-8",
                case_sensitive=False,
                extra="ignore"
            )

        return EnvironmentSettings()
    except Exception as e:
        missing_fields = []
        invalid_fields = {}

        if hasattr(e, "errors"):
            for error in e.errors():
                field_name = ".".join(str(loc) for loc in error.get("loc", []))
                if error.get("type", "") == "missing":
                    missing_fields.append(field_name)
                else:
                    invalid_fields[field_name] = error.get("msg", str(error))

        raise ConfigurationError(
            f"Failed to load configuration for environment '{environment.value}'",
            missing_fields=missing_fields,
            invalid_fields=invalid_fields
        ) from e


# Global settings cache
_settings_cache: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Settings are loaded once and cached for subsequent calls.
    """
    global _settings_cache

    if _settings_cache is None:
        _settings_cache = create_settings_for_environment()

    return _settings_cache


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    This is primarily useful for testing to allow reloading settings
    with different environment variables.
    """
    global _settings_cache
    _settings_cache = None


def validate_startup() -> Settings:
    """
    Load and validate all settings at application startup.

    A missing APP_KEY is not an error here; the Key Provider reports it as
    a CONFIG_WARNING when the signing key is derived.

    Returns:
        Settings: The validated application settings.

    Raises:
        ConfigurationError: If any setting is present but invalid.
    """
    settings = get_settings()
    logger.info(
        "Configuration loaded",
        extra={"extra_data": {
            "environment": settings.environment.value,
            "session_cookie_name": settings.session_cookie_name,
            "app_key_configured": settings.app_key is not None,
        }}
    )
    return settings
