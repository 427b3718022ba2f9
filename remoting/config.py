"""
Configuration module for the remoting backend.

Loads environment variables and validates required settings.
"""
import logging
import os
from typing import List

from dotenv import load_dotenv

# Load .env file
load_dotenv()

logger = logging.getLogger(__name__)


class Settings:
    """Application settings loaded from environment variables."""

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Transport mount points
    REST_API_ROOT: str = os.getenv("REST_API_ROOT", "/api")
    SOCKET_PATH: str = os.getenv("SOCKET_PATH", "/socket")

    # CORS Settings (comma-separated; empty means "none" in production)
    CORS_ALLOWED_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required settings are configured.

        Raises:
            ValueError: If any setting is missing or malformed.
        """
        problems = []

        for key in ("REST_API_ROOT", "SOCKET_PATH"):
            value = getattr(cls, key)
            if not value.startswith("/"):
                problems.append(f"{key} must start with '/' (got {value!r})")

        if cls.REST_API_ROOT.rstrip("/") == cls.SOCKET_PATH.rstrip("/"):
            problems.append("REST_API_ROOT and SOCKET_PATH must differ")

        if problems:
            raise ValueError(
                f"Invalid configuration: {'; '.join(problems)}. "
                "Please check your .env file."
            )

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"

    @property
    def log_level(self) -> int:
        """LOG_LEVEL as a logging module constant (INFO when unrecognized)."""
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            logger.warning(f"{e} The app may not work correctly until the configuration is fixed.")
        else:
            # In production or staging, fail immediately
            raise
