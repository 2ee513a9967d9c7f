"""
Class Service — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Environment variable names follow the deployment manifests of the platform
(OAUTH_INTERNAL_*, MONGODB_*), so the same compose file can drive this service.
"""

from typing import List
from urllib.parse import quote_plus

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults matching the container network of the
    platform (`oauth:8080`, `mongodb:27017`).
    """

    # ── OAuth gateway ─────────────────────────────────────────────────────
    # The validation endpoint is <protocol>://<host>:<port>/validate.
    # Each piece is a plain string so any override is passed through untouched.
    oauth_internal_protocol: str = Field(default="http")
    oauth_internal_host: str = Field(default="oauth")
    oauth_internal_api_port: str = Field(default="8080")

    @property
    def oauth_validate_url(self) -> str:
        return (
            f"{self.oauth_internal_protocol}://{self.oauth_internal_host}"
            f":{self.oauth_internal_api_port}/validate"
        )

    # ── Document store ────────────────────────────────────────────────────
    # MONGODB_URI wins when set; otherwise the URI is assembled from parts.
    mongodb_uri: str = Field(default="", description="Full MongoDB connection string")
    mongodb_host: str = Field(default="mongodb")
    mongodb_port: int = Field(default=27017, ge=1, le=65535)
    mongodb_username: str = Field(default="")
    mongodb_password: str = Field(default="")
    mongodb_database: str = Field(default="classes")
    mongodb_collection: str = Field(default="Classes")
    # How long the driver waits for a reachable server before failing a call;
    # bounds /health and the startup bootstrap when the store is down.
    mongodb_server_selection_timeout_ms: int = Field(default=5000, ge=1)

    @property
    def mongodb_connection_string(self) -> str:
        """
        What: The URI handed to the Mongo driver.
        How:  Credentials are included only when both username and password
              are configured, and are URL-escaped.
        """
        if self.mongodb_uri:
            return self.mongodb_uri
        credentials = ""
        if self.mongodb_username and self.mongodb_password:
            credentials = (
                f"{quote_plus(self.mongodb_username)}:{quote_plus(self.mongodb_password)}@"
            )
        return (
            f"mongodb://{credentials}{self.mongodb_host}:{self.mongodb_port}"
            f"/{self.mongodb_database}"
        )

    # What: Which ClassRepository implementation backs the service
    # Valid: "mongo" (production), "memory" (local runs and tests)
    repository_backend: str = Field(default="mongo")

    @field_validator("repository_backend")
    @classmethod
    def validate_repository_backend(cls, v: str) -> str:
        valid = {"mongo", "memory"}
        lower = v.strip().lower()
        if lower not in valid:
            raise ValueError(f"Invalid repository_backend '{v}'. Must be one of: {valid}")
        return lower

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance, imported throughout the application
settings = Settings()
