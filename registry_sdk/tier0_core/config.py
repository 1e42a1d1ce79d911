"""
registry_sdk.tier0_core.config
────────────────────────────────
Typed configuration with env layering. Reads from .env → environment
variables. All fields are typed via Pydantic.

Minimal stack: pydantic-settings + python-dotenv

The registry URL is optional: an absent URL surfaces as
``unconfigured_registry_url`` at call time, not at startup.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RegistryConfig(BaseSettings):
    """
    Typed registry client configuration.
    Registry settings are prefixed with REGISTRY_.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ───────────────────────────────────────────────────────────
    app_name: str = Field(default="registry-sdk", alias="APP_NAME")
    environment: str = Field(default="development", alias="APP_ENV")

    # ── Registry ──────────────────────────────────────────────────────────────
    registry_url: str | None = Field(default=None, alias="REGISTRY_URL")
    registry_auth_user: str | None = Field(default=None, alias="REGISTRY_AUTH_USER")
    registry_auth_password: SecretStr | None = Field(
        default=None, alias="REGISTRY_AUTH_PASSWORD"
    )
    registry_user_agent: str | None = Field(default=None, alias="REGISTRY_USER_AGENT")
    registry_timeout: float = Field(default=30.0, alias="REGISTRY_TIMEOUT")
    registry_transport: str = Field(default="httpx", alias="REGISTRY_TRANSPORT")

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="REGISTRY_LOG_LEVEL")
    log_format: str = Field(default="json", alias="REGISTRY_LOG_FORMAT")

    # ── Error reporting ───────────────────────────────────────────────────────
    error_backend: str = Field(default="none", alias="REGISTRY_ERROR_BACKEND")

    @field_validator("environment")
    @classmethod
    def validate_env(cls, v: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if v.lower() not in allowed:
            raise ValueError(f"environment must be one of {allowed}, got {v!r}")
        return v.lower()

    @field_validator("registry_transport")
    @classmethod
    def validate_transport(cls, v: str) -> str:
        allowed = {"httpx", "memory"}
        if v.lower() not in allowed:
            raise ValueError(f"registry_transport must be one of {allowed}, got {v!r}")
        return v.lower()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"json", "console"}
        if v.lower() not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got {v!r}")
        return v.lower()

    @field_validator("error_backend")
    @classmethod
    def validate_error_backend(cls, v: str) -> str:
        allowed = {"none", "sentry", "otel"}
        if v.lower() not in allowed:
            raise ValueError(f"error_backend must be one of {allowed}, got {v!r}")
        return v.lower()

    @field_validator("registry_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"registry_timeout must be positive, got {v!r}")
        return v

    @property
    def registry_auth(self) -> tuple[str, str] | None:
        """Basic auth credentials, when both user and password are set."""
        if self.registry_auth_user and self.registry_auth_password:
            return (
                self.registry_auth_user,
                self.registry_auth_password.get_secret_value(),
            )
        return None


@lru_cache(maxsize=1)
def get_config() -> RegistryConfig:
    """
    Return the singleton registry config. Cached after first call.
    Call _reset_config() in tests to pick up new env vars.
    """
    return RegistryConfig()


def _reset_config() -> None:
    """For tests: clear the config cache."""
    get_config.cache_clear()


__all__ = ["RegistryConfig", "get_config"]
