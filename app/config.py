"""Server configuration.

Defaults are the production values (all interfaces, port 8080). HOST, PORT
and LOG_LEVEL may override them; nothing else is read from the environment.
"""
from __future__ import annotations

import os

import fastapi
from pydantic import BaseModel, Field, ValidationError, field_validator

__all__ = [
    "DEFAULT_BIND_ADDRESS",
    "DEFAULT_PORT",
    "ConfigError",
    "ServerConfig",
]

# All interfaces, never loopback-only.
DEFAULT_BIND_ADDRESS = "0.0.0.0"
DEFAULT_PORT = 8080

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""

    code: str = "invalid_config"


class ServerConfig(BaseModel):
    """Bind target plus the version string injected into the index handler."""

    bind_address: str = DEFAULT_BIND_ADDRESS
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    version: str = Field(default_factory=lambda: fastapi.__version__, min_length=1)
    log_level: str = "INFO"

    @field_validator("bind_address")
    @classmethod
    def _non_empty_address(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("bind_address must be non-empty")
        return v

    @field_validator("version")
    @classmethod
    def _single_token_version(cls, v: str) -> str:
        if not v or any(ch.isspace() for ch in v):
            raise ValueError("version must be non-empty and contain no whitespace")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.strip().upper() or "INFO"
        if v not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return v

    @classmethod
    def from_env(cls, **overrides) -> "ServerConfig":
        """Build a config from HOST/PORT/LOG_LEVEL, then explicit overrides."""
        values: dict = {}
        if host := os.getenv("HOST"):
            values["bind_address"] = host
        if port := os.getenv("PORT"):
            values["port"] = port
        if level := os.getenv("LOG_LEVEL"):
            values["log_level"] = level
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.build(**values)

    @classmethod
    def build(cls, **values) -> "ServerConfig":
        """Validate values, reporting failures as ConfigError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    @property
    def address(self) -> str:
        return f"{self.bind_address}:{self.port}"
