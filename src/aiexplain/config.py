"""
Configuration for aiexplain.

Settings come from a .env file in the working directory (see
``aiexplain env``), with ``AIEXPLAIN_<KEY>`` environment variables taking
precedence over file values.

The loaded Config is an explicit, immutable value: callers pass it to the
components that need it instead of reading process-wide state.

Usage:
    from aiexplain.config import load_config

    config = load_config(".env")
    with open_connection(config) as conn:
        ...
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field

from aiexplain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "AIEXPLAIN_"
DEFAULT_ENV_FILE = ".env"


class Provider(str, Enum):
    """Chat completion providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class Config(BaseModel):
    """
    Run configuration.

    Field names are Pythonic; the .env keys they are read from are listed
    in ENV_KEYS.
    """

    model_config = ConfigDict(frozen=True)

    # MySQL
    mysql_host: str = Field(default="127.0.0.1", description="MySQL host")
    mysql_port: int = Field(default=3306, description="MySQL port")
    mysql_user: str = Field(default="root", description="MySQL user")
    mysql_password: str = Field(default="", description="MySQL password")
    mysql_database: str = Field(default="", description="Default schema")
    connect_timeout: int = Field(
        default=10,
        description="Seconds to wait for the MySQL handshake",
    )

    # LLM
    ai_api_key: str = Field(default="", description="API key; empty skips analysis")
    ai_base_url: str = Field(default="", description="Alternate endpoint base URL")
    ai_model: str = Field(default="gpt-4o-mini", description="Model identifier")
    ai_provider: Provider = Field(default=Provider.OPENAI, description="API flavour")
    ai_max_tokens: int = Field(
        default=4096,
        description="Completion token limit (required by Anthropic)",
    )

    def redacted(self) -> dict[str, Any]:
        """Dump with secrets masked, for debug logging."""
        data = self.model_dump(mode="json")
        for key in ("mysql_password", "ai_api_key"):
            if data[key]:
                data[key] = "***"
        return data


# .env key -> Config field
ENV_KEYS: dict[str, str] = {
    "host": "mysql_host",
    "port": "mysql_port",
    "username": "mysql_user",
    "password": "mysql_password",
    "database": "mysql_database",
    "connect_timeout": "connect_timeout",
    "ai_api_key": "ai_api_key",
    "ai_base_url": "ai_base_url",
    "ai_model": "ai_model",
    "ai_provider": "ai_provider",
    "ai_max_tokens": "ai_max_tokens",
}

_INT_FIELDS = {"mysql_port", "connect_timeout", "ai_max_tokens"}


def _parse_env_int(key: str, value: str) -> int:
    """Parse integer setting, rejecting garbage."""
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"Setting '{key}' must be an integer, got {value!r}",
            config_key=key,
        ) from None


def _parse_provider(value: str) -> Provider:
    try:
        return Provider(value.strip().lower())
    except ValueError:
        choices = ", ".join(p.value for p in Provider)
        raise ConfigurationError(
            f"Setting 'ai_provider' must be one of: {choices}; got {value!r}",
            config_key="ai_provider",
        ) from None


def config_from_mapping(values: dict[str, str | None]) -> Config:
    """
    Build a Config from raw .env-style key/value pairs.

    Unknown keys are ignored; empty or missing values fall back to the
    field defaults, except credentials which are kept as given.
    """
    kwargs: dict[str, Any] = {}

    for env_key, field_name in ENV_KEYS.items():
        raw = values.get(env_key)
        if raw is None:
            continue
        raw = raw.strip()

        if field_name in _INT_FIELDS:
            if raw:
                kwargs[field_name] = _parse_env_int(env_key, raw)
        elif field_name == "ai_provider":
            if raw:
                kwargs[field_name] = _parse_provider(raw)
        elif field_name in ("ai_model", "mysql_host", "mysql_user") and not raw:
            continue
        else:
            kwargs[field_name] = raw

    return Config(**kwargs)


def load_config(env_file: str | Path = DEFAULT_ENV_FILE) -> Config:
    """
    Load configuration from a .env file.

    Environment variables named AIEXPLAIN_<KEY> (e.g. AIEXPLAIN_AI_API_KEY)
    override values from the file.

    Raises:
        ConfigurationError: If the file does not exist or a value is invalid.
    """
    path = Path(env_file)
    if not path.is_file():
        raise ConfigurationError(
            f"No {path.name} file found at {path}; run 'aiexplain env' to create one"
        )

    try:
        values = dict(dotenv_values(path))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to read {path}: {e}") from e

    for env_key in ENV_KEYS:
        override = os.environ.get(f"{ENV_PREFIX}{env_key.upper()}")
        if override is not None:
            values[env_key] = override

    config = config_from_mapping(values)
    logger.debug("Loaded config from %s: %s", path, config.redacted())
    return config
