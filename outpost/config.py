"""Runtime configuration for Outpost.

Settings come from three layers, later ones winning:
1. Model defaults
2. An optional YAML file
3. OUTPOST_* environment variables (a .env file is loaded by the CLI)

Nested fields use a double underscore in the environment, e.g.
OUTPOST_CACHE__TTL_SITES=30 or OUTPOST_GRID__MARGIN=2.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    SettingsError,
)

from .errors import ConfigError

# Sections of the config file that must be mappings when present
_SECTIONS = ("cache", "grid")


class CacheSettings(BaseModel):
    """Time-to-live per observation kind, in world ticks."""

    model_config = ConfigDict(frozen=True)

    ttl_structures: int = Field(default=50, ge=1)
    ttl_sites: int = Field(default=20, ge=1)
    ttl_occupancy: int = Field(default=100, ge=1)


class GridSettings(BaseModel):
    """Region grid dimensions."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=50, ge=3)
    height: int = Field(default=50, ge=3)
    margin: int = Field(default=1, ge=0)  # Unbuildable border width


class OutpostConfig(BaseSettings):
    """Top-level configuration.

    Keyword arguments are treated as the config file layer, so the
    environment still overrides them.
    """

    model_config = SettingsConfigDict(
        env_prefix="OUTPOST_",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    cache: CacheSettings = Field(default_factory=CacheSettings)
    grid: GridSettings = Field(default_factory=GridSettings)
    data_dir: Path = Path("data")
    log_level: str = "DEBUG"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # First source wins
        return env_settings, init_settings


def load_config(path: Path | str | None = None) -> OutpostConfig:
    """Load configuration from an optional YAML file plus environment.

    Args:
        path: YAML file to read. None means defaults and environment only.

    Returns:
        Validated configuration

    Raises:
        ConfigError: File missing, not YAML, or fails validation
    """
    config_path = Path(path) if path is not None else None
    data: dict = {}
    if config_path is not None:
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}", config_path) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}", config_path) from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError("Config file must contain a mapping", config_path)
        data = loaded or {}

    for section in _SECTIONS:
        value = data.get(section, {})
        if value is None:
            # An empty section means defaults
            del data[section]
        elif not isinstance(value, dict):
            raise ConfigError(f"Config section '{section}' must be a mapping", config_path)

    try:
        return OutpostConfig(**data)
    except (ValidationError, SettingsError) as e:
        raise ConfigError(f"Invalid configuration: {e}", config_path) from e
