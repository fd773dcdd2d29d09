"""Configuration management for krishi-mitra.

Settings come from three layers, later ones winning:

1. defaults declared on the pydantic models below,
2. an optional YAML file (``config/settings.yaml`` or ``$KRISHI_MITRA_CONFIG``),
3. environment variables (a ``.env`` file is honoured).

Soil thresholds are deliberately absent: they are fixed in the classifier.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from krishi_mitra.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "KRISHI_MITRA_CONFIG"

# Environment variable -> (section, key); section None means top level
ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "KRISHI_LANGUAGE": (None, "language"),
    "KRISHI_STORE_BACKEND": ("store", "backend"),
    "KRISHI_MONGO_URI": ("store", "mongo_uri"),
    "KRISHI_MONGO_DATABASE": ("store", "mongo_database"),
    "KRISHI_SUPABASE_URL": ("store", "supabase_url"),
    "KRISHI_SUPABASE_KEY": ("store", "supabase_key"),
    "KRISHI_SPEECH_ENABLED": ("speech", "enabled"),
    "KRISHI_SPEECH_RATE": ("speech", "rate"),
}


class StoreSettings(BaseModel):
    """Record store configuration."""

    backend: Literal["memory", "mongo", "supabase"] = "memory"
    mongo_uri: str | None = None
    mongo_database: str = "krishi_mitra"
    supabase_url: str | None = None
    supabase_key: str | None = None
    timeout_s: float = Field(default=10.0, gt=0)


class SpeechSettings(BaseModel):
    """Text-to-speech configuration."""

    enabled: bool = True
    rate: float = Field(
        default=0.8, gt=0.0, le=2.0, description="Multiplier on the engine rate"
    )
    volume: float = Field(default=1.0, ge=0.0, le=1.0)


class AppSettings(BaseModel):
    """Main application settings."""

    language: str = "en"
    store: StoreSettings = StoreSettings()
    speech: SpeechSettings = SpeechSettings()


def get_config_path() -> Path:
    """Return the YAML settings path, whether or not it exists."""
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override)

    project_root = Path(__file__).resolve().parent.parent
    return project_root / "config" / "settings.yaml"


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML settings file; a missing file yields an empty mapping."""
    if not path.exists():
        logger.debug(f"No settings file at {path}, using defaults")
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")

    logger.debug(f"Loaded settings from {path}")
    # A bare "store:" line means "use the defaults"
    return {key: value for key, value in (data or {}).items() if value is not None}


def apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``KRISHI_*`` environment variables on raw settings data."""
    merged = {
        key: dict(value) if isinstance(value, dict) else value
        for key, value in data.items()
    }

    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is None:
            continue

        if section is None:
            merged[key] = value
            continue

        section_data = merged.get(section)
        if section_data is None:
            section_data = merged[section] = {}
        if not isinstance(section_data, dict):
            raise ValueError(f"Settings section '{section}' must be a mapping")
        section_data[key] = value

    return merged


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Get application settings.

    This is the single source of truth for configuration. Loading is lazy so
    that importing the package never touches the filesystem.
    """
    load_dotenv(override=False)

    data = load_yaml_config(get_config_path())
    settings = AppSettings.model_validate(apply_env_overrides(data))

    logger.debug(
        f"Settings loaded: store={settings.store.backend}, "
        f"language={settings.language}"
    )
    return settings


def clear_settings_cache() -> None:
    """Clear settings cache to force reload from current environment."""
    get_settings.cache_clear()
