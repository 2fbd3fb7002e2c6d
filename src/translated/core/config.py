"""Configuration loader for translated."""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class LocaleConfig(BaseModel):
    """Process-wide locale defaults."""

    language: str = Field(default="en-US", description="Current locale of the application")
    source_language: str = Field(
        default="en-US", description="Locale the original content is written in"
    )

    @field_validator("language", "source_language")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Locale cannot be empty")
        return v.strip()


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = Field(default="sqlite:///data/translated.db")
    echo: bool = Field(default=False)


class TranslateConfig(BaseModel):
    """Defaults applied to every translated entity type."""

    language_attribute: str = Field(default="lang_id")
    strict: bool = Field(
        default=True, description="Fail on duplicate language rows instead of last-wins"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: str = Field(default="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s")
    file: str | None = Field(default=None)


class Settings(BaseModel):
    """Complete library settings."""

    locale: LocaleConfig = Field(default_factory=LocaleConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    translate: TranslateConfig = Field(default_factory=TranslateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def find_config_file() -> Path | None:
    """Find settings.yaml: TRANSLATED_CONFIG env, project root, or cwd."""
    env_path = os.environ.get("TRANSLATED_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    current = Path(__file__).resolve()
    for parent in current.parents:
        config_path = parent / "config" / "settings.yaml"
        if config_path.exists():
            return config_path
        if (parent / "pyproject.toml").exists():
            break

    cwd_config = Path("config/settings.yaml")
    if cwd_config.exists():
        return cwd_config

    return None


def get_config_file_path() -> Path:
    """Get the project config path (for saving)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").exists():
            return parent / "config" / "settings.yaml"
    return Path("config/settings.yaml")


def load_settings_from_file(path: Path) -> dict[str, Any]:
    """Load settings dict from a YAML file."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def save_settings_to_file(settings: Settings, path: Path | None = None) -> None:
    """Save settings to YAML file."""
    if path is None:
        path = get_config_file_path()

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(
            settings.model_dump(),
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get library settings (cached)."""
    config_path = find_config_file()

    if config_path:
        try:
            data = load_settings_from_file(config_path)
            return Settings.model_validate(data)
        except Exception as e:
            logger.warning("Failed to load config from %s: %s. Using default settings", config_path, e)

    return Settings()


def reset_settings() -> None:
    """Clear cached settings."""
    get_settings.cache_clear()


def reload_settings() -> Settings:
    """Force reload settings from file."""
    reset_settings()
    return get_settings()
