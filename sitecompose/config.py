"""Configuration management for sitecompose.

This module provides the user settings that control how compositions run:
which theme list key to read, the config file name, extra directories to
search for themes and the default output format. Settings are read from a
TOML file and can be overridden through environment variables.
"""

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .loader import CONFIG_FILE_STEM

OUTPUT_FORMATS = ("table", "json", "yaml")
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


class Settings(BaseModel):
    """User settings for theme composition."""

    use_legacy_themes: bool = Field(default=False, description="Read themes from __experimentalThemes")
    config_file_stem: str = Field(default=CONFIG_FILE_STEM, description="Config file name without extension")
    theme_paths: List[Path] = Field(default_factory=list, description="Directories searched for themes")
    output_format: Optional[str] = Field(default=None, description="Default output format")

    @field_validator("config_file_stem")
    @classmethod
    def validate_config_file_stem(cls, v: str) -> str:
        """Validate the stem is a bare file name."""
        if not v or "/" in v or "\\" in v or v.startswith("."):
            raise ValueError("Config file stem must be a plain file name without extension")
        return v

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: Optional[str]) -> Optional[str]:
        """Validate output format."""
        if v is None:
            return v
        v = v.lower()
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"Output format must be one of: {', '.join(OUTPUT_FORMATS)}")
        return v


def _parse_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


class ConfigManager:
    """Manages sitecompose settings."""

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Initialize configuration manager.

        Args:
            config_dir: Configuration directory path. If None, uses
                SITECOMPOSE_HOME or ~/.sitecompose.
        """
        env_home = os.getenv("SITECOMPOSE_HOME")
        self.config_dir = Path(config_dir or env_home or Path.home() / ".sitecompose")
        self.config_file = self.config_dir / "config.toml"

        self._file_settings: Dict[str, Any] = {}
        self._load_config()

    def get_settings(self, apply_environment: bool = True) -> Settings:
        """Get effective settings.

        Args:
            apply_environment: Whether environment variables override the file

        Returns:
            Settings instance

        Raises:
            ConfigError: If stored or environment values are invalid
        """
        data = dict(self._file_settings)
        if apply_environment:
            data.update(self.get_environment_overrides())

        try:
            return Settings(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}")

    def get_environment_overrides(self) -> Dict[str, Any]:
        """Get settings overridden by environment variables.

        Returns:
            Mapping of setting name to value for each variable that is set
        """
        overrides: Dict[str, Any] = {}

        legacy = os.getenv("SITECOMPOSE_LEGACY_THEMES")
        if legacy:
            overrides["use_legacy_themes"] = _parse_bool(legacy, "SITECOMPOSE_LEGACY_THEMES")

        theme_path = os.getenv("SITECOMPOSE_THEME_PATH")
        if theme_path:
            overrides["theme_paths"] = [Path(p) for p in theme_path.split(os.pathsep) if p]

        output_format = os.getenv("SITECOMPOSE_OUTPUT_FORMAT")
        if output_format:
            overrides["output_format"] = output_format

        return overrides

    def set_value(self, key: str, value: str) -> Settings:
        """Set a single setting and save it.

        Args:
            key: Setting name
            value: Value as typed on the command line; theme_paths takes
                an os.pathsep-separated list

        Returns:
            The updated file settings

        Raises:
            ConfigError: If the key is unknown or the value is invalid
        """
        if key not in Settings.model_fields:
            raise ConfigError(
                f"Unknown setting '{key}'. Valid settings: {', '.join(Settings.model_fields)}"
            )

        parsed: Any = value
        if key == "use_legacy_themes":
            parsed = _parse_bool(value, key)
        elif key == "theme_paths":
            parsed = [p for p in value.split(os.pathsep) if p]

        data = dict(self._file_settings)
        data[key] = parsed
        try:
            settings = Settings(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid value for '{key}': {e}")

        self._file_settings = self._to_file_data(settings)
        self._save_config()
        return settings

    def reset(self) -> None:
        """Remove all stored settings."""
        self._file_settings = {}
        if self.config_file.exists():
            self.config_file.unlink()

    def _to_file_data(self, settings: Settings) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "use_legacy_themes": settings.use_legacy_themes,
            "config_file_stem": settings.config_file_stem,
            "theme_paths": [str(p) for p in settings.theme_paths],
        }
        if settings.output_format:
            data["output_format"] = settings.output_format
        return data

    def _load_config(self) -> None:
        """Load configuration from file."""
        if not self.config_file.exists():
            return

        try:
            with open(self.config_file, "rb") as f:
                config_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load configuration: {e}")

        self._file_settings = {
            key: value for key, value in config_data.items() if key in Settings.model_fields
        }

    def _save_config(self) -> None:
        """Save configuration to file."""
        data = self._file_settings

        # tomllib is read-only; json string escaping is valid TOML basic string syntax
        lines = [
            "# sitecompose configuration",
            f"use_legacy_themes = {'true' if data.get('use_legacy_themes') else 'false'}",
            f"config_file_stem = {json.dumps(data.get('config_file_stem', CONFIG_FILE_STEM))}",
            f"theme_paths = [{', '.join(json.dumps(p) for p in data.get('theme_paths', []))}]",
        ]
        if data.get("output_format"):
            lines.append(f"output_format = {json.dumps(data['output_format'])}")

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                f.write("\n".join(lines) + "\n")
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")
