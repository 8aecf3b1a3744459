"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".weightdash"


@dataclass
class DataConfig:
    """Default input files for the CLI."""

    entries_path: Optional[Path] = None  # JSON list or CSV export
    target_path: Optional[Path] = None  # JSON goal object


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table" or "json"
    trend_days: int = 30  # rows shown by tabular commands


@dataclass
class Settings:
    """Main application settings."""

    data: DataConfig = field(default_factory=DataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.weightdash/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse data files
        if data.get("data"):
            file_data = data["data"]
            if file_data.get("entries_path"):
                settings.data.entries_path = Path(file_data["entries_path"]).expanduser()
            if file_data.get("target_path"):
                settings.data.target_path = Path(file_data["target_path"]).expanduser()

        # Parse logging config
        if data.get("logging"):
            log_data = data["logging"]
            if "level" in log_data:
                settings.logging.level = str(log_data["level"]).upper()

        # Parse defaults
        if data.get("defaults"):
            def_data = data["defaults"]
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]
            if "trend_days" in def_data:
                settings.defaults.trend_days = int(def_data["trend_days"])

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.weightdash/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "data": {
                "entries_path": str(self.data.entries_path) if self.data.entries_path else None,
                "target_path": str(self.data.target_path) if self.data.target_path else None,
            },
            "logging": {
                "level": self.logging.level,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
                "trend_days": self.defaults.trend_days,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
