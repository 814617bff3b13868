"""Configuration loader for YAML files.

This module provides configuration loading with dot-notation access and the
typed settings the navigation data context is built from.

Typical usage example:
    from xpnav.core.config import ConfigLoader, NavSettings

    config = ConfigLoader.load("config/settings.yaml")
    settings = NavSettings.from_config(config)
    ceiling = config.get("resolver.fallback_distance_nm", default=500.0)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_AIRPORT_DB = Path.home() / ".xpnav" / "airports.db"


class ConfigError(Exception):
    """Raised when configuration operations fail."""


class ConfigLoader:
    """Configuration loader for YAML files.

    Examples:
        >>> config = ConfigLoader.load("config/settings.yaml")
        >>> root = config.get("xplane.path")
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        """Initialize with configuration data.

        Args:
            data: Configuration dictionary.
        """
        self._data = data if data is not None else {}

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            ConfigLoader instance with loaded data.

        Raises:
            ConfigError: If the file is missing, unreadable or not a mapping.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            key: Configuration key such as "resolver.fallback_distance_nm".
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        value: Any = self._data

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value using dot notation, creating sections as needed."""
        keys = key.split(".")
        data = self._data

        for k in keys[:-1]:
            if not isinstance(data.get(k), dict):
                data[k] = {}
            data = data[k]

        data[keys[-1]] = value

    def get_section(self, key: str) -> dict[str, Any]:
        """Get an entire configuration section.

        Raises:
            ConfigError: If section not found or not a dict.
        """
        value = self.get(key)

        if value is None:
            raise ConfigError(f"Configuration section not found: {key}")

        if not isinstance(value, dict):
            raise ConfigError(f"Configuration key is not a section: {key}")

        return value

    def save(self, path: str | Path) -> None:
        """Save configuration to a YAML file.

        Raises:
            ConfigError: If save fails.
        """
        path = Path(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            with path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(self._data, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}") from e

        logger.info("Saved configuration to: %s", path)

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one; other's values win."""
        self._data = _merge_dicts(self._data, other._data)

    def to_dict(self) -> dict[str, Any]:
        return self._data.copy()


def _merge_dicts(base: dict, override: dict) -> dict:
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value

    return result


@dataclass
class NavSettings:
    """Typed view of the settings used by the navigation data context.

    Attributes:
        xplane_path: Simulator installation root, or None when not configured.
        airport_db_path: SQLite file backing the airport overlay store.
        fallback_distance_nm: Ceiling for nearest-candidate fix resolution.
        airway_limit: Segment cap for radius airway queries.
        airway_limit_all: Segment cap when dumping every airway.
        airspace_near_radius_nm: Default radius for airspace proximity queries.
    """

    xplane_path: Path | None = None
    airport_db_path: Path = DEFAULT_AIRPORT_DB
    fallback_distance_nm: float = 500.0
    airway_limit: int = 3000
    airway_limit_all: int = 50000
    airspace_near_radius_nm: float = 50.0

    @classmethod
    def from_config(cls, config: ConfigLoader) -> "NavSettings":
        """Build settings from a loaded configuration.

        Args:
            config: Loaded configuration.

        Returns:
            Settings with defaults for any missing key.

        Raises:
            ConfigError: If a numeric value cannot be converted.

        Examples:
            >>> settings = NavSettings.from_config(ConfigLoader.load("config/settings.yaml"))
            >>> settings.fallback_distance_nm
            500.0
        """
        xplane_path = config.get("xplane.path")
        db_path = config.get("airports.database", str(DEFAULT_AIRPORT_DB))

        try:
            return cls(
                xplane_path=Path(xplane_path).expanduser() if xplane_path else None,
                airport_db_path=Path(db_path).expanduser(),
                fallback_distance_nm=float(config.get("resolver.fallback_distance_nm", 500.0)),
                airway_limit=int(config.get("queries.airway_limit", 3000)),
                airway_limit_all=int(config.get("queries.airway_limit_all", 50000)),
                airspace_near_radius_nm=float(config.get("queries.airspace_near_radius_nm", 50.0)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid navigation setting: {e}") from e
