"""Configuration manager for metaextract."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from metaextract.config.defaults import DEFAULT_CONFIG, FIELD_CHOICES, STRING_FIELDS

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""
    pass


class ConfigManager:
    """Manages configuration loading, validation, and access.

    This class handles loading configuration from YAML files, merging them
    with defaults, validating enumerated fields, and providing access to
    configuration values with dot notation.

    Attributes:
        config: Dictionary containing all configuration values
        config_path: Path to the loaded configuration file (None if defaults)

    Examples:
        >>> config = ConfigManager.load("metaextract.yaml")
        >>> print(config.get("extraction.type"))
        'all'
        >>> print(config.get("logging.file"))
        'app.log'
    """

    def __init__(self, config: Dict[str, Any], config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config: Configuration dictionary
            config_path: Path to the configuration file (optional)
        """
        self.config = config
        self.config_path = config_path

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "ConfigManager":
        """Load configuration from file, falling back to defaults.

        An explicitly given path must exist. Without one, the standard
        locations are searched and the defaults are used if none exists.

        Args:
            config_path: Path to configuration file (optional)

        Returns:
            ConfigManager instance with loaded configuration

        Raises:
            ConfigError: If configuration cannot be loaded or validated
        """
        if config_path:
            path = Path(config_path).expanduser()
            if not path.exists():
                raise ConfigError(f"Configuration file not found: {path}")
        else:
            path = cls._find_config_file()

        if path:
            logger.info(f"Loading configuration from: {path}")
            config = cls._merge_with_defaults(cls._load_yaml(path))
        else:
            logger.debug("No configuration file found, using defaults")
            config = copy.deepcopy(DEFAULT_CONFIG)

        cls._validate_fields(config)

        return cls(config, path)

    @staticmethod
    def _find_config_file() -> Optional[Path]:
        """Search for a config file in standard locations.

        Search order:
        1. ~/.metaextract/config.yaml (user home directory)
        2. ./metaextract.yaml (current directory)

        Returns:
            Path to config file if found, None otherwise
        """
        search_paths = [
            Path.home() / ".metaextract" / "config.yaml",
            Path.cwd() / "metaextract.yaml",
        ]

        for path in search_paths:
            if path.exists():
                logger.debug(f"Found config file: {path}")
                return path

        logger.debug("No config file found in standard locations")
        return None

    @staticmethod
    def _load_yaml(path: Path) -> Dict[str, Any]:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML file

        Returns:
            Configuration dictionary

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Failed to parse YAML configuration: {path}\n"
                f"Error: {e}"
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Failed to load configuration file: {path}\n"
                f"Error: {e}"
            ) from e

        if config is None:
            return {}

        if not isinstance(config, dict):
            raise ConfigError(
                f"Invalid configuration file: {path}\n"
                "Configuration must be a YAML dictionary."
            )

        return config

    @staticmethod
    def _merge_with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge loaded config with defaults to add any missing fields.

        User config values take precedence over defaults. This only adds
        missing keys from defaults, never overwrites user values.

        Args:
            config: Loaded configuration dictionary

        Returns:
            Merged configuration with defaults
        """
        def deep_merge(base: dict, updates: dict) -> dict:
            """Recursively merge two dictionaries, with updates taking precedence."""
            result = base.copy()
            for key, value in updates.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = deep_merge(result[key], value)
                else:
                    result[key] = value
            return result

        return deep_merge(copy.deepcopy(DEFAULT_CONFIG), config)

    @staticmethod
    def _validate_fields(config: Dict[str, Any]) -> None:
        """Validate enumerated and typed configuration fields.

        Raises:
            ConfigError: If any field holds an invalid value
        """
        errors = []

        for field_path, choices in FIELD_CHOICES.items():
            value = ConfigManager._get_nested_value(config, field_path)
            if value is None:
                continue
            if not isinstance(value, str) or value not in choices:
                errors.append(
                    f"  - {field_path}: {value!r} (expected one of: {', '.join(choices)})"
                )

        for field_path in STRING_FIELDS:
            value = ConfigManager._get_nested_value(config, field_path)
            if value is not None and not isinstance(value, str):
                errors.append(f"  - {field_path}: {value!r} (expected a string)")

        indent = ConfigManager._get_nested_value(config, "output.indent")
        if indent is not None and (isinstance(indent, bool) or not isinstance(indent, int) or indent < 0):
            errors.append(f"  - output.indent: {indent!r} (expected a non-negative integer)")

        if errors:
            raise ConfigError(
                "Invalid configuration values:\n" + "\n".join(errors)
            )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "extraction.type")
            default: Default value to return if key not found

        Returns:
            Configuration value or default

        Examples:
            >>> config.get("extraction.exif_engine")
            'pillow'
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        value = self._get_nested_value(self.config, key)
        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Examples:
            >>> config.set("extraction.type", "json")
        """
        self._set_nested_value(self.config, key, value)

    def validate(self) -> None:
        """Validate the current configuration values.

        Raises:
            ConfigError: If any field holds an invalid value
        """
        self._validate_fields(self.config)

    @staticmethod
    def _get_nested_value(config: Dict[str, Any], key: str) -> Any:
        """Get value from nested dictionary using dot notation.

        Returns:
            Value at key path, or None if not found
        """
        keys = key.split(".")
        value = config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None

        return value

    @staticmethod
    def _set_nested_value(config: Dict[str, Any], key: str, value: Any) -> None:
        """Set value in nested dictionary using dot notation."""
        keys = key.split(".")
        current = config

        for k in keys[:-1]:
            if k not in current or not isinstance(current[k], dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value
