"""Configuration management for metaextract."""

from metaextract.config.manager import ConfigManager, ConfigError
from metaextract.config.defaults import DEFAULT_CONFIG

__all__ = ["ConfigManager", "ConfigError", "DEFAULT_CONFIG"]
