"""Configuration loading, schema, and defaults."""

from scanview.config.loader import ConfigError, load_config
from scanview.config.schema import ScanViewConfig

__all__ = [
    "ConfigError",
    "ScanViewConfig",
    "load_config",
]
