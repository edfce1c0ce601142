"""Configuration loading system.

Main Entry Point
----------------
load_config : Load a YAML configuration file, with includes and overrides
"""

from .errors import (
    ConfigCycleError,
    ConfigError,
    ConfigIncludeError,
    ConfigPathError,
    ConfigTypeError,
)
from .loader import load_config, resolve_config_path
from .operations import parse_value, set_nested_value

__all__ = [
    "load_config",
    "resolve_config_path",
    "parse_value",
    "set_nested_value",
    "ConfigError",
    "ConfigIncludeError",
    "ConfigCycleError",
    "ConfigPathError",
    "ConfigTypeError",
]
