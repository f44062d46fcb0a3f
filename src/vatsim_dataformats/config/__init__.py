"""Configuration module."""

from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT_ENCODING,
    ENCODING_AUTO,
    ENCODING_ISO_8859_1,
    ENCODING_UTF8,
    LOG_FORMAT,
    SUPPORTED_INPUT_ENCODINGS,
)
from .loader import load_yaml_config
from .settings import DEFAULT_CONFIG_PATH, Settings, clear_settings_cache, get_settings

__all__ = [
    # Encodings
    "ENCODING_AUTO",
    "ENCODING_UTF8",
    "ENCODING_ISO_8859_1",
    "SUPPORTED_INPUT_ENCODINGS",
    "DEFAULT_OUTPUT_ENCODING",
    # Logging
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "DEFAULT_CONFIG_PATH",
    # Config loading
    "load_yaml_config",
]
