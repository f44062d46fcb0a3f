"""
Application settings and configuration management.

Supports loading from:
1. YAML files (vatsim-dataformats.yaml)
2. Environment variables (fallback)
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml

from ..privacyfilter.configuration import DataFileFilterConfiguration
from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_LOG_LINE_LENGTH,
    DEFAULT_OUTPUT_ENCODING,
    ENCODING_AUTO,
    ENV_FILTER_REMARKS_REMOVE_ALL,
    ENV_FILTER_REMARKS_TRIGGERS,
    ENV_FILTER_REMOVE_REAL_NAME,
    ENV_FILTER_SUBSTITUTE_OBSERVER_PREFIX,
    ENV_INPUT_ENCODING,
    ENV_LOG_LEVEL,
    ENV_MAX_LOG_LINE_LENGTH,
    LOG_LEVELS,
    SUPPORTED_INPUT_ENCODINGS,
)
from .loader import load_yaml_config

logger = logging.getLogger(__name__)


def _safe_int(key: str, default: int) -> int:
    """Safely parse int from env var, using default on error."""
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


def _safe_bool(key: str, default: bool) -> bool:
    """Safely parse bool from env var."""
    return os.environ.get(key, str(default).lower()).lower() == "true"


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# =============================================================================
# Main Settings
# =============================================================================


@dataclass
class Settings:
    """Settings for parsing, writing and filtering snapshot files."""

    log_level: str = DEFAULT_LOG_LEVEL
    input_encoding: str = ENCODING_AUTO
    output_encoding: str = DEFAULT_OUTPUT_ENCODING
    max_log_line_length: int = DEFAULT_MAX_LOG_LINE_LENGTH

    privacy_filter: DataFileFilterConfiguration = field(
        default_factory=DataFileFilterConfiguration
    )

    def validate(self) -> list[str]:
        """Validate settings values. Returns list of errors."""
        errors = []

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level}")

        if self.input_encoding.lower() not in SUPPORTED_INPUT_ENCODINGS:
            errors.append(
                f"input_encoding must be one of {', '.join(SUPPORTED_INPUT_ENCODINGS)}, "
                f"got {self.input_encoding}"
            )

        if self.max_log_line_length < 0:
            errors.append(f"max_log_line_length must be >= 0, got {self.max_log_line_length}")

        # Validate nested settings
        errors.extend(self.privacy_filter.validate())

        return errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "logging": {"level": self.log_level},
            "encoding": {"input": self.input_encoding, "output": self.output_encoding},
            "max_log_line_length": self.max_log_line_length,
            "privacy_filter": self.privacy_filter.to_dict(),
        }

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "Settings":
        """Create Settings from configuration dictionary (e.g., from YAML)."""
        logging_config = config.get("logging", {})
        encoding = config.get("encoding", {})
        privacy_filter = config.get("privacy_filter", {})

        return cls(
            log_level=logging_config.get("level", DEFAULT_LOG_LEVEL),
            input_encoding=encoding.get("input", ENCODING_AUTO),
            output_encoding=encoding.get("output", DEFAULT_OUTPUT_ENCODING),
            max_log_line_length=int(config.get("max_log_line_length", DEFAULT_MAX_LOG_LINE_LENGTH)),
            privacy_filter=DataFileFilterConfiguration.from_dict(privacy_filter),
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        return cls(
            log_level=os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
            input_encoding=os.environ.get(ENV_INPUT_ENCODING, ENCODING_AUTO),
            max_log_line_length=_safe_int(ENV_MAX_LOG_LINE_LENGTH, DEFAULT_MAX_LOG_LINE_LENGTH),
            privacy_filter=DataFileFilterConfiguration(
                remove_real_name_and_homebase=_safe_bool(ENV_FILTER_REMOVE_REAL_NAME, False),
                substitute_observer_prefix=_safe_bool(ENV_FILTER_SUBSTITUTE_OBSERVER_PREFIX, False),
                flight_plan_remarks_remove_all=_safe_bool(ENV_FILTER_REMARKS_REMOVE_ALL, False),
                flight_plan_remarks_remove_all_if_containing=_split_list(
                    os.environ.get(ENV_FILTER_REMARKS_TRIGGERS, "")
                ),
            ),
        )


# Default config file path
DEFAULT_CONFIG_PATH = Path("vatsim-dataformats.yaml")


@lru_cache
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get cached settings instance.

    Loads from the YAML config file if available, otherwise from env vars.

    Args:
        config_path: Optional path to a YAML config file

    Returns:
        Settings instance
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if path.exists():
        try:
            return Settings.from_dict(load_yaml_config(path))
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {path}: {e}; falling back to environment variables")

    return Settings.from_env()


def clear_settings_cache() -> None:
    """Clear the cached settings (useful for testing)."""
    get_settings.cache_clear()
