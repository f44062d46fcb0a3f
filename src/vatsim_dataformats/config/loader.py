"""
YAML configuration file loading.
"""

import logging
from pathlib import Path
from typing import Any, Union

import yaml

logger = logging.getLogger(__name__)


def load_yaml_config(file_path: Union[str, Path]) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        file_path: Path to the configuration file

    Returns:
        Configuration dictionary; empty for an empty file

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file does not hold a mapping
        yaml.YAMLError: If the file is not valid YAML
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        logger.debug(f"Configuration file {path} is empty")
        return {}

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping, got {type(config).__name__}")

    return config
