"""
Constants for configuration defaults and environment variable names.
"""

# =============================================================================
# Encodings
# =============================================================================

# Input encoding detection: UTF-8 if valid, ISO-8859-1 otherwise
ENCODING_AUTO = "auto"
ENCODING_UTF8 = "utf-8"
ENCODING_ISO_8859_1 = "iso-8859-1"

SUPPORTED_INPUT_ENCODINGS = (ENCODING_AUTO, ENCODING_UTF8, ENCODING_ISO_8859_1)

# Legacy files have always been published as ISO-8859-1
DEFAULT_OUTPUT_ENCODING = ENCODING_ISO_8859_1

# =============================================================================
# Logging
# =============================================================================

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# 0 keeps log line content unshortened
DEFAULT_MAX_LOG_LINE_LENGTH = 0

# =============================================================================
# Environment variables
# =============================================================================

ENV_LOG_LEVEL = "VATSIM_DATAFORMATS_LOG_LEVEL"
ENV_INPUT_ENCODING = "VATSIM_DATAFORMATS_INPUT_ENCODING"
ENV_MAX_LOG_LINE_LENGTH = "VATSIM_DATAFORMATS_MAX_LOG_LINE_LENGTH"

ENV_FILTER_REMOVE_REAL_NAME = "VATSIM_FILTER_REMOVE_REAL_NAME"
ENV_FILTER_SUBSTITUTE_OBSERVER_PREFIX = "VATSIM_FILTER_SUBSTITUTE_OBSERVER_PREFIX"
ENV_FILTER_REMARKS_REMOVE_ALL = "VATSIM_FILTER_REMARKS_REMOVE_ALL"
ENV_FILTER_REMARKS_TRIGGERS = "VATSIM_FILTER_REMARKS_TRIGGERS"
