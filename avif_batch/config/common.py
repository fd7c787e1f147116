"""
Common configuration settings used throughout the application.

This module holds the logging format, the encoder parameters and the loading
of user-specific configuration from an external YAML file, so that the location
of `avifenc` and its quality settings can be customized without touching the
source code.
"""
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

# --- User-Defined Configuration ---
# Values in 'config.user.yaml' at the project root override the defaults below.
#
# paths:
#   avifenc_dir: /opt/libavif/bin
# avifenc:
#   min: 0
#   max: 20
#   depth: 10

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

# Name of the external encoder executable.
AVIFENC_NAME = "avifenc"

# Default quantizer range and bit depth for `avifenc`.
DEFAULT_AVIFENC_MIN = 0
DEFAULT_AVIFENC_MAX = 20
DEFAULT_AVIFENC_DEPTH = 10


def load_user_config(config_path: Path = USER_CONFIG_PATH) -> Dict[str, Any]:
    """
    Reads the user configuration file and returns its contents as a dictionary.

    A missing file is not an error. A file that cannot be read or parsed is
    logged as a warning and treated as empty, so the defaults stay in effect.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        The parsed mapping, or an empty dict.
    """
    if not config_path.is_file():
        logger.debug(f"User config '{config_path}' not found. Relying on defaults and system PATH.")
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{config_path}': {e}")
        return {}
    if not isinstance(user_config, dict):
        logger.warning(f"Ignoring '{config_path}': top level is not a mapping.")
        return {}
    return user_config


def _int_setting(section: Dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value for avifenc.{key}: {value!r}. Using {default}.")
        return default


def avifenc_dir_from(user_config: Dict[str, Any]) -> Optional[Path]:
    """Returns the configured encoder directory, if any."""
    paths_config = user_config.get("paths") or {}
    avifenc_dir_str = paths_config.get("avifenc_dir")
    return Path(avifenc_dir_str) if avifenc_dir_str else None


def avifenc_options_from(user_config: Dict[str, Any]) -> list[str]:
    """Builds the fixed `avifenc` quality/depth arguments, applying user overrides."""
    section = user_config.get("avifenc") or {}
    q_min = _int_setting(section, "min", DEFAULT_AVIFENC_MIN)
    q_max = _int_setting(section, "max", DEFAULT_AVIFENC_MAX)
    depth = _int_setting(section, "depth", DEFAULT_AVIFENC_DEPTH)
    return ["--min", str(q_min), "--max", str(q_max), "--depth", str(depth)]


_user_config = load_user_config()

# The directory containing the `avifenc` executable. If None, the executable
# is looked up on the system PATH.
AVIFENC_DIR: Path | None = avifenc_dir_from(_user_config)

# Arguments placed before the two file paths on every encoder invocation.
AVIFENC_OPTIONS = avifenc_options_from(_user_config)


# --- Logging Configuration ---

# The format string for the Loguru logger.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{thread.name} - <level>{message}</level>"
)

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]


# --- Pool Settings ---

DEFAULT_WORKERS = 4
