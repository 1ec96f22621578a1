"""
Shared utilities for the jdkkit CLI.

Provides input lookup, configuration file loading and logging setup.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from jdkkit.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "jdkkit.yaml"


# ============================================================================
# CI Inputs
# ============================================================================


def get_input(
    name: str,
    required: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Get the value of a CI input variable.

    Inputs are read from ``INPUT_<NAME>`` variables. The name is uppercased
    with spaces replaced by '_'; the variant with the first '-' replaced by
    '_' is tried before the literal name. The value is trimmed.

    Args:
        name: Input name, e.g. 'java-version'
        required: Raise if the input is missing or empty
        environ: Environment mapping (default: os.environ)

    Returns:
        Trimmed input value, or '' if not set

    Raises:
        ConfigurationError: If required and not supplied

    Example:
        >>> get_input("java-version", environ={"INPUT_JAVA_VERSION": " 11 "})
        '11'
    """
    environ = os.environ if environ is None else environ
    spaced = name.replace(" ", "_")

    val = environ.get(f"INPUT_{spaced.replace('-', '_', 1).upper()}", "")
    if not val:
        val = environ.get(f"INPUT_{spaced.upper()}", "")

    if required and not val:
        raise ConfigurationError(f"Input required and not supplied: {name}")

    return val.strip()


# ============================================================================
# Configuration Management
# ============================================================================


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required but missing, is not valid
            YAML, or is not a mapping

    Example:
        >>> config = load_yaml_config(Path("jdkkit.yaml"))
        >>> config.get("download", {}).get("retries", 10)
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Configuration in {config_file} must be a mapping, "
            f"got {type(config).__name__}"
        )

    return config


def get_config_section(config: Dict[str, Any], section: str) -> Dict[str, Any]:
    """
    Get a mapping section from a configuration dictionary.

    Raises:
        ConfigurationError: If the section exists but is not a mapping
    """
    value = config.get(section) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"Config section '{section}' must be a mapping")
    return value


def config_int(section: Dict[str, Any], key: str, default: int) -> int:
    """Read a non-negative integer from a config section."""
    value = section.get(key, default)
    if isinstance(value, bool):
        raise ConfigurationError(f"Config value '{key}' must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Config value '{key}' must be an integer, got {value!r}"
        ) from e
    if number < 0:
        raise ConfigurationError(f"Config value '{key}' must be >= 0, got {number}")
    return number


def config_bool(section: Dict[str, Any], key: str, default: bool) -> bool:
    """Read a boolean from a config section; YAML strings like "false" are rejected."""
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(
            f"Config value '{key}' must be true or false, got {value!r}"
        )
    return value


# ============================================================================
# Logging
# ============================================================================


class ActionsLogFormatter(logging.Formatter):
    """
    Render log records as GitHub Actions workflow commands.

    DEBUG, WARNING and ERROR records become ``::debug::``, ``::warning::`` and
    ``::error::`` commands; INFO records are printed as plain text.
    """

    COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self.COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Workflow commands are single-line; escape as the runner expects
        escaped = (
            message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        )
        return f"::{command}::{escaped}"


def is_github_actions(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check whether we run inside a GitHub Actions job."""
    environ = os.environ if environ is None else environ
    return environ.get("GITHUB_ACTIONS", "").lower() == "true"
