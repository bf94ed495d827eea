"""Utility functions for loading the settings file and running external commands."""

import logging
import os
import subprocess
from typing import List, Optional

import yaml

from pw_rate_switcher.constants import (
    DEFAULT_TIMEOUT,
    SETTINGS_DIRNAME,
    SETTINGS_FILENAME,
)
from pw_rate_switcher.data_types import CommandResult, RestartPlan, Settings
from pw_rate_switcher.exceptions import (
    ConfigFileNotFoundError,
    ConfigurationError,
    SwitcherError,
    YAMLParsingError,
)

logger = logging.getLogger(__name__)

SETTINGS_KEYS = (
    "sway_config",
    "samplerate_conf",
    "mode",
    "notify",
    "timeout",
    "markers",
    "restart",
)
MARKER_KEYS = ("start", "end")
RESTART_KEYS = ("primary", "fallback")

# Shell conventions for "command not found" and "timed out"
RC_NOT_FOUND = 127
RC_TIMEOUT = 124


def expand_path(path: str) -> str:
    """Expands ``~`` and environment variables in a path."""
    return os.path.expanduser(os.path.expandvars(str(path)))


def default_settings_path() -> str:
    """Location of the settings file under the XDG config directory."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(
        os.path.expanduser("~"), ".config"
    )
    return os.path.join(config_home, SETTINGS_DIRNAME, SETTINGS_FILENAME)


def _reject_unknown_keys(section: dict, allowed: tuple, where: str) -> None:
    unknown = sorted(str(key) for key in set(section) - set(allowed))
    if unknown:
        raise ConfigurationError(f"Unknown {where} keys: {unknown}")


def settings_from_dict(config: dict) -> Settings:
    """Validates a parsed settings mapping and builds a Settings object.

    Raises:
        ConfigurationError: If a key is unknown or a value is invalid.
    """
    _reject_unknown_keys(config, SETTINGS_KEYS, "settings")

    kwargs = {}
    for key in ("sway_config", "samplerate_conf"):
        if key in config:
            if not isinstance(config[key], str):
                raise ConfigurationError(f"'{key}' must be a path string.")
            kwargs[key] = config[key]
    for key in ("mode", "timeout"):
        if key in config:
            kwargs[key] = config[key]
    if "notify" in config:
        if not isinstance(config["notify"], bool):
            raise ConfigurationError("'notify' must be true or false.")
        kwargs["notify"] = config["notify"]

    markers = config.get("markers", {})
    if not isinstance(markers, dict):
        raise ConfigurationError("'markers' section must be a dictionary.")
    _reject_unknown_keys(markers, MARKER_KEYS, "markers")
    if "start" in markers:
        kwargs["start_marker"] = markers["start"]
    if "end" in markers:
        kwargs["end_marker"] = markers["end"]

    try:
        if "restart" in config:
            restart = config["restart"]
            if not isinstance(restart, dict):
                raise ConfigurationError("'restart' section must be a dictionary.")
            _reject_unknown_keys(restart, RESTART_KEYS, "restart")
            kwargs["restart_plan"] = RestartPlan.from_dict(restart)
        return Settings(**kwargs)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def load_yaml_config(path: Optional[str] = None) -> Settings:
    """Loads and validates the YAML settings file.

    Args:
        path: Explicit settings file. When None, the default location is used
            and a missing file simply yields the default settings.

    Returns:
        The validated Settings.

    Raises:
        ConfigFileNotFoundError: If an explicitly requested file is not found.
        YAMLParsingError: If YAML parsing fails.
        ConfigurationError: If the settings are invalid.
    """
    explicit = path is not None
    path = expand_path(path) if explicit else default_settings_path()

    try:
        with open(path, "r", encoding="utf-8") as file:
            config = yaml.safe_load(file)
    except FileNotFoundError as e:
        if explicit:
            raise ConfigFileNotFoundError(f"Settings file '{path}' not found.") from e
        logger.debug("No settings file at %s, using defaults", path)
        return Settings()
    except yaml.YAMLError as e:
        raise YAMLParsingError(f"Error parsing YAML file '{path}': {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise SwitcherError(f"Could not read settings file '{path}': {e}") from e

    # An empty file means "all defaults"
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigurationError("YAML configuration root must be a dictionary.")

    settings = settings_from_dict(config)
    logger.debug("Settings loaded from %s: %s", path, settings)
    return settings


def read_text_file(path: str) -> str:
    """Reads a UTF-8 text file.

    Raises:
        ConfigFileNotFoundError: If the file cannot be read.
    """
    try:
        with open(path, "r", encoding="utf-8") as file:
            return file.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileNotFoundError(f"Failed to read {path}: {e}") from e


def run_command(args: List[str], timeout: float = DEFAULT_TIMEOUT) -> CommandResult:
    """Runs a command to completion and captures its output.

    A missing executable or a timeout is reported through the return code
    rather than raised.
    """
    logger.debug("Running: %s", " ".join(args))
    try:
        completed = subprocess.run(
            args,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.debug("Command timed out after %ss: %s", timeout, args[0])
        return CommandResult(returncode=RC_TIMEOUT, stderr="timed out")
    except OSError as e:
        logger.debug("Could not run %s: %s", args[0], e)
        return CommandResult(returncode=RC_NOT_FOUND, stderr=str(e))

    result = CommandResult(
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    if not result.ok:
        logger.debug(
            "%s exited with %d: %s", args[0], result.returncode, result.stderr.strip()
        )
    return result
