"""Runtime configuration for packlink.

Layers, lowest precedence first: built-in defaults from Constants, an
optional YAML file, environment variables, then CLI flags.
"""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import yaml

from constants import Constants
from errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class PacklinkConfig:
    """Resolved runtime settings."""

    cache_dir: str = Constants.DEFAULT_CACHE_DIR
    builder_command: List[str] = field(default_factory=lambda: list(Constants.DEFAULT_BUILDER_COMMAND))
    installer_command: List[str] = field(default_factory=lambda: list(Constants.DEFAULT_INSTALLER_COMMAND))
    quiet_period: float = Constants.DEBOUNCE_QUIET_PERIOD_SEC
    publish_watch_dir: str = Constants.DEFAULT_PUBLISH_WATCH_DIR

    def __post_init__(self):
        self.cache_dir = os.path.abspath(os.path.expanduser(self.cache_dir))


def _as_command(value: Any, key: str) -> List[str]:
    if isinstance(value, str):
        parts = shlex.split(value)
    elif isinstance(value, list) and all(isinstance(v, str) for v in value):
        parts = list(value)
    else:
        raise ConfigError(f"'{key}' must be a string or a list of strings")
    if not parts:
        raise ConfigError(f"'{key}' must not be empty")
    return parts


def load_config_file(path: Optional[str], required: bool = False) -> Dict[str, Any]:
    """Load a YAML config file.

    Args:
        path: File path; None loads nothing.
        required: Raise when the file does not exist instead of ignoring it.

    Returns:
        The ``packlink`` section if present, else the whole mapping.

    Raises:
        ConfigError: If the file cannot be read or is not a mapping.
    """
    if not path:
        return {}
    path = os.path.expanduser(path)
    if not os.path.isfile(path):
        if required:
            raise ConfigError(f"Config file not found: {path}")
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping")
    section = data.get("packlink", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'packlink' section in {path} must be a mapping")
    logger.debug("Loaded config from %s", path)
    return section


def build_config(
    config_path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    cache_dir: Optional[str] = None,
) -> PacklinkConfig:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit config file (``--config``); must exist.
        env: Environment mapping, defaults to ``os.environ``.
        cache_dir: CLI override for the cache directory.
    """
    env = os.environ if env is None else env

    explicit = config_path or env.get(Constants.ENV_CONFIG)
    if explicit:
        file_values = load_config_file(explicit, required=True)
    else:
        file_values = load_config_file(Constants.DEFAULT_CONFIG_FILE)

    values: Dict[str, Any] = {}
    if "cache_dir" in file_values:
        values["cache_dir"] = str(file_values["cache_dir"])
    if "builder" in file_values:
        values["builder_command"] = _as_command(file_values["builder"], "builder")
    if "installer" in file_values:
        values["installer_command"] = _as_command(file_values["installer"], "installer")
    if "quiet_period" in file_values:
        try:
            values["quiet_period"] = float(file_values["quiet_period"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'quiet_period' must be a number: {e}") from e
        if values["quiet_period"] < 0:
            raise ConfigError("'quiet_period' must not be negative")
    if "publish_watch_dir" in file_values:
        values["publish_watch_dir"] = str(file_values["publish_watch_dir"])

    if env.get(Constants.ENV_CACHE_DIR):
        values["cache_dir"] = env[Constants.ENV_CACHE_DIR]
    if env.get(Constants.ENV_BUILDER):
        values["builder_command"] = _as_command(env[Constants.ENV_BUILDER], Constants.ENV_BUILDER)
    if env.get(Constants.ENV_INSTALLER):
        values["installer_command"] = _as_command(env[Constants.ENV_INSTALLER], Constants.ENV_INSTALLER)

    if cache_dir:
        values["cache_dir"] = cache_dir

    return PacklinkConfig(**values)
