"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


class Verbs(Enum):
    """Verbs exposed on the command line.

    Args:
        Enum (string): Verbs exposed on the command line.
    """

    PUBLISH = "publish"
    ADD = "add"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROG = "packlink"
    SUPPORTED_VERBS = [Verbs.PUBLISH.value, Verbs.ADD.value]
    PACKAGE_JSON_FILE = "package.json"
    ARTIFACT_SUFFIX = ".tgz"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    DEFAULT_CACHE_DIR = os.path.join("~", ".config", "packlink")
    DEFAULT_CONFIG_FILE = os.path.join("~", ".config", "packlink.yml")
    DEFAULT_BUILDER_COMMAND = ["pnpm", "pack", "--pack-destination"]
    DEFAULT_INSTALLER_COMMAND = ["pnpm", "add"]
    DEFAULT_PUBLISH_WATCH_DIR = "dist"
    DEBOUNCE_QUIET_PERIOD_SEC = 0.2

    ENV_LOG_LEVEL = "PACKLINK_LOG_LEVEL"
    ENV_CONFIG = "PACKLINK_CONFIG"
    ENV_CACHE_DIR = "PACKLINK_CACHE_DIR"
    ENV_BUILDER = "PACKLINK_BUILDER"
    ENV_INSTALLER = "PACKLINK_INSTALLER"
