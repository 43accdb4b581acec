"""
Config file discovery and loading.

The targets are described in a YAML file holding a `defaults` fragment and
a `targets` list. This module finds that file and returns both sections as
plain Python structures, leaving their validation to the target merger.
"""

import logging
import os
from typing import Any, List, NamedTuple, Optional, Sequence

import yaml

from url_sentry.config.constants import CONFIG_FILE_NAMES, CONFIG_SEARCH_PATHS
from url_sentry.errors import ConfigFileError

# Module logger
logger = logging.getLogger(__name__)


class RawConfig(NamedTuple):
    """
    The undecoded content of a config file.

    Attributes:
        path: The file the content was read from.
        defaults: The `defaults` fragment, {} when the section is missing.
        targets: The entries of the `targets` list.
    """

    path: str
    defaults: Any
    targets: List[Any]


def find_config_file(
    config_file: str = "",
    search_paths: Sequence[str] = CONFIG_SEARCH_PATHS,
) -> Optional[str]:
    """
    Locates the config file to use.

    Args:
        config_file: An explicit path; when set, no search is performed.
        search_paths: Directories searched in order for a config.yml/config.yaml.

    Returns:
        Optional[str]: The path of the config file, or None if none exists.
    """
    if config_file:
        return config_file if os.path.isfile(config_file) else None

    for directory in search_paths:
        for file_name in CONFIG_FILE_NAMES:
            candidate = os.path.join(os.path.expanduser(directory), file_name)
            if os.path.isfile(candidate):
                return candidate
    return None


def load_config_file(path: str) -> RawConfig:
    """
    Reads and parses a YAML config file.

    Raises:
        ConfigFileError: If the file cannot be read, is not valid YAML or
            does not have the expected top-level shape.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except OSError as err:
        raise ConfigFileError(f"Error opening config: {path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigFileError(f"Invalid YAML format in config file: {path}: {err}") from err

    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise ConfigFileError(f"Config file {path} must contain a mapping at the top level")

    defaults = content.get("defaults")
    if defaults is None:
        defaults = {}

    targets = content.get("targets")
    if targets is None:
        targets = []
    if not isinstance(targets, list):
        raise ConfigFileError(f"'targets' in config file {path} must be a list")

    logger.info(f"config: file={path}")
    return RawConfig(path=path, defaults=defaults, targets=targets)


def load_config(config_file: str = "") -> RawConfig:
    """
    Finds and loads the config file.

    Raises:
        ConfigFileError: If no config file is found or it cannot be loaded.
    """
    path = find_config_file(config_file)
    if path is None:
        if config_file:
            raise ConfigFileError(f"Config file not found: {config_file}")
        raise ConfigFileError("No config file found.")
    return load_config_file(path)
