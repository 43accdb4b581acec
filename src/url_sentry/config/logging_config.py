"""
Logging configuration module for the URL monitoring service.

This module configures logging from the process settings. It supports
built-in development and production configurations as well as a custom
configuration file, and sends the output either to stdout or to a log file.
"""

import json
import logging.config
import os
from typing import Any, Dict

from url_sentry.config import MonitoringContext
from url_sentry.config.constants import DEFAULT_LOG_FILE_NAME

# Format used for the log file when logs are not printed to stdout
FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(instance_id)s] %(name)s: %(message)s"


# Configuration files shipped with the package, by logging type
PACKAGED_CONFIGS = {
    "dev": "logging-config-dev.json",
    "prod": "logging-config-prod.json",
}


def _resolve_config_file(context: MonitoringContext) -> str:
    logging_type = context.logging_type.lower()
    if not logging_type:
        raise ValueError("Logging type must be provided.")
    if logging_type in PACKAGED_CONFIGS:
        return _get_local_package_file_path(PACKAGED_CONFIGS[logging_type])
    if logging_type != "custom":
        raise ValueError(
            f"Invalid logging type: {context.logging_type}. Allowed values are: dev, prod, custom"
        )
    if not context.logging_config_file:
        raise ValueError("Custom logging configuration file must be provided.")
    return context.logging_config_file


def configure_logging(context: MonitoringContext) -> None:
    """
    Sets up logging for the service.

    The dictConfig file is chosen by the context's logging type: the
    packaged dev or prod configuration, or the context's own file for
    'custom'. Unless the context is verbose, the configured handlers are
    then replaced by a single file handler on the context's log file.
    Every remaining handler gets a filter that adds the instance ID to the
    log records.

    Args:
        context: Configuration context containing logging settings.

    Raises:
        ValueError: If the logging type is missing or unknown, or if the
            'custom' type comes without a configuration file.
        RuntimeError: If a configuration file or the log file cannot be opened.
    """
    _load_logging_config(_resolve_config_file(context))

    root_logger = logging.getLogger()
    if not context.verbose:
        _redirect_to_file(root_logger, get_log_file_path(context.log_file))

    instance_filter = _InstanceIdFilter(instance_id=context.instance_id)
    for handler in root_logger.handlers:
        handler.addFilter(instance_filter)

    if context.debug:
        root_logger.setLevel(logging.DEBUG)

    logging.debug("Logging configured and InstanceIdFilter added.")


def get_log_file_path(log_file: str) -> str:
    """
    Resolves the log file path, appending the default file name to a directory.
    """
    if os.path.isdir(log_file):
        return os.path.join(log_file, DEFAULT_LOG_FILE_NAME)
    return log_file


def _redirect_to_file(root_logger: logging.Logger, log_file: str) -> None:
    """
    Replaces every handler of the root logger with a file handler.

    Raises:
        RuntimeError: If the log file cannot be opened.
    """
    try:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as err:
        raise RuntimeError(f"error opening log file={log_file}: {err}") from err
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.addHandler(file_handler)


def _load_logging_config(config_file: str) -> None:
    """
    Applies a dictConfig stored as JSON.

    Raises:
        RuntimeError: If the file is missing, is not JSON or is rejected by dictConfig.
    """
    try:
        with open(config_file) as f:
            config: Dict[str, Any] = json.load(f)
        logging.config.dictConfig(config)
    except FileNotFoundError as err:
        raise RuntimeError(f"Logging config file not found: {config_file}") from err
    except json.JSONDecodeError as err:
        raise RuntimeError(f"Invalid JSON format in logging config file: {config_file}") from err
    except Exception as err:
        raise RuntimeError(f"Error loading logging config: {err}") from err


def _get_local_package_file_path(config_file: str) -> str:
    """
    Get the absolute path to a file in the same directory as this module.
    """
    return os.path.join(os.path.dirname(__file__), config_file)


class _InstanceIdFilter(logging.Filter):
    """
    A logging filter that injects the instance ID into every log record.

    The attribute can be used in log formatters as %(instance_id)s to tell
    apart the output of several service instances.
    """

    def __init__(self, instance_id: str) -> None:
        super().__init__()
        self._instance_id: str = instance_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.instance_id = self._instance_id
        return True
