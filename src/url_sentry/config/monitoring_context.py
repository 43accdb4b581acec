"""
Configuration context for the URL monitoring service.

This module defines a data structure that holds all process-wide settings.
It is built once from the command line and environment and then passed
explicitly to the components that need it.
"""

from typing import NamedTuple


class MonitoringContext(NamedTuple):
    """
    A data structure containing all process-wide settings of the service.

    Attributes:
        config_file: Explicit path of the targets config file, or "" to search.
        instance_id: Identifier injected into every log record.
        log_file: File (or directory) receiving the logs when not verbose.
        logging_type: Type of logging configuration to use (dev, prod, or custom).
        logging_config_file: Path to custom logging configuration file (if logging_type is 'custom').
        verbose: Log to stdout instead of the log file.
        debug: Include debug statements in the log output.
        check_only: Validate the configuration and exit.
        show_version: Print the version and exit.
        run_once: Check every due target once and exit.
        no_alerts: Compose and log alerts but never send them.
        smtp_server: Host of the mail server.
        smtp_port: Port of the mail server.
        smtp_username: Login of the mail server, "" for no authentication.
        smtp_password: Password of the mail server.
        from_email: Sender address for targets that do not define one.
        max_timeout: Maximum duration in seconds of a single HTTP check.
    """

    config_file: str
    instance_id: str
    log_file: str
    logging_type: str
    logging_config_file: str
    verbose: bool
    debug: bool
    check_only: bool
    show_version: bool
    run_once: bool
    no_alerts: bool
    smtp_server: str
    smtp_port: int
    smtp_username: str
    smtp_password: str
    from_email: str
    max_timeout: int
