"""
Configuration module for the URL monitoring service.

This module parses command-line arguments and environment variables into a
configuration context. Every option first takes the command-line value, then
falls back to a URL_SENTRY_* environment variable and finally to a default.
"""

import argparse
import os
from typing import Any, List, Optional
from uuid import uuid4

from url_sentry import __version__
from url_sentry.config.constants import (
    DEFAULT_FROM_EMAIL,
    DEFAULT_INSTANCE_ID_PREFIX,
    DEFAULT_LOG_FILE,
    DEFAULT_LOGGING_CONFIG_FILE,
    DEFAULT_LOGGING_TYPE,
    DEFAULT_MAX_TIMEOUT,
    DEFAULT_SMTP_PORT,
    DEFAULT_SMTP_SERVER,
    ENV_PREFIX,
)
from url_sentry.config.monitoring_context import MonitoringContext


def _env(name: str, default: Any) -> Any:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str) -> bool:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    return value is not None and value.strip().lower() in ("1", "true", "yes", "on")


def get_context(argv: Optional[List[str]] = None) -> MonitoringContext:
    """
    Parse command-line arguments and environment variables to create a configuration context.

    Args:
        argv: Arguments to parse instead of sys.argv[1:].

    Returns:
        MonitoringContext: A configuration context object containing all parsed settings.
    """
    parser = argparse.ArgumentParser(
        prog="url-sentry",
        description="An URL monitoring alerting service. "
        "Watches http/s URLs for unexpected responses.",
    )

    parser.add_argument(
        "--config",
        dest="config_file",
        type=str,
        default=_env("CONFIG", ""),
        help='Path to a specific config file (default "./config.yml").\n'
        f"If not provided, the value is read from the {ENV_PREFIX}CONFIG environment variable.",
    )

    parser.add_argument(
        "-l",
        "--log-file",
        type=str,
        default=_env("LOG_FILE", DEFAULT_LOG_FILE),
        help=f'Path to log file (default "{DEFAULT_LOG_FILE}").\n'
        "A directory gets the default log file name appended.",
    )

    parser.add_argument(
        "-i",
        "--instance-id",
        type=str,
        default=_env("INSTANCE_ID", f"{DEFAULT_INSTANCE_ID_PREFIX}{uuid4()}"),
        help="Identifier added to every log record.\n"
        f"If not provided, the value is read from the {ENV_PREFIX}INSTANCE_ID environment variable.\n"
        f"If that is also absent, the default value will be {DEFAULT_INSTANCE_ID_PREFIX}uuid4().",
    )

    parser.add_argument(
        "-lt",
        "--logging-type",
        type=str,
        default=_env("LOGGING_TYPE", DEFAULT_LOGGING_TYPE),
        help="Specifies the logging configuration type to use.\n"
        "Allowed values: dev, prod, custom (case insensitive).\n"
        "For 'custom', the --logging-config-file argument is required.",
    )

    parser.add_argument(
        "-lcf",
        "--logging-config-file",
        type=str,
        default=_env("LOGGING_CONFIG_FILE", DEFAULT_LOGGING_CONFIG_FILE),
        help="Path to custom logging configuration file.\n"
        "Required when --logging-type is set to 'custom'.",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=_env_flag("VERBOSE"),
        help="Print logs to stdout instead of file",
    )

    parser.add_argument(
        "-D",
        "--debug",
        action="store_true",
        default=_env_flag("DEBUG"),
        help=argparse.SUPPRESS,
    )

    parser.add_argument(
        "--check",
        dest="check_only",
        action="store_true",
        default=False,
        help="Check the config for errors and exit",
    )

    parser.add_argument(
        "--version",
        dest="show_version",
        action="store_true",
        default=False,
        help="Display the version number and exit",
    )

    parser.add_argument(
        "-o",
        "--run-once",
        action="store_true",
        default=_env_flag("RUN_ONCE"),
        help="Run once and exit",
    )

    parser.add_argument(
        "-n",
        "--no-alerts",
        action="store_true",
        default=_env_flag("NO_ALERTS"),
        help="Disable all outgoing email alerts, log alerts only",
    )

    parser.add_argument(
        "-x",
        "--smtp-server",
        type=str,
        default=_env("SMTP_SERVER", DEFAULT_SMTP_SERVER),
        help="The SMTP server to send email through",
    )

    parser.add_argument(
        "-r",
        "--smtp-port",
        type=int,
        default=int(_env("SMTP_PORT", DEFAULT_SMTP_PORT)),
        help="The port to use for the SMTP server",
    )

    parser.add_argument(
        "-u",
        "--smtp-username",
        type=str,
        default=_env("SMTP_USERNAME", ""),
        help="Authenticate the SMTP server with this user",
    )

    parser.add_argument(
        "-w",
        "--smtp-password",
        type=str,
        default=_env("SMTP_PASSWORD", ""),
        help="Authenticate the SMTP server with this password",
    )

    parser.add_argument(
        "-f",
        "--from-email",
        type=str,
        default=_env("FROM_EMAIL", DEFAULT_FROM_EMAIL),
        help="Sender address for targets that do not set from_email",
    )

    parser.add_argument(
        "-mt",
        "--max-timeout",
        type=int,
        default=int(_env("MAX_TIMEOUT", DEFAULT_MAX_TIMEOUT)),
        help="Specifies the maximum timeout duration in seconds for HTTP requests.\n"
        f"If not provided, the value is read from the {ENV_PREFIX}MAX_TIMEOUT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_MAX_TIMEOUT} seconds is used.",
    )

    parser.epilog = f"Version: url-sentry {__version__}"

    args: Any = parser.parse_args(argv)

    return MonitoringContext(
        config_file=args.config_file,
        instance_id=args.instance_id,
        log_file=args.log_file,
        logging_type=args.logging_type,
        logging_config_file=args.logging_config_file,
        verbose=args.verbose,
        debug=args.debug,
        check_only=args.check_only,
        show_version=args.show_version,
        run_once=args.run_once,
        no_alerts=args.no_alerts,
        smtp_server=args.smtp_server,
        smtp_port=args.smtp_port,
        smtp_username=args.smtp_username,
        smtp_password=args.smtp_password,
        from_email=args.from_email,
        max_timeout=args.max_timeout,
    )
