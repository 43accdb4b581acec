"""
Main entry point for the URL monitoring service.

This module parses the process settings, sets up logging, resolves the
targets from the config file and runs the monitor, either once or until the
process is terminated.
"""

import asyncio
import logging
import sys
from typing import List, Optional

import aiohttp

from url_sentry import __version__
from url_sentry.checker.aiohttp_checker import AiohttpStatusChecker
from url_sentry.config import MonitoringContext, get_context
from url_sentry.config.config_file import load_config
from url_sentry.config.http_config import get_http_session
from url_sentry.config.logging_config import configure_logging
from url_sentry.config.target_config import build_targets
from url_sentry.dispatcher.smtp_dispatcher import SmtpDispatcher
from url_sentry.domain import SMTPSettings, Target
from url_sentry.errors import ConfigError, ConfigFileError
from url_sentry.monitor import Monitor
from url_sentry.processor.alert_processor import AlertProcessor
from url_sentry.processor.check_log_processor import CheckLogProcessor
from url_sentry.processor.delegating_processor import DelegatingResultProcessor
from url_sentry.scheduler.tick_scheduler import TickScheduler

logger = logging.getLogger(__name__)


def load_targets(context: MonitoringContext) -> List[Target]:
    """
    Loads the config file and resolves its targets.

    Raises:
        ConfigFileError: If no usable config file is found.
        ConfigError: If the defaults section is invalid.
    """
    raw_config = load_config(context.config_file)
    targets = build_targets(raw_config.targets, raw_config.defaults)
    for target in targets:
        logger.debug(f"config: target={target}")
    if not targets:
        logger.warning(f"No valid targets found in {raw_config.path}")
    return targets


async def main(context: MonitoringContext, targets: List[Target]) -> None:
    """
    Set up and run the monitor.

    This function creates the HTTP session, the alerting pipeline and the
    monitor, runs it in the mode selected by the context and releases the
    resources when it ends or is cancelled.

    Args:
        context: Configuration context containing all application settings.
        targets: The resolved targets to monitor.
    """
    smtp_settings = SMTPSettings(
        host=context.smtp_server,
        port=context.smtp_port,
        username=context.smtp_username,
        password=context.smtp_password,
    )
    logger.debug(
        f"config: smtp={{Host:{smtp_settings.host} Port:{smtp_settings.port} "
        f"UserName:{smtp_settings.username}}}"
    )

    alert_processor = AlertProcessor(
        dispatcher=SmtpDispatcher(),
        smtp_settings=smtp_settings,
        default_from=context.from_email,
    )
    if context.no_alerts:
        logger.debug("config: no-alerts=true")
        alert_processor.disable_alerts()

    http_session: aiohttp.ClientSession = get_http_session(context)
    monitor = Monitor(
        scheduler=TickScheduler(targets),
        checker=AiohttpStatusChecker(http_session),
        processor=DelegatingResultProcessor([CheckLogProcessor(), alert_processor]),
    )

    try:
        if context.run_once:
            await monitor.run_once()
        else:
            await monitor.start()
    except asyncio.CancelledError:
        logger.info("Application shutdown requested.")
    finally:
        await monitor.stop()
        await http_session.close()
        logger.info("Shutdown complete.")


def run(argv: Optional[List[str]] = None) -> int:
    """
    Runs the service and returns the process exit status.

    Args:
        argv: Command-line arguments, defaults to sys.argv[1:].
    """
    context = get_context(argv)
    if context.show_version:
        print(f"url-sentry {__version__}")
        return 0

    configure_logging(context)

    try:
        targets = load_targets(context)
    except ConfigFileError as err:
        logger.error(f"{err}")
        return 1
    except ConfigError as err:
        logger.error(f"Invalid defaults in config file: {err}")
        return 1

    if context.check_only:
        logger.info("Config file format checks out, exiting")
        if not context.debug:
            logger.info("Use the --debug flag for more info")
        return 0

    try:
        asyncio.run(main(context, targets))
    except KeyboardInterrupt:
        logger.info("Shutdown initiated by user (Ctrl+C).")
    return 0


def cli() -> None:
    sys.exit(run())


if __name__ == "__main__":
    cli()
