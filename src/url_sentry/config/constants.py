"""
Constants for the URL monitoring service.

This module defines default values for all configurable parameters of the
service. These constants are used as fallback values when neither
command-line arguments nor environment variables are provided.
"""

# Prefix of every environment variable read by the service
ENV_PREFIX = "URL_SENTRY_"

# Config file discovery
CONFIG_FILE_NAMES = ("config.yml", "config.yaml")
CONFIG_SEARCH_PATHS = (".", "~/.config/url-sentry", "/etc/url-sentry")

# Log output defaults
DEFAULT_LOG_FILE = "/var/log/url-sentry.log"
DEFAULT_LOG_FILE_NAME = "url-sentry.log"
DEFAULT_LOGGING_TYPE = "prod"
DEFAULT_LOGGING_CONFIG_FILE = ""
DEFAULT_INSTANCE_ID_PREFIX = "url-sentry-"

# Mail server defaults
DEFAULT_SMTP_SERVER = "localhost"
DEFAULT_SMTP_PORT = 25
DEFAULT_FROM_EMAIL = "url-sentry@localhost"

# Monitoring defaults
DEFAULT_MAX_TIMEOUT = 30
DEFAULT_TICK_INTERVAL = 1.0
DEFAULT_METHOD = "GET"
