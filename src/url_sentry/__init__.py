"""
URL monitoring and alerting service.

Watches http/s URLs for unexpected responses and emails a notification
whenever a target goes offline or comes back online.
"""

__version__ = "0.2.2"

USER_AGENT = f"url-sentry v{__version__}"
