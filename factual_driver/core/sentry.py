import sentry_sdk
from sentry_sdk.integrations.aiohttp import AioHttpIntegration

from factual_driver import config


def get_sentry_kwargs():
    """
    Returns Sentry configuration kwargs.

    The integration is created fresh each time so that it hooks into aiohttp
    when sentry_sdk.init() is called, which also traces outgoing client requests.
    """
    return {
        "dsn": config.SENTRY_DSN,
        "integrations": [AioHttpIntegration()],
        "release": config.DRIVER_VERSION,
        "traces_sample_rate": config.SENTRY_SAMPLE_RATE or 1.0,
    }


def init_sentry() -> bool:
    """Initialize Sentry if a DSN is configured and no client is active yet."""
    if not config.SENTRY_DSN or sentry_sdk.get_client().is_active():
        return False
    sentry_sdk.init(**get_sentry_kwargs())
    return True
