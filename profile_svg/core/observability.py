import logging

import sentry_sdk

from profile_svg.settings import Settings


SERVICE_NAME = "github-profile-svg"


def configure_logging(log_level: str = "INFO") -> None:
    """Route the SVG service's logs through the root logger.

    Unknown level names fall back to INFO rather than failing app startup.
    """

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def init_sentry(app_settings: Settings) -> None:
    """Report profile SVG failures to Sentry when `SENTRY_DSN` is set.

    Events are tagged with the service name and the fallback username so
    errors from `/api/svg` can be told apart from other deployments.
    """

    if not app_settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=app_settings.sentry_dsn,
        environment=app_settings.environment,
        release=app_settings.release,
        traces_sample_rate=app_settings.sentry_traces_sample_rate,
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service", SERVICE_NAME)
    sentry_sdk.set_tag("default_username", app_settings.default_username)
