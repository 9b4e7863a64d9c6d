import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from app.core.config import get_settings

logger = logging.getLogger(__name__)


def init_sentry():
    """Initialize Sentry for error tracking"""
    settings = get_settings()

    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            integrations=[FastApiIntegration(), SqlalchemyIntegration()],
            traces_sample_rate=1.0,
            send_default_pii=False,
            environment=settings.ENVIRONMENT,
        )
        logger.info("Sentry initialized")
    else:
        logger.warning("Sentry DSN not found - error tracking disabled")
