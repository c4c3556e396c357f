"""
Application entry point.

All configuration, middleware, and lifecycle management is delegated
to specialized modules.
"""

import logging

import sentry_sdk

from marketplace.config.settings import get_settings
from marketplace.core.app_factory import create_app

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

# Initialize Sentry for error tracking
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        send_default_pii=False,
        environment=settings.ENVIRONMENT,
    )

# Create application using factory
app = create_app()

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting application in {settings.ENVIRONMENT} mode")
    uvicorn.run(
        "marketplace.main:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.DEBUG,
    )
