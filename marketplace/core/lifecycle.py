"""
Application lifecycle management using the FastAPI lifespan pattern.

Handles only application startup/shutdown logic.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from marketplace.api.middleware.logging_middleware import install_access_log_redaction
from marketplace.config.settings import get_settings
from marketplace.database.async_db import async_engine

logger = logging.getLogger(__name__)
settings = get_settings()


class LifecycleManager:
    """
    Manages application lifecycle events.

    Handles startup configuration checks and graceful shutdown.
    """

    def __init__(self) -> None:
        """Initialize lifecycle manager."""
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def startup(self) -> None:
        """
        Execute startup tasks.

        Called when the application starts.
        """
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")

        self._verify_configurations()
        install_access_log_redaction()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        """
        Execute shutdown tasks.

        Called when the application stops.
        """
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        await async_engine.dispose()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        """Verify critical application configurations."""
        if not settings.MERCADO_PAGO_WEBHOOK_SECRET:
            logger.warning("MERCADO_PAGO_WEBHOOK_SECRET not configured - every webhook will be rejected")

        if not settings.MERCADO_PAGO_ACCESS_TOKEN:
            logger.warning("MERCADO_PAGO_ACCESS_TOKEN not configured - gateway fetches will fail")

        if not settings.email_enabled:
            logger.info("RESEND_API_KEY not configured - payment e-mails are disabled")


# Global lifecycle manager instance
_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = get_lifecycle_manager()

    await lifecycle.startup()

    yield

    await lifecycle.shutdown()
