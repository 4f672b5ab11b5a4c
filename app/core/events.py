"""
Event handlers for application lifecycle events.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import settings
from app.core.exceptions import ConfigurationMissing
from app.services.email.relay import EmailRelay

logger = logging.getLogger("aigrot")


async def startup_event_handler(app: FastAPI) -> None:
    """
    Handle application startup.

    Builds the email relay once per process. Missing credentials do not stop
    the server: the error is kept on ``app.state`` and reported by every
    request that needs the relay.
    """
    logger.info(f"Starting {settings.PROJECT_NAME}")

    app.state.email_relay = None
    app.state.email_relay_error = None
    try:
        app.state.email_relay = EmailRelay.from_settings(settings)
        names = ", ".join(d.name for d in app.state.email_relay.destinations)
        logger.info(f"Email relay initialized with destinations: {names}")
    except ConfigurationMissing as e:
        app.state.email_relay_error = e
        logger.error(f"Email relay not configured: {e.message} {e.details}")

    logger.info(f"✅ {settings.PROJECT_NAME} v{settings.VERSION} startup complete")


async def shutdown_event_handler(app: FastAPI) -> None:
    """
    Handle application shutdown.

    Close the relay's HTTP client.
    """
    logger.info(f"Shutting down {settings.PROJECT_NAME}")

    relay = getattr(app.state, "email_relay", None)
    if relay is not None:
        await relay.aclose()
        logger.info("Email relay closed")

    logger.info("✅ Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await startup_event_handler(app)
    try:
        yield
    finally:
        await shutdown_event_handler(app)
