"""
Dependencies for API endpoints.
"""
from fastapi import Request

from app.core.config import Settings, settings
from app.core.exceptions import ConfigurationMissing
from app.services.email.relay import EmailRelay


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def get_email_relay(request: Request) -> EmailRelay:
    """
    Get the process-wide email relay built at startup.

    Raises:
        ConfigurationMissing: If the relay could not be initialized
    """
    relay = getattr(request.app.state, "email_relay", None)
    if relay is not None:
        return relay

    startup_error = getattr(request.app.state, "email_relay_error", None)
    if startup_error is not None:
        raise ConfigurationMissing(message=startup_error.message, details=startup_error.details)
    raise ConfigurationMissing()
