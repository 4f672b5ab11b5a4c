"""
Application settings and configuration management.
"""
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings


def split_addresses(value: Optional[str]) -> List[str]:
    """Split a comma-separated address list, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings."""
    # Base
    PROJECT_NAME: str = "aIgrOT Uplink Relay"
    PROJECT_DESCRIPTION: str = "Decodes trough monitor uplinks and relays them by email"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # Presentation
    DISPLAY_TIMEZONE: str = "America/Argentina/Buenos_Aires"
    NOTIFICATION_SUBJECT_PREFIX: str = "aIgrOT"

    @field_validator("DISPLAY_TIMEZONE")
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names the tz database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    # Resend
    RESEND_API_URL: str = "https://api.resend.com"
    RESEND_TIMEOUT_SECONDS: float = 10.0
    EMAIL_FROM: str = "onboarding@resend.dev"

    # Primary account
    RESEND_API_KEY: Optional[str] = None
    EMAIL_TO: str = ""

    # Secondary account
    RESEND_API_KEY_SECONDARY: Optional[str] = None
    EMAIL_TO_SECONDARY: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        """Pydantic config."""
        case_sensitive = True
        env_file = ".env"
        extra = "ignore"

    @property
    def email_to(self) -> List[str]:
        return split_addresses(self.EMAIL_TO)

    @property
    def email_to_secondary(self) -> List[str]:
        return split_addresses(self.EMAIL_TO_SECONDARY)


# Create singleton settings instance
settings = Settings()
