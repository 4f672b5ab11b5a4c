"""
Email relay backed by the Resend HTTP API.
"""
import asyncio
import logging
from typing import Dict, List, Optional, Sequence

import httpx

from app.core.config import Settings
from app.core.exceptions import ConfigurationMissing, RelayError
from app.schemas.email import DeliveryResult, EmailMessage, RelayDestination

logger = logging.getLogger("aigrot.email")


class EmailRelay:
    """
    Sends one notification through every configured destination.

    Each destination is a separate Resend account; sends run concurrently and
    every destination reports its own result.
    """

    def __init__(
        self,
        destinations: Sequence[RelayDestination],
        *,
        base_url: str = "https://api.resend.com",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the relay.

        Args:
            destinations: Accounts to send through, in response order
            base_url: Resend API root
            timeout: Per-request timeout in seconds
            client: Pre-built HTTP client, mainly for tests

        Raises:
            ConfigurationMissing: If no destination is given
        """
        if not destinations:
            raise ConfigurationMissing("No email destinations configured")

        self.destinations: List[RelayDestination] = list(destinations)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> "EmailRelay":
        """
        Build the relay from application settings.

        Raises:
            ConfigurationMissing: If an API key or recipient list is absent
        """
        missing_keys = [
            name
            for name in ("RESEND_API_KEY", "RESEND_API_KEY_SECONDARY")
            if not getattr(settings, name)
        ]
        if missing_keys:
            raise ConfigurationMissing("Missing Resend API keys", details={"missing": missing_keys})

        missing_recipients = [
            name
            for name, addresses in (("EMAIL_TO", settings.email_to), ("EMAIL_TO_SECONDARY", settings.email_to_secondary))
            if not addresses
        ]
        if missing_recipients:
            raise ConfigurationMissing("Missing email recipients", details={"missing": missing_recipients})

        destinations = [
            RelayDestination(
                name="primary",
                api_key=settings.RESEND_API_KEY,
                sender=settings.EMAIL_FROM,
                recipients=settings.email_to,
            ),
            RelayDestination(
                name="secondary",
                api_key=settings.RESEND_API_KEY_SECONDARY,
                sender=settings.EMAIL_FROM,
                recipients=settings.email_to_secondary,
            ),
        ]
        return cls(
            destinations,
            base_url=settings.RESEND_API_URL,
            timeout=settings.RESEND_TIMEOUT_SECONDS,
            client=client,
        )

    async def send(self, destination: RelayDestination, message: EmailMessage) -> DeliveryResult:
        """
        Send a message through a single destination.

        Raises:
            RelayError: If Resend rejects the request
            httpx.HTTPError: On transport failures
        """
        response = await self._client.post(
            "/emails",
            headers={"Authorization": f"Bearer {destination.api_key}"},
            json={
                "from": destination.sender,
                "to": destination.recipients,
                "subject": message.subject,
                "html": message.html,
            },
        )

        if response.status_code not in (200, 201):
            raise RelayError(
                message=f"Resend returned HTTP {response.status_code}: {_error_text(response)}",
                details={"status_code": response.status_code},
            )

        message_id = response.json().get("id")
        logger.info(f"Email sent via {destination.name}: {message_id}")
        return DeliveryResult(destination=destination.name, ok=True, id=message_id)

    async def send_all(self, message: EmailMessage) -> Dict[str, DeliveryResult]:
        """
        Send a message through every destination concurrently.

        Args:
            message: Rendered notification

        Returns:
            Dict: Destination name to its delivery result, in configuration order
        """
        outcomes = await asyncio.gather(
            *(self.send(destination, message) for destination in self.destinations),
            return_exceptions=True,
        )

        results: Dict[str, DeliveryResult] = {}
        for destination, outcome in zip(self.destinations, outcomes):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, (RelayError, httpx.HTTPError)):
                    logger.warning(f"Email via {destination.name} failed: {outcome}")
                else:
                    logger.error(f"Unexpected error sending via {destination.name}", exc_info=outcome)
                outcome = DeliveryResult(
                    destination=destination.name,
                    ok=False,
                    error=str(outcome) or type(outcome).__name__,
                )
            results[destination.name] = outcome
        return results

    async def aclose(self) -> None:
        """Close the HTTP client if the relay created it."""
        if self._owns_client:
            await self._client.aclose()


def _error_text(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text
