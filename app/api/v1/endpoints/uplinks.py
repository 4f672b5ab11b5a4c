# app/api/v1/endpoints/uplinks.py
"""
API endpoints receiving device uplinks from the platform webhook.
"""
import logging
from typing import Any, Dict, Tuple, Union

from fastapi import APIRouter, Depends, Request, status

from app.api.v1.dependencies import get_email_relay, get_settings
from app.core.config import Settings
from app.core.exceptions import InvalidEnvelope
from app.schemas.packet import AlertReading, ExtractedPacket, InfoReading
from app.services.email.relay import EmailRelay
from app.services.notifications.builder import build_notification
from app.services.packets.decoder import decode_packet
from app.services.packets.envelope import extract_envelope
from app.utils.datetime import (
    format_datetime,
    format_display_time,
    format_display_time_from_seconds,
    from_epoch_seconds,
)

router = APIRouter()
logger = logging.getLogger("aigrot.uplinks")


async def _read_uplink(request: Request) -> Tuple[ExtractedPacket, Union[InfoReading, AlertReading]]:
    """Parse, extract and decode the uplink carried by a webhook request."""
    try:
        body = await request.json()
    except ValueError as e:
        # Covers JSONDecodeError and undecodable bytes
        raise InvalidEnvelope() from e

    extracted = extract_envelope(body)
    reading = decode_packet(extracted.packet_hex)

    logger.info(
        f"Uplink {reading.kind} #{reading.sequence_number}"
        f" terminal={extracted.terminal_id or '-'}"
    )
    return extracted, reading


@router.post("/send-email", status_code=status.HTTP_200_OK)
async def relay_uplink(
    request: Request,
    relay: EmailRelay = Depends(get_email_relay),
    config: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Decode an uplink and email it to every configured destination.

    The platform calls this endpoint with ``{"Data": "<json string>"}``.
    Delivery results are reported per destination; a failed send does not
    fail the request.
    """
    extracted, reading = await _read_uplink(request)

    received_display = format_display_time(extracted.received_timestamp_ms, config.DISPLAY_TIMEZONE)
    device_display = format_display_time_from_seconds(reading.device_time_s, config.DISPLAY_TIMEZONE)

    message = build_notification(
        received_display=received_display,
        device_display=device_display,
        reading=reading,
        subject_prefix=config.NOTIFICATION_SUBJECT_PREFIX,
    )

    deliveries = await relay.send_all(message)

    response: Dict[str, Any] = {"Horario recepcion servidor": received_display}
    if extracted.terminal_id:
        response["TerminalId"] = extracted.terminal_id
    response.update({
        "subject": message.subject,
        "Horario de envío": device_display,
        "unpacked": reading.model_dump(),
        "resend": {name: result.model_dump() for name, result in deliveries.items()},
    })
    return response


@router.post("/view", status_code=status.HTTP_200_OK)
async def view_uplink(
    request: Request,
    config: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Decode an uplink and return it without sending any email.

    Useful for checking the platform integration before the relay is
    configured.
    """
    extracted, reading = await _read_uplink(request)

    response: Dict[str, Any] = {
        "received_at": format_display_time(extracted.received_timestamp_ms, config.DISPLAY_TIMEZONE),
    }
    if extracted.terminal_id:
        response["TerminalId"] = extracted.terminal_id
    response.update({
        "device_time": format_display_time_from_seconds(reading.device_time_s, config.DISPLAY_TIMEZONE),
        "device_time_utc": format_datetime(from_epoch_seconds(reading.device_time_s)),
        "unpacked": reading.model_dump(),
    })
    return response
