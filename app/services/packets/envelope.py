"""
Webhook envelope extraction.

The platform posts ``{"Data": "<json string>"}`` where the inner document holds
a ``Packets`` list; only the first packet is used.
"""
import json
import math
from typing import Any, Optional

from app.core.exceptions import InvalidEnvelope, MalformedJSON, MissingField
from app.schemas.packet import ExtractedPacket


def _is_number(value: Any) -> bool:
    # json.loads accepts NaN and Infinity literals
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


def _first_packet(document: Any) -> dict:
    if not isinstance(document, dict):
        return {}
    packets = document.get("Packets")
    if not isinstance(packets, list) or not packets:
        return {}
    first = packets[0]
    return first if isinstance(first, dict) else {}


def extract_envelope(body: Any) -> ExtractedPacket:
    """
    Validate a webhook body and project out its first packet.

    Args:
        body: Parsed JSON request body

    Returns:
        ExtractedPacket: Reception timestamp, packet hex and optional terminal ID

    Raises:
        InvalidEnvelope: If "Data" is missing or not a string
        MalformedJSON: If "Data" does not parse
        MissingField: If Timestamp or Value is absent or mistyped
    """
    if not isinstance(body, dict) or not isinstance(body.get("Data"), str):
        raise InvalidEnvelope()

    try:
        document = json.loads(body["Data"])
    except ValueError as e:
        # JSONDecodeError, or an integer literal past the digit limit
        details = {"position": e.pos} if hasattr(e, "pos") else None
        raise MalformedJSON(details=details) from e

    packet = _first_packet(document)

    timestamp = packet.get("Timestamp")
    if not _is_number(timestamp):
        raise MissingField("Timestamp")

    value = packet.get("Value")
    if not isinstance(value, str):
        raise MissingField("Value")

    terminal_id: Optional[str] = packet.get("TerminalId")
    if _is_number(terminal_id):
        terminal_id = str(terminal_id) if terminal_id else None
    elif not isinstance(terminal_id, str) or not terminal_id:
        terminal_id = None

    return ExtractedPacket(
        received_timestamp_ms=timestamp,
        packet_hex=value,
        terminal_id=terminal_id,
    )
