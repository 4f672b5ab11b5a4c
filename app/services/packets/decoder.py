"""
Binary codec for trough monitor uplinks.

Two fixed little-endian layouts exist, told apart by length alone:

    info  (21 bytes)  <IIiihbH  seq, time, lat*1e7, lng*1e7, elevation, temperature, battery mV
    alert ( 9 bytes)  <IIB      seq, time, status byte (nonzero means no water)
"""
import logging
import re
import struct
from typing import Union

from app.core.exceptions import InvalidHex, UnknownPacketSize
from app.schemas.packet import AlertReading, InfoReading

logger = logging.getLogger("aigrot.packets")

INFO_PACKET = struct.Struct("<IIiihbH")
ALERT_PACKET = struct.Struct("<IIB")

INFO_PACKET_SIZE = INFO_PACKET.size
ALERT_PACKET_SIZE = ALERT_PACKET.size

COORDINATE_SCALE = 1e-7

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


def is_hex_string(value) -> bool:
    """Return True for a non-empty, even-length string of hex digits."""
    return isinstance(value, str) and len(value) % 2 == 0 and _HEX_RE.fullmatch(value) is not None


def decode_packet(packet_hex: str) -> Union[InfoReading, AlertReading]:
    """
    Decode a hex-encoded uplink into a typed reading.

    Args:
        packet_hex: Packet bytes as hex digits, either case

    Returns:
        InfoReading for 21-byte packets, AlertReading for 9-byte packets

    Raises:
        InvalidHex: If the input is not an even-length hex string
        UnknownPacketSize: If the byte count matches neither layout
    """
    if not is_hex_string(packet_hex):
        raise InvalidHex()

    raw = bytes.fromhex(packet_hex)

    if len(raw) == INFO_PACKET_SIZE:
        (
            sequence_number,
            device_time_s,
            latitude_raw,
            longitude_raw,
            elevation,
            temperature,
            battery_voltage,
        ) = INFO_PACKET.unpack(raw)
        reading = InfoReading(
            sequence_number=sequence_number,
            device_time_s=device_time_s,
            latitude=latitude_raw * COORDINATE_SCALE,
            longitude=longitude_raw * COORDINATE_SCALE,
            elevation=elevation,
            temperature=temperature,
            battery_voltage=battery_voltage,
        )
    elif len(raw) == ALERT_PACKET_SIZE:
        sequence_number, device_time_s, status = ALERT_PACKET.unpack(raw)
        reading = AlertReading(
            sequence_number=sequence_number,
            device_time_s=device_time_s,
            alert_status=status != 0,
        )
    else:
        raise UnknownPacketSize(len(raw), expected=(INFO_PACKET_SIZE, ALERT_PACKET_SIZE))

    logger.debug(f"Decoded {reading.kind} packet #{reading.sequence_number} ({len(raw)} bytes)")
    return reading


def encode_info_packet(
    *,
    sequence_number: int,
    device_time_s: int,
    latitude: float,
    longitude: float,
    elevation: int,
    temperature: int,
    battery_voltage: int,
) -> bytes:
    """
    Pack info fields into the 21-byte wire layout.

    Coordinates are given in degrees and rounded to the nearest 1e-7.

    Raises:
        ValueError: If a field does not fit its wire type
    """
    try:
        return INFO_PACKET.pack(
            sequence_number,
            device_time_s,
            round(latitude / COORDINATE_SCALE),
            round(longitude / COORDINATE_SCALE),
            elevation,
            temperature,
            battery_voltage,
        )
    except struct.error as e:
        raise ValueError(f"Info field out of range: {e}") from e


def encode_alert_packet(*, sequence_number: int, device_time_s: int, alert_status: bool) -> bytes:
    """Pack alert fields into the 9-byte wire layout."""
    try:
        return ALERT_PACKET.pack(sequence_number, device_time_s, 1 if alert_status else 0)
    except struct.error as e:
        raise ValueError(f"Alert field out of range: {e}") from e
