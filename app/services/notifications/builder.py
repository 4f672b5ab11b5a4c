"""
Notification rendering for decoded uplinks.
"""
import html
from typing import List, Union

from app.schemas.email import EmailMessage
from app.schemas.packet import AlertReading, InfoReading


def _render(subject: str, lines: List[str]) -> EmailMessage:
    body = "<br/>".join(html.escape(line) for line in lines)
    return EmailMessage(subject=subject, html=f"<p>{body}</p>")


def build_notification(
    *,
    received_display: str,
    device_display: str,
    reading: Union[InfoReading, AlertReading],
    subject_prefix: str = "aIgrOT",
) -> EmailMessage:
    """
    Build the email for a decoded reading.

    Args:
        received_display: Platform reception time, already formatted
        device_display: Device send time, already formatted
        reading: Decoded packet
        subject_prefix: Product name leading every subject

    Returns:
        EmailMessage: Subject and HTML body
    """
    first_line = f"Horario de recepción servidor: {received_display}"

    if isinstance(reading, InfoReading):
        return _render(
            f"{subject_prefix} info",
            [
                first_line,
                f"Horario de envío: {device_display}",
                f"Latitud: {reading.latitude}",
                f"Longitud: {reading.longitude}",
                f"Elevación: {reading.elevation}",
                f"Temperatura: {reading.temperature}",
                f"Voltaje: {reading.battery_voltage}",
            ],
        )

    if reading.alert_status:
        subject = f"{subject_prefix}: ALERTA bebedero sin agua"
    else:
        subject = f"{subject_prefix}: bebedero con agua nuevamente"

    return _render(subject, [first_line, f"Horario: {device_display}"])
