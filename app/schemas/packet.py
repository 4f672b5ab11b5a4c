"""
Pydantic schemas for uplink envelopes and decoded packets.
"""
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ExtractedPacket(BaseModel):
    """First packet projected out of a webhook envelope."""
    model_config = ConfigDict(frozen=True)

    received_timestamp_ms: Union[int, float] = Field(..., description="Platform reception time, epoch milliseconds")
    packet_hex: str = Field(..., description="Hex-encoded packet bytes")
    terminal_id: Optional[str] = Field(None, description="Terminal identifier attached by the platform")


class InfoReading(BaseModel):
    """Periodic telemetry uplink: position, elevation, temperature and battery."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["info"] = "info"
    sequence_number: int = Field(..., description="Device uplink counter")
    device_time_s: int = Field(..., description="Device clock, epoch seconds")
    latitude: float = Field(..., description="Degrees")
    longitude: float = Field(..., description="Degrees")
    elevation: int = Field(..., description="Meters")
    temperature: int = Field(..., description="Degrees Celsius")
    battery_voltage: int = Field(..., description="Millivolts")


class AlertReading(BaseModel):
    """Event uplink carrying the water alert flag."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["alert"] = "alert"
    sequence_number: int = Field(..., description="Device uplink counter")
    device_time_s: int = Field(..., description="Device clock, epoch seconds")
    alert_status: bool = Field(..., description="True when the trough has no water")


DecodedReading = Annotated[Union[InfoReading, AlertReading], Field(discriminator="kind")]
