"""
Pydantic schemas for outgoing notifications and relay results.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EmailMessage(BaseModel):
    """Rendered notification ready for the relay."""
    model_config = ConfigDict(frozen=True)

    subject: str
    html: str


class RelayDestination(BaseModel):
    """One sending account and the addresses it delivers to."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Key used for this destination in responses")
    api_key: str = Field(..., repr=False)
    sender: str
    recipients: List[str]


class DeliveryResult(BaseModel):
    """Outcome of sending one notification through one destination."""
    destination: str
    ok: bool
    id: Optional[str] = Field(None, description="Provider message ID on success")
    error: Optional[str] = Field(None, description="Failure description")
