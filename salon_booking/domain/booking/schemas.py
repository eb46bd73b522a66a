"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class ShopState(str, Enum):
    """Open/closed state of the salon as read from settings/status"""

    OPEN = "open"
    CLOSED = "closed"
    UNKNOWN = "unknown"  # settings/status could not be read


class BookingRequest(BaseModel):
    """
    Schema for POST /api/book.

    Every field is optional here so that the service can run the shop-open
    gate before rejecting incomplete requests.
    """

    date: Optional[str] = None  # YYYY-MM-DD
    time: Optional[str] = None  # HH:MM
    clientName: Optional[str] = None
    phone: Optional[str] = None


class BookingResponse(BaseModel):
    success: bool
    message: str


class StatusResponse(BaseModel):
    is_open: bool


class Appointment(BaseModel):
    """A reserved slot as stored in the appointments collection"""

    date: str
    time: str
    clientName: str
    phone: str
    status: str = "reserved"
    createdAt: Optional[datetime] = None  # set by the server on write

    @property
    def slot_id(self) -> str:
        """Deterministic document id, one document per (date, time)"""
        return f"{self.date}_{self.time}"

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(exclude={"createdAt"})


class CalendarEvent(BaseModel):
    """Google Calendar event mirrored from an appointment"""

    summary: str
    description: str
    start: datetime
    end: datetime
    time_zone: str

    def to_request_body(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "description": self.description,
            "start": {"dateTime": self.start.strftime("%Y-%m-%dT%H:%M:%S"), "timeZone": self.time_zone},
            "end": {"dateTime": self.end.strftime("%Y-%m-%dT%H:%M:%S"), "timeZone": self.time_zone},
        }
