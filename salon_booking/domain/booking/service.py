"""Booking service - Business logic for the shop-open gate and appointment creation"""

import logging
import re
from datetime import datetime, timedelta

from ...config import (
    APPOINTMENT_DURATION_MINUTES,
    CALENDAR_TIMEZONE,
    SHOP_STATUS_UNKNOWN_POLICY,
)
from .exceptions import (
    BOOKED_MESSAGE,
    BookingFailedError,
    InvalidDateTimeError,
    MissingDataError,
    ShopClosedError,
    SlotAlreadyExists,
    SlotTakenError,
)
from .schemas import Appointment, BookingRequest, BookingResponse, CalendarEvent, ShopState

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
TIME_PATTERN = re.compile(r"\d{2}:\d{2}")


def parse_slot(date: str, time: str) -> datetime:
    """Parse YYYY-MM-DD and HH:MM into a naive local datetime"""
    if not DATE_PATTERN.fullmatch(date) or not TIME_PATTERN.fullmatch(time):
        raise InvalidDateTimeError()
    try:
        return datetime.strptime(f"{date}T{time}", "%Y-%m-%dT%H:%M")
    except ValueError as e:
        raise InvalidDateTimeError() from e


def compute_end_time(date: str, time: str, duration_minutes: int = APPOINTMENT_DURATION_MINUTES) -> str:
    """End of the appointment as zero-padded HH:MM, wrapping past midnight"""
    end = parse_slot(date, time) + timedelta(minutes=duration_minutes)
    return end.strftime("%H:%M")


class BookingService:
    """Service layer for salon bookings"""

    def __init__(
        self,
        appointments,
        settings,
        calendar,
        duration_minutes: int = APPOINTMENT_DURATION_MINUTES,
        time_zone: str = CALENDAR_TIMEZONE,
        unknown_status_policy: str = SHOP_STATUS_UNKNOWN_POLICY,
    ):
        if unknown_status_policy not in ("open", "closed"):
            raise ValueError(f"Unknown shop status policy: {unknown_status_policy}")
        self.appointments = appointments
        self.settings = settings
        self.calendar = calendar
        self.duration_minutes = duration_minutes
        self.time_zone = time_zone
        self.unknown_status_policy = unknown_status_policy

    async def get_shop_state(self) -> ShopState:
        """Read settings/status; a missing document means open"""
        try:
            is_open = await self.settings.get_is_open()
        except Exception as e:
            logger.warning(f"⚠️ Could not read shop status: {e}")
            return ShopState.UNKNOWN

        if is_open is False:
            return ShopState.CLOSED
        return ShopState.OPEN

    def accepts_bookings(self, state: ShopState) -> bool:
        if state == ShopState.UNKNOWN:
            return self.unknown_status_policy == "open"
        return state == ShopState.OPEN

    def build_calendar_event(self, appointment: Appointment) -> CalendarEvent:
        start = parse_slot(appointment.date, appointment.time)
        return CalendarEvent(
            summary=f"RDV coiffure – {appointment.clientName}",
            description=f"Téléphone : {appointment.phone}",
            start=start,
            end=start + timedelta(minutes=self.duration_minutes),
            time_zone=self.time_zone,
        )

    async def book(self, data: BookingRequest) -> BookingResponse:
        """
        Reserve a slot and mirror it to Google Calendar.

        Order matters: the shop-open gate runs before input validation, the
        precedent query before the date/time parsing.
        """
        state = await self.get_shop_state()
        if not self.accepts_bookings(state):
            logger.info(f"🚫 Booking refused, shop state is {state.value}")
            raise ShopClosedError()

        if not (data.date and data.time and data.clientName and data.phone):
            raise MissingDataError()

        try:
            existing = await self.appointments.find_by_slot(data.date, data.time)
        except Exception as e:
            logger.error(f"❌ Slot lookup failed for {data.date} {data.time}: {e}")
            raise BookingFailedError() from e
        if existing:
            raise SlotTakenError()

        appointment = Appointment(
            date=data.date,
            time=data.time,
            clientName=data.clientName,
            phone=data.phone,
        )
        event = self.build_calendar_event(appointment)

        try:
            appointment_id = await self.appointments.create(appointment)
        except SlotAlreadyExists as e:
            logger.info(f"ℹ️ Slot {appointment.slot_id} taken by a concurrent booking")
            raise SlotTakenError() from e
        except Exception as e:
            logger.error(f"❌ Failed to save appointment {appointment.slot_id}: {e}")
            raise BookingFailedError() from e

        try:
            await self.calendar.insert_event(event)
        except Exception as e:
            logger.error(f"❌ Calendar sync failed for {appointment_id}, rolling back: {e}")
            await self._discard_appointment(appointment_id)
            raise BookingFailedError() from e

        logger.info(f"✅ Appointment booked: {appointment_id} (until {event.end:%H:%M})")
        return BookingResponse(success=True, message=BOOKED_MESSAGE)

    async def _discard_appointment(self, appointment_id: str) -> None:
        try:
            await self.appointments.delete(appointment_id)
            logger.info(f"↩️ Appointment {appointment_id} removed after calendar failure")
        except Exception as e:
            logger.error(f"❌ Could not remove appointment {appointment_id}, store and calendar differ: {e}")
