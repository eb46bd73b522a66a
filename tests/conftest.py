from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from salon_booking.domain.booking.exceptions import SlotAlreadyExists
from salon_booking.domain.booking.service import BookingService
from salon_booking.main import create_app
from salon_booking.services.google_calendar_service import CalendarError


class FakeAppointmentRepository:
    """In-memory stand-in for the Firestore appointments collection"""

    def __init__(self):
        self.documents = {}
        self.failing = set()

    def _maybe_fail(self, operation):
        if operation in self.failing:
            raise RuntimeError(f"firestore unavailable during {operation}")

    def add(self, doc_id, date, time):
        self.documents[doc_id] = {
            "date": date,
            "time": time,
            "clientName": "Existing",
            "phone": "0600000000",
            "status": "reserved",
        }

    async def find_by_slot(self, date, time):
        self._maybe_fail("find_by_slot")
        return [
            doc_id
            for doc_id, doc in self.documents.items()
            if doc["date"] == date and doc["time"] == time
        ]

    async def create(self, appointment):
        self._maybe_fail("create")
        if appointment.slot_id in self.documents:
            raise SlotAlreadyExists(appointment.slot_id)
        self.documents[appointment.slot_id] = {
            **appointment.to_document(),
            "createdAt": datetime.now(),
        }
        return appointment.slot_id

    async def delete(self, appointment_id):
        self._maybe_fail("delete")
        self.documents.pop(appointment_id, None)

    async def list_ids_on_or_before(self, cutoff):
        self._maybe_fail("list_ids_on_or_before")
        return [doc_id for doc_id, doc in self.documents.items() if doc["date"] <= cutoff]

    async def delete_many(self, appointment_ids):
        self._maybe_fail("delete_many")
        for appointment_id in appointment_ids:
            del self.documents[appointment_id]
        return len(appointment_ids)


class FakeSettingsRepository:
    def __init__(self):
        self.is_open = None
        self.error = None

    async def get_is_open(self):
        if self.error is not None:
            raise self.error
        return self.is_open


class FakeCalendarClient:
    def __init__(self):
        self.events = []
        self.error = None

    async def insert_event(self, event):
        if self.error is not None:
            raise self.error
        self.events.append(event)
        return f"evt{len(self.events)}"


@pytest.fixture
def appointments():
    return FakeAppointmentRepository()


@pytest.fixture
def settings():
    return FakeSettingsRepository()


@pytest.fixture
def calendar():
    return FakeCalendarClient()


@pytest.fixture
def booking_service(appointments, settings, calendar):
    return BookingService(appointments=appointments, settings=settings, calendar=calendar)


@pytest.fixture
def client(booking_service):
    app = create_app(booking_service=booking_service, run_cleanup=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def calendar_down(calendar):
    calendar.error = CalendarError("Google Calendar returned HTTP 503")
    return calendar


@pytest.fixture
def booking_payload():
    return {
        "date": "2024-05-02",
        "time": "10:00",
        "clientName": "Camille Martin",
        "phone": "0612345678",
    }
