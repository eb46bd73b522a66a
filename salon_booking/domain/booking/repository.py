"""Booking repositories - Firestore operations for appointments and shop settings"""

from typing import Optional

from google.api_core.exceptions import AlreadyExists
from google.cloud.firestore import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from ...database import (
    APPOINTMENTS_COLLECTION,
    MAX_BATCH_SIZE,
    SETTINGS_COLLECTION,
    STATUS_DOCUMENT,
)
from .exceptions import BatchDeleteError, SlotAlreadyExists
from .schemas import Appointment


class AppointmentRepository:
    """Repository for the appointments collection"""

    def __init__(self, db):
        self.db = db

    @property
    def collection(self):
        return self.db.collection(APPOINTMENTS_COLLECTION)

    async def find_by_slot(self, date: str, time: str) -> list[str]:
        """Return ids of appointments already holding this (date, time)"""
        docs = await (
            self.collection.where(filter=FieldFilter("date", "==", date))
            .where(filter=FieldFilter("time", "==", time))
            .get()
        )
        return [doc.id for doc in docs]

    async def create(self, appointment: Appointment) -> str:
        """
        Create the appointment under its slot id.
        Raises SlotAlreadyExists if another request stored the same slot first.
        """
        data = appointment.to_document()
        data["createdAt"] = SERVER_TIMESTAMP
        try:
            await self.collection.document(appointment.slot_id).create(data)
        except AlreadyExists as e:
            raise SlotAlreadyExists(appointment.slot_id) from e
        return appointment.slot_id

    async def delete(self, appointment_id: str) -> None:
        await self.collection.document(appointment_id).delete()

    async def list_ids_on_or_before(self, cutoff: str) -> list[str]:
        """Ids of appointments whose date is <= cutoff (YYYY-MM-DD)"""
        docs = await self.collection.where(filter=FieldFilter("date", "<=", cutoff)).get()
        return [doc.id for doc in docs]

    async def delete_many(self, appointment_ids: list[str]) -> int:
        """
        Delete appointments in write batches, returns the number deleted.
        Raises BatchDeleteError carrying the count already committed if a batch fails.
        """
        deleted = 0
        for start in range(0, len(appointment_ids), MAX_BATCH_SIZE):
            chunk = appointment_ids[start : start + MAX_BATCH_SIZE]
            batch = self.db.batch()
            for appointment_id in chunk:
                batch.delete(self.collection.document(appointment_id))
            try:
                await batch.commit()
            except Exception as e:
                raise BatchDeleteError(deleted, e) from e
            deleted += len(chunk)
        return deleted


class SettingsRepository:
    """Repository for the settings/status document"""

    def __init__(self, db):
        self.db = db

    async def get_is_open(self) -> Optional[bool]:
        """Raw is_open value, None when the document or the field is absent"""
        snapshot = await self.db.collection(SETTINGS_COLLECTION).document(STATUS_DOCUMENT).get()
        if not snapshot.exists:
            return None
        return (snapshot.to_dict() or {}).get("is_open")
