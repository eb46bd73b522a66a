"""
Retention sweep for past appointments
Deletes appointments whose date is at least RETENTION_DAYS in the past
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import CALENDAR_TIMEZONE, RETENTION_DAYS
from ..domain.booking.exceptions import BatchDeleteError

logger = logging.getLogger(__name__)


def retention_cutoff(today: date, retention_days: int = RETENTION_DAYS) -> str:
    """Last date (YYYY-MM-DD, inclusive) that gets purged"""
    return (today - timedelta(days=retention_days)).isoformat()


async def cleanup_old_appointments(
    appointments,
    today: Optional[date] = None,
    retention_days: int = RETENTION_DAYS,
) -> int:
    """
    Delete every appointment dated on or before today - retention_days.

    Runs once at startup and from run_retention_sweep.py. Failures are logged
    and never raised, so they cannot block the server from starting.

    Returns:
        int: number of appointments deleted
    """
    logger.info("🧹 Starting cleanup of old appointments...")
    if today is None:
        today = datetime.now(ZoneInfo(CALENDAR_TIMEZONE)).date()
    cutoff = retention_cutoff(today, retention_days)

    try:
        appointment_ids = await appointments.list_ids_on_or_before(cutoff)
        if not appointment_ids:
            logger.info(f"ℹ️ No appointments older than {retention_days} days found (cutoff {cutoff})")
            return 0

        deleted = await appointments.delete_many(appointment_ids)
        logger.info(f"✅ Cleanup finished. {deleted} appointment(s) deleted from Firestore")
        return deleted
    except BatchDeleteError as e:
        logger.error(f"❌ Cleanup interrupted, {e.deleted} appointment(s) were deleted before: {e}")
        return e.deleted
    except Exception as e:
        logger.error(f"❌ Error during Firestore cleanup: {e}")
        return 0
