"""
One-shot retention sweep, for use from cron or a scheduled job
Run this as a separate process: python run_retention_sweep.py
"""

import asyncio
import logging
import sys

from salon_booking.credentials import CredentialError, load_service_account
from salon_booking.database import get_firestore_client
from salon_booking.domain.booking.repository import AppointmentRepository
from salon_booking.services.retention_service import cleanup_old_appointments

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


async def main() -> int:
    service_account = load_service_account()
    appointments = AppointmentRepository(get_firestore_client(service_account))
    return await cleanup_old_appointments(appointments)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except CredentialError as e:
        logger.error(f"❌ Cannot run cleanup without a service account: {e}")
        sys.exit(1)
