"""
Salon Booking API server
Run with: python run_server.py (listens on $PORT, default 3000)
"""

import logging
import sys

import uvicorn

from salon_booking.config import PORT
from salon_booking.credentials import CredentialError, load_service_account

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    try:
        load_service_account()
    except CredentialError as e:
        logger.error(f"❌ Cannot start without a service account: {e}")
        sys.exit(1)

    logger.info(f"🚀 Starting server on port {PORT}")
    uvicorn.run("salon_booking.main:app", host="0.0.0.0", port=PORT)
