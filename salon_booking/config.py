import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Google service account (shared by Firestore and Google Calendar)
# SERVICE_ACCOUNT_KEY holds the raw JSON (Render), otherwise the local file is read
SERVICE_ACCOUNT_KEY = os.getenv("SERVICE_ACCOUNT_KEY")
SERVICE_ACCOUNT_FILE = os.getenv("SERVICE_ACCOUNT_FILE", "./google-service-account.json")

PORT = int(os.getenv("PORT", "3000"))

# Google Calendar Configuration
CALENDAR_ID = os.getenv("CALENDAR_ID", "primary")
CALENDAR_TIMEZONE = os.getenv("CALENDAR_TIMEZONE", "Europe/Paris")

# Booking rules
APPOINTMENT_DURATION_MINUTES = int(os.getenv("APPOINTMENT_DURATION_MINUTES", "30"))
# "open" keeps accepting bookings when settings/status cannot be read, "closed" refuses them
SHOP_STATUS_UNKNOWN_POLICY = os.getenv("SHOP_STATUS_UNKNOWN_POLICY", "open").lower()

# Retention
RETENTION_DAYS = int(os.getenv("RETENTION_DAYS", "7"))
RUN_CLEANUP_ON_STARTUP = os.getenv("RUN_CLEANUP_ON_STARTUP", "true").lower() == "true"

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
