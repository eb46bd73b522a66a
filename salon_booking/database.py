import logging
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore_async

logger = logging.getLogger(__name__)

APPOINTMENTS_COLLECTION = "appointments"
SETTINGS_COLLECTION = "settings"
STATUS_DOCUMENT = "status"

# Firestore rejects batches with more than 500 writes
MAX_BATCH_SIZE = 500


def get_firebase_app(service_account: dict[str, Any]) -> firebase_admin.App:
    """Return the default Firebase app, initializing it with the service account if needed"""
    try:
        return firebase_admin.get_app()
    except ValueError:
        app = firebase_admin.initialize_app(credentials.Certificate(service_account))
        logger.info(f"✅ Firebase Admin initialized for project {service_account.get('project_id')}")
        return app


def get_firestore_client(service_account: dict[str, Any]):
    """Build the async Firestore client used by the repositories"""
    try:
        client = firestore_async.client(get_firebase_app(service_account))
    except Exception as e:
        logger.error(f"❌ Failed to create Firestore client: {e}")
        raise
    logger.info("✅ Firestore client created successfully")
    return client
