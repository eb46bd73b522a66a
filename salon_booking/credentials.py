"""
Service account loading.

The same Google service account authenticates Firestore and Google Calendar.
It comes from the SERVICE_ACCOUNT_KEY environment variable (JSON string) or,
when that is unset, from a local JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from .config import SERVICE_ACCOUNT_FILE, SERVICE_ACCOUNT_KEY

logger = logging.getLogger(__name__)


class CredentialError(RuntimeError):
    """Raised when no usable service account can be loaded"""


def load_service_account(
    raw_key: Optional[str] = SERVICE_ACCOUNT_KEY,
    key_file: str = SERVICE_ACCOUNT_FILE,
) -> dict[str, Any]:
    """
    Resolve the service account credential.

    Returns the parsed JSON document. Raises CredentialError if neither source
    is available or the content is not a JSON object.
    """
    if raw_key:
        source = "SERVICE_ACCOUNT_KEY"
        content = raw_key
    else:
        source = key_file
        try:
            content = Path(key_file).read_text(encoding="utf-8")
        except OSError as e:
            raise CredentialError(
                f"SERVICE_ACCOUNT_KEY not set and {key_file} could not be read: {e}"
            ) from e

    try:
        info = json.loads(content)
    except json.JSONDecodeError as e:
        raise CredentialError(f"Service account from {source} is not valid JSON: {e}") from e

    if not isinstance(info, dict):
        raise CredentialError(f"Service account from {source} must be a JSON object")

    logger.info(f"✅ Service account loaded from {source} ({info.get('client_email', 'unknown')})")
    return info
