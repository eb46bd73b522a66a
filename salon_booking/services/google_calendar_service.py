"""
Google Calendar Service
Mirrors salon appointments into the shop's Google Calendar using the service account
"""
import logging
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import quote

import httpx
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account
from starlette.concurrency import run_in_threadpool

from ..config import CALENDAR_ID
from ..domain.booking.schemas import CalendarEvent

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"
GOOGLE_CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]


class CalendarError(Exception):
    """Raised when Google Calendar refuses or fails to create an event"""


class GoogleCalendarClient:
    """Thin client for the Calendar v3 events endpoint, authenticated as the service account"""

    def __init__(
        self,
        service_account_info: Optional[dict[str, Any]] = None,
        calendar_id: str = CALENDAR_ID,
        http_client: Optional[httpx.AsyncClient] = None,
        token_provider: Optional[Callable[[], Awaitable[str]]] = None,
    ):
        if service_account_info is None and token_provider is None:
            raise ValueError("service_account_info or token_provider is required")
        self.calendar_id = calendar_id
        self._http_client = http_client
        self._token_provider = token_provider
        self._credentials = None
        if service_account_info is not None:
            self._credentials = service_account.Credentials.from_service_account_info(
                service_account_info, scopes=GOOGLE_CALENDAR_SCOPES
            )

    async def get_access_token(self) -> str:
        """Return a valid access token, refreshing the service account token if needed"""
        if self._token_provider is not None:
            return await self._token_provider()

        if not self._credentials.valid:
            logger.info("🔄 Google Calendar token expired, refreshing...")
            # google-auth refreshes synchronously
            await run_in_threadpool(self._credentials.refresh, GoogleAuthRequest())
        return self._credentials.token

    async def insert_event(self, event: CalendarEvent) -> str:
        """
        Create the event in the configured calendar.
        Returns the Google Calendar event ID, raises CalendarError otherwise.
        """
        try:
            access_token = await self.get_access_token()
        except Exception as e:
            raise CalendarError(f"Could not obtain Google access token: {e}") from e

        url = f"{GOOGLE_CALENDAR_API}/calendars/{quote(self.calendar_id, safe='')}/events"
        headers = {"Authorization": f"Bearer {access_token}"}
        body = event.to_request_body()

        try:
            if self._http_client is not None:
                response = await self._http_client.post(url, headers=headers, json=body)
            else:
                async with httpx.AsyncClient(timeout=30.0) as client:
                    response = await client.post(url, headers=headers, json=body)
        except httpx.HTTPError as e:
            raise CalendarError(f"Google Calendar request failed: {e}") from e

        if response.status_code not in [200, 201]:
            raise CalendarError(
                f"Google Calendar returned HTTP {response.status_code}: {response.text}"
            )

        event_id = response.json().get("id")
        logger.info(f"✅ Google Calendar event created: {event_id}")
        return event_id
