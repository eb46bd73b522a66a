import json
from datetime import datetime
from unittest.mock import MagicMock, patch

import httpx
import pytest
from google.oauth2 import service_account

from salon_booking.domain.booking.schemas import CalendarEvent
from salon_booking.services.google_calendar_service import CalendarError, GoogleCalendarClient

EVENT = CalendarEvent(
    summary="RDV coiffure – Camille Martin",
    description="Téléphone : 0612345678",
    start=datetime(2024, 5, 2, 10, 0),
    end=datetime(2024, 5, 2, 10, 30),
    time_zone="Europe/Paris",
)


async def fixed_token():
    return "test-token"


def make_client(handler, token_provider=fixed_token):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleCalendarClient(
        calendar_id="salon@example.com",
        http_client=http_client,
        token_provider=token_provider,
    )


async def test_insert_event_posts_to_calendar():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"id": "evt123"})

    event_id = await make_client(handler).insert_event(EVENT)

    assert event_id == "evt123"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.raw_path == b"/calendar/v3/calendars/salon%40example.com/events"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert json.loads(request.content) == {
        "summary": "RDV coiffure – Camille Martin",
        "description": "Téléphone : 0612345678",
        "start": {"dateTime": "2024-05-02T10:00:00", "timeZone": "Europe/Paris"},
        "end": {"dateTime": "2024-05-02T10:30:00", "timeZone": "Europe/Paris"},
    }


async def test_error_status_raises():
    client = make_client(lambda request: httpx.Response(403, json={"error": {"message": "forbidden"}}))

    with pytest.raises(CalendarError, match="403"):
        await client.insert_event(EVENT)


async def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CalendarError):
        await make_client(handler).insert_event(EVENT)


async def test_token_failure_raises():
    async def broken_token():
        raise RuntimeError("invalid_grant")

    client = make_client(lambda request: httpx.Response(200, json={"id": "x"}), broken_token)

    with pytest.raises(CalendarError, match="access token"):
        await client.insert_event(EVENT)


def test_requires_credentials_or_token_provider():
    with pytest.raises(ValueError):
        GoogleCalendarClient()


async def test_service_account_token_is_refreshed_once_and_sent():
    credentials = MagicMock()
    credentials.valid = False

    def refresh(request):
        credentials.token = "sa-token"
        credentials.valid = True

    credentials.refresh.side_effect = refresh
    seen = []

    def handler(request):
        seen.append(request.headers["Authorization"])
        return httpx.Response(200, json={"id": f"evt{len(seen)}"})

    with patch.object(
        service_account.Credentials, "from_service_account_info", return_value=credentials
    ) as from_info:
        client = GoogleCalendarClient(
            {"client_email": "booking@salon-test.iam.gserviceaccount.com"},
            calendar_id="salon@example.com",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

    await client.insert_event(EVENT)
    await client.insert_event(EVENT)

    from_info.assert_called_once_with(
        {"client_email": "booking@salon-test.iam.gserviceaccount.com"},
        scopes=["https://www.googleapis.com/auth/calendar"],
    )
    assert credentials.refresh.call_count == 1
    assert seen == ["Bearer sa-token", "Bearer sa-token"]
