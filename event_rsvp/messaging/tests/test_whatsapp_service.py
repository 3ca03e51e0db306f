import datetime as dt
import json
from dataclasses import dataclass
from functools import partial

import httpx
import pytest

from event_rsvp.errors import DeliveryError
from event_rsvp.invitations.dispatcher import InvitationDispatcher
from event_rsvp.invitations.dtos import Event, EventStatus, RSVPResponse
from event_rsvp.messaging.templates import MessageTemplates
from event_rsvp.messaging.whatsapp_service import WhatsAppCloudGateway, format_phone_number


@dataclass
class FakeConfig:
    whatsapp_access_token: str = "test-token"
    whatsapp_phone_number_id: str = "123456"
    whatsapp_api_version: str = "v21.0"


class RecordingTransport:
    """Answers Graph API calls with a canned response and records the requests."""

    def __init__(self, status_code: int = 200, payload: dict | list | None = None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {"messages": [{"id": "wamid.abc"}]}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)


def make_gateway(transport: RecordingTransport, config: FakeConfig | None = None) -> WhatsAppCloudGateway:
    return WhatsAppCloudGateway(
        config=config or FakeConfig(),
        http_client_class=partial(httpx.AsyncClient, transport=httpx.MockTransport(transport)),
    )


def test_format_phone_number():
    assert format_phone_number("+1 (555) 000-0001") == "15550000001"
    assert format_phone_number("15550000001") == "15550000001"


def test_is_ready():
    assert make_gateway(RecordingTransport()).is_ready() is True
    assert make_gateway(RecordingTransport(), FakeConfig(whatsapp_access_token="")).is_ready() is False
    assert make_gateway(RecordingTransport(), FakeConfig(whatsapp_phone_number_id="")).is_ready() is False


@pytest.mark.asyncio
async def test_send_posts_text_message():
    transport = RecordingTransport()
    gateway = make_gateway(transport)

    message_id = await gateway.send("+1 555 000 0001", "Hello!")

    assert message_id == "wamid.abc"
    request = transport.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://graph.facebook.com/v21.0/123456/messages"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert json.loads(request.content) == {
        "messaging_product": "whatsapp",
        "to": "15550000001",
        "type": "text",
        "text": {"body": "Hello!"},
    }


@pytest.mark.asyncio
async def test_send_surfaces_provider_error():
    transport = RecordingTransport(
        status_code=400,
        payload={"error": {"message": "Recipient phone number not in allowed list", "code": 131030}},
    )
    gateway = make_gateway(transport)

    with pytest.raises(DeliveryError) as exc_info:
        await gateway.send("+15550000001", "Hello!")

    assert exc_info.value.recipient == "+15550000001"
    assert exc_info.value.reason == "Recipient phone number not in allowed list"


@pytest.mark.asyncio
async def test_send_with_unexpected_response_body():
    gateway = make_gateway(RecordingTransport(payload={"unexpected": True}))

    with pytest.raises(DeliveryError):
        await gateway.send("+15550000001", "Hello!")


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"messages": None}, {"messages": []}, [], {"messages": [{"status": "accepted"}]}])
async def test_send_with_malformed_success_body(payload):
    gateway = make_gateway(RecordingTransport(payload=payload))

    with pytest.raises(DeliveryError) as exc_info:
        await gateway.send("+15550000001", "Hello!")

    assert exc_info.value.recipient == "+15550000001"


@pytest.mark.asyncio
async def test_malformed_success_body_is_reported_per_recipient(event_store, rsvp_store, make_event):
    gateway = make_gateway(RecordingTransport(payload={"messages": None}))
    dispatcher = InvitationDispatcher(event_store, rsvp_store, gateway)
    event = make_event()

    report = await dispatcher.send_invitations(event.id)

    assert (report.total, report.successful, report.failed) == (2, 0, 2)
    assert all(result.error for result in report.results)
    assert event_store.get(event.id).status == EventStatus.SENT


@pytest.mark.asyncio
async def test_send_network_failure():
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    gateway = WhatsAppCloudGateway(
        config=FakeConfig(),
        http_client_class=partial(httpx.AsyncClient, transport=httpx.MockTransport(fail)),
    )

    with pytest.raises(DeliveryError) as exc_info:
        await gateway.send("+15550000001", "Hello!")

    assert "connection refused" in exc_info.value.reason


@pytest.mark.asyncio
async def test_mark_as_read():
    transport = RecordingTransport(payload={"success": True})
    gateway = make_gateway(transport)

    await gateway.mark_as_read("wamid.in-1")

    assert json.loads(transport.requests[0].content) == {
        "messaging_product": "whatsapp",
        "status": "read",
        "message_id": "wamid.in-1",
    }


@pytest.mark.asyncio
async def test_mark_as_read_failure_is_not_raised():
    gateway = make_gateway(RecordingTransport(status_code=500, payload={}))

    await gateway.mark_as_read("wamid.in-1")


@pytest.mark.asyncio
async def test_validate_connection():
    transport = RecordingTransport(payload={"display_phone_number": "+1 555 000 0000", "verified_name": "Events"})
    gateway = make_gateway(transport)

    await gateway.validate_connection()

    assert transport.requests[0].method == "GET"
    assert str(transport.requests[0].url) == "https://graph.facebook.com/v21.0/123456"


@pytest.mark.asyncio
async def test_validate_connection_without_credentials():
    gateway = make_gateway(RecordingTransport(), FakeConfig(whatsapp_access_token=""))

    with pytest.raises(ValueError):
        await gateway.validate_connection()


@pytest.mark.asyncio
async def test_validate_connection_rejected_token():
    gateway = make_gateway(RecordingTransport(status_code=401, payload={"error": {"message": "Invalid token"}}))

    with pytest.raises(httpx.HTTPStatusError):
        await gateway.validate_connection()


def test_invitation_template_skips_missing_optional_fields():
    event = Event(title="Game Night", date=dt.date(2025, 3, 1), time=dt.time(18, 5), invitees=["+1"])

    text = MessageTemplates.invitation(event)

    assert "*Game Night*" in text
    assert "🕐 Time: 18:05" in text
    assert "📝" not in text
    assert "📍" not in text


def test_confirmation_templates():
    event = Event(
        title="Game Night",
        date=dt.date(2025, 3, 1),
        time=dt.time(18, 5),
        invitees=["+1"],
        location="Basement",
    )

    accepted = MessageTemplates.confirmation(RSVPResponse.ACCEPTED, event)
    declined = MessageTemplates.confirmation(RSVPResponse.DECLINED, event)

    assert "📅 2025-03-01 at 18:05" in accepted
    assert "📍 Basement" in accepted
    assert "We're sorry you can't make it to:" in declined
    assert "*Game Night*" in declined
