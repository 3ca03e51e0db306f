import pytest
from pydantic import ValidationError

from event_rsvp.webhooks.schema import WebhookPayload


def payload_with(messages: list[dict], contacts: list[dict] | None = None, field: str = "messages") -> dict:
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "WABA_ID",
                "changes": [
                    {
                        "field": field,
                        "value": {
                            "messaging_product": "whatsapp",
                            "contacts": contacts or [],
                            "messages": messages,
                        },
                    }
                ],
            }
        ],
    }


def text(message_id: str, sender: str, body: str, **extra) -> dict:
    return {"id": message_id, "from": sender, "timestamp": "1700000000", "type": "text", "text": {"body": body}, **extra}


def test_extracts_text_messages_in_order():
    payload = WebhookPayload.model_validate(
        payload_with(
            [text("wamid.1", "15550000001", "yes"), text("wamid.2", "15550000002", "no")],
            contacts=[{"wa_id": "15550000001", "profile": {"name": "Alice"}}],
        )
    )

    messages = payload.inbound_messages()

    assert [message.message_id for message in messages] == ["wamid.1", "wamid.2"]
    assert messages[0].contact_name == "Alice"
    assert messages[0].timestamp == 1700000000
    assert messages[1].contact_name == "Unknown"


def test_skips_non_text_messages():
    image = {"id": "wamid.3", "from": "15550000001", "type": "image", "image": {"id": "media-1"}}
    payload = WebhookPayload.model_validate(payload_with([image, text("wamid.4", "15550000001", "ok")]))

    assert [message.message_id for message in payload.inbound_messages()] == ["wamid.4"]


def test_skips_changes_for_other_fields():
    payload = WebhookPayload.model_validate(
        payload_with([text("wamid.1", "15550000001", "yes")], field="account_update")
    )

    assert payload.inbound_messages() == []


def test_flags_group_messages():
    payload = WebhookPayload.model_validate(
        payload_with(
            [
                text("wamid.1", "15550000001", "yes", group_id="group-1"),
                text("wamid.2", "1203630@g.us", "yes"),
                text("wamid.3", "15550000001", "yes"),
            ]
        )
    )

    assert [message.is_group_message for message in payload.inbound_messages()] == [True, True, False]


def test_empty_payload():
    assert WebhookPayload.model_validate({}).inbound_messages() == []


def test_message_without_sender_is_invalid():
    with pytest.raises(ValidationError):
        WebhookPayload.model_validate(payload_with([{"id": "wamid.1", "type": "text", "text": {"body": "yes"}}]))
