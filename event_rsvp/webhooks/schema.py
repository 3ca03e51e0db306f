"""Subset of the WhatsApp Cloud API webhook payload that inbound replies need."""

from pydantic import BaseModel, ConfigDict, Field

from event_rsvp.messaging.base import InboundMessage


class WebhookModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ContactProfile(WebhookModel):
    name: str | None = None


class Contact(WebhookModel):
    wa_id: str
    profile: ContactProfile = ContactProfile()


class TextBody(WebhookModel):
    body: str


class Message(WebhookModel):
    id: str
    from_: str = Field(alias="from")
    timestamp: str | None = None
    type: str
    text: TextBody | None = None
    group_id: str | None = None


class ChangeValue(WebhookModel):
    messaging_product: str | None = None
    contacts: list[Contact] = []
    messages: list[Message] = []


class Change(WebhookModel):
    field: str
    value: ChangeValue = ChangeValue()


class Entry(WebhookModel):
    id: str | None = None
    changes: list[Change] = []


class WebhookPayload(WebhookModel):
    object: str | None = None
    entry: list[Entry] = []

    def inbound_messages(self) -> list[InboundMessage]:
        """Text messages in payload order; other message types are skipped."""
        messages: list[InboundMessage] = []
        for entry in self.entry:
            for change in entry.changes:
                if change.field != "messages":
                    continue
                names = {contact.wa_id: contact.profile.name for contact in change.value.contacts}
                for message in change.value.messages:
                    if message.type != "text" or message.text is None:
                        continue
                    messages.append(
                        InboundMessage(
                            message_id=message.id,
                            sender_id=message.from_,
                            text=message.text.body,
                            contact_name=names.get(message.from_) or "Unknown",
                            is_group_message=message.group_id is not None or message.from_.endswith("@g.us"),
                            timestamp=int(message.timestamp) if message.timestamp else None,
                        )
                    )
        return messages
