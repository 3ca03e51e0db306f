"""In-memory messaging gateway for testing - no WhatsApp account required."""

import asyncio
from dataclasses import dataclass

from event_rsvp.errors import DeliveryError
from event_rsvp.messaging.base import MessagingGateway


@dataclass
class SentMessage:
    recipient: str
    text: str
    message_id: str


class InMemoryMessagingGateway(MessagingGateway):
    """Records messages instead of sending them.

    Recipients listed in ``failing_recipients`` raise ``DeliveryError``.
    """

    def __init__(self, ready: bool = True, failing_recipients: set[str] | None = None):
        super().__init__()
        self.ready = ready
        self.failing_recipients = set(failing_recipients or ())
        self.sent: list[SentMessage] = []
        self.read: list[str] = []

    def is_ready(self) -> bool:
        return self.ready

    async def send(self, recipient: str, text: str) -> str:
        # yield like a real network call would
        await asyncio.sleep(0)
        if recipient in self.failing_recipients:
            raise DeliveryError(recipient, "Recipient phone number not in allowed list")

        message_id = f"wamid.test-{len(self.sent) + 1}"
        self.sent.append(SentMessage(recipient=recipient, text=text, message_id=message_id))
        return message_id

    async def mark_as_read(self, message_id: str) -> None:
        self.read.append(message_id)

    def sent_to(self, recipient: str) -> list[str]:
        return [message.text for message in self.sent if message.recipient == recipient]
