import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class InboundMessage:
    """A text message received from a recipient."""

    message_id: str
    sender_id: str
    text: str
    contact_name: str = "Unknown"
    is_group_message: bool = False
    timestamp: int | None = None


class MessagingGateway(ABC):
    """Delivers outbound text messages and owns the inbound message queue.

    Inbound messages are published onto ``inbound`` by whatever receives them
    (the webhook) and consumed by exactly one subscriber, the dispatcher.
    """

    def __init__(self) -> None:
        self.inbound: asyncio.Queue[InboundMessage] = asyncio.Queue()

    @abstractmethod
    def is_ready(self) -> bool:
        pass

    @abstractmethod
    async def send(self, recipient: str, text: str) -> str:
        """Send ``text`` to ``recipient`` and return the provider message id.

        Raises:
            DeliveryError: if the message could not be delivered.
        """
        pass

    async def mark_as_read(self, message_id: str) -> None:
        pass

    async def validate_connection(self) -> None:
        pass

    async def publish_inbound(self, message: InboundMessage) -> None:
        await self.inbound.put(message)
