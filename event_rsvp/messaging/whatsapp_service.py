import logging
import re
from typing import Protocol

import httpx

from event_rsvp.errors import DeliveryError
from event_rsvp.messaging.base import MessagingGateway
from event_rsvp.messaging.message_logger import MessageLogger, NoOpMessageLogger

logger = logging.getLogger(__name__)

GRAPH_API_URL = "https://graph.facebook.com"


class WhatsAppConfig(Protocol):
    whatsapp_access_token: str
    whatsapp_phone_number_id: str
    whatsapp_api_version: str


def format_phone_number(phone_number: str) -> str:
    """Strip everything but digits, the format the Cloud API expects."""
    return re.sub(r"\D", "", phone_number)


def _provider_error(response: httpx.Response) -> str:
    try:
        message = response.json().get("error", {}).get("message")
    except ValueError:
        message = None
    return message or "Failed to send message"


class WhatsAppCloudGateway(MessagingGateway):
    """Messaging gateway backed by Meta's WhatsApp Business Cloud API."""

    def __init__(
        self,
        config: WhatsAppConfig,
        message_logger: MessageLogger | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        super().__init__()
        self._config = config
        self._http_client_class = http_client_class
        self.message_logger = message_logger or NoOpMessageLogger()

    @property
    def base_url(self) -> str:
        return f"{GRAPH_API_URL}/{self._config.whatsapp_api_version}"

    def _client(self) -> httpx.AsyncClient:
        return self._http_client_class(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self._config.whatsapp_access_token}",
                "Content-Type": "application/json",
            },
        )

    def is_ready(self) -> bool:
        return bool(self._config.whatsapp_access_token and self._config.whatsapp_phone_number_id)

    async def validate_connection(self) -> None:
        if not self._config.whatsapp_access_token:
            raise ValueError("WhatsApp access token not configured")
        if not self._config.whatsapp_phone_number_id:
            raise ValueError("WhatsApp phone number ID not configured")

        async with self._client() as client:
            response = await client.get(f"/{self._config.whatsapp_phone_number_id}")
            response.raise_for_status()
            data = response.json()

        logger.info(
            "WhatsApp Business API connection validated: %s (%s)",
            data.get("display_phone_number"),
            data.get("verified_name"),
        )

    async def send(self, recipient: str, text: str) -> str:
        to = format_phone_number(recipient)
        log_uuid = await self.message_logger.log_message_attempt(to_address=to, body=text)

        try:
            async with self._client() as client:
                response = await client.post(
                    f"/{self._config.whatsapp_phone_number_id}/messages",
                    json={
                        "messaging_product": "whatsapp",
                        "to": to,
                        "type": "text",
                        "text": {"body": text},
                    },
                )
                response.raise_for_status()
                message_id = response.json()["messages"][0]["id"]
        except httpx.HTTPStatusError as e:
            reason = _provider_error(e.response)
            await self.message_logger.log_message_failure(log_uuid=log_uuid, error_message=reason)
            raise DeliveryError(recipient, reason) from e
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            await self.message_logger.log_message_failure(log_uuid=log_uuid, error_message=str(e))
            raise DeliveryError(recipient, str(e) or type(e).__name__) from e

        await self.message_logger.log_message_success(log_uuid=log_uuid, provider_message_id=message_id)
        return message_id

    async def mark_as_read(self, message_id: str) -> None:
        try:
            async with self._client() as client:
                response = await client.post(
                    f"/{self._config.whatsapp_phone_number_id}/messages",
                    json={
                        "messaging_product": "whatsapp",
                        "status": "read",
                        "message_id": message_id,
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error marking message {message_id} as read: {e}")
