import hashlib
import hmac
import json
import logging
from typing import Protocol

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from event_rsvp.config.settings import settings
from event_rsvp.dependencies import get_messaging_gateway
from event_rsvp.messaging.base import MessagingGateway
from event_rsvp.webhooks import urls
from event_rsvp.webhooks.schema import WebhookPayload

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "x-hub-signature-256"


# =============================================================================
# Protocols (interfaces) for dependency injection
# =============================================================================


class WebhookVerifier(Protocol):
    """Protocol for webhook signature verification."""

    def __call__(self, payload: bytes, headers: dict[str, str]) -> None:
        """Raise HTTPException(401) if the payload signature is not valid."""
        ...


# =============================================================================
# Default implementations
# =============================================================================


class MetaSignatureVerifier:
    """Checks the ``X-Hub-Signature-256`` HMAC Meta attaches to webhook calls.

    Verification is skipped when no app secret is configured.
    """

    def __init__(self, app_secret: str) -> None:
        self._app_secret = app_secret

    def __call__(self, payload: bytes, headers: dict[str, str]) -> None:
        if not self._app_secret:
            return

        signature = headers.get(SIGNATURE_HEADER, "")
        if not signature.startswith("sha256="):
            raise HTTPException(status_code=401, detail="Missing webhook signature")

        expected = hmac.new(self._app_secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
        if not hmac.compare_digest(signature.removeprefix("sha256="), expected):
            raise HTTPException(status_code=401, detail="Invalid webhook signature")


# =============================================================================
# Dependency providers (can be overridden in tests)
# =============================================================================


def get_webhook_verifier() -> WebhookVerifier:
    """Factory for webhook verifier. Override in tests."""
    return MetaSignatureVerifier(app_secret=settings.whatsapp_app_secret)


def get_webhook_verify_token() -> str:
    return settings.webhook_verify_token


# =============================================================================
# Webhook endpoints
# =============================================================================


@router.get(urls.WHATSAPP_WEBHOOK_URL)
async def verify_webhook(
    mode: str | None = Query(None, alias="hub.mode"),
    token: str | None = Query(None, alias="hub.verify_token"),
    challenge: str | None = Query(None, alias="hub.challenge"),
    verify_token: str = Depends(get_webhook_verify_token),
):
    """
    Meta's subscription handshake: echo the challenge back when the verify token matches.
    """
    if mode == "subscribe" and token == verify_token:
        logger.info("Webhook verified successfully")
        return PlainTextResponse(challenge or "")

    logger.warning("Webhook verification failed: invalid token or mode")
    return JSONResponse(
        status_code=403,
        content={"success": False, "message": "Webhook verification failed"},
    )


@router.post(urls.WHATSAPP_WEBHOOK_URL)
async def receive_webhook(
    request: Request,
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    gateway: MessagingGateway = Depends(get_messaging_gateway),
) -> dict[str, bool]:
    """
    Receive WhatsApp notifications and queue every inbound text message for the dispatcher.

    Always answers 200 once the signature is accepted, so Meta does not retry
    deliveries we cannot use.
    """
    body = await request.body()
    verifier(body, {SIGNATURE_HEADER: request.headers.get(SIGNATURE_HEADER, "")})

    try:
        payload = WebhookPayload.model_validate(json.loads(body))
        messages = payload.inbound_messages()
    except ValueError as e:
        logger.error(f"Ignoring malformed webhook payload: {e}")
        return {"success": True}

    for message in messages:
        logger.info(f"Queueing message {message.message_id} from {message.sender_id}")
        await gateway.publish_inbound(message)

    if not messages:
        logger.info(f"Webhook carried no text messages ({payload.object})")

    return {"success": True}
