"""Invitation fan-out and reply reconciliation.

Each (event, recipient) pair moves ``pending -> accepted`` or
``pending -> declined`` exactly once. Replies that arrive after the transition
no longer find a pending row and are ignored.
"""

import asyncio
import logging

from event_rsvp.errors import (
    DeliveryError,
    EventNotFoundError,
    InvitationsAlreadySentError,
    MessagingUnavailableError,
)
from event_rsvp.invitations.classifier import ReplyClassification, matched_pattern
from event_rsvp.invitations.dtos import RSVP, InvitationReport, RSVPResponse, SendResult
from event_rsvp.invitations.repository import EventStore, RSVPStore
from event_rsvp.messaging.base import InboundMessage, MessagingGateway
from event_rsvp.messaging.templates import MessageTemplates

logger = logging.getLogger(__name__)


class SendThrottle:
    """Fixed pause between two consecutive sends.

    Setting ``stop_event`` cuts a pending pause short, which lets shutdown
    proceed without waiting out the interval.
    """

    def __init__(self, interval_seconds: float, stop_event: asyncio.Event | None = None) -> None:
        self.interval_seconds = interval_seconds
        self.stop_event = stop_event or asyncio.Event()

    async def wait(self) -> None:
        if self.interval_seconds <= 0 or self.stop_event.is_set():
            return
        try:
            await asyncio.wait_for(self.stop_event.wait(), timeout=self.interval_seconds)
        except TimeoutError:
            pass


class InvitationDispatcher:
    def __init__(
        self,
        event_store: EventStore,
        rsvp_store: RSVPStore,
        gateway: MessagingGateway,
        throttle: SendThrottle | None = None,
    ) -> None:
        self.event_store = event_store
        self.rsvp_store = rsvp_store
        self.gateway = gateway
        self.throttle = throttle or SendThrottle(interval_seconds=0)

    async def send_invitations(self, event_id: str) -> InvitationReport:
        """Create pending RSVPs for every invitee and send each an invitation.

        Raises:
            EventNotFoundError: the event does not exist.
            MessagingUnavailableError: the gateway is not ready.
            InvitationsAlreadySentError: invitations went out before.
        """
        event = self.event_store.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)

        if not self.gateway.is_ready():
            raise MessagingUnavailableError()

        # claimed before the first await; a concurrent send for the same event fails here
        if not self.event_store.begin_sending(event.id):
            raise InvitationsAlreadySentError(event_id)

        results: list[SendResult] = []
        try:
            self.rsvp_store.create_for_event(event.id, event.invitees)
            text = MessageTemplates.invitation(event)

            for position, phone_number in enumerate(event.invitees):
                if position > 0:
                    await self.throttle.wait()
                try:
                    message_id = await self.gateway.send(phone_number, text)
                    results.append(SendResult(phone_number=phone_number, success=True, message_id=message_id))
                except DeliveryError as e:
                    logger.error(f"Error sending invitation for event {event.id} to {phone_number}: {e.reason}")
                    results.append(SendResult(phone_number=phone_number, success=False, error=e.reason))
        finally:
            self.event_store.mark_sent(event.id)

        successful = sum(1 for result in results if result.success)
        logger.info(f"Invitations for event {event.id}: {successful}/{len(results)} delivered")
        return InvitationReport(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            results=results,
        )

    async def handle_inbound_reply(
        self,
        sender_id: str,
        raw_text: str,
        contact_name: str | None = None,
        is_group_message: bool = False,
    ) -> list[RSVP]:
        """Apply a reply to every pending RSVP of its sender.

        Returns the RSVPs that transitioned; empty when the reply was ignored.
        """
        if is_group_message:
            return []

        pending = self.rsvp_store.pending_for_recipient(sender_id)
        if not pending:
            logger.info(f"No pending RSVPs found for {sender_id}")
            return []

        verdict, pattern = matched_pattern(raw_text)
        if verdict == ReplyClassification.UNRECOGNIZED:
            logger.info(f"Could not parse RSVP response from {sender_id}: {raw_text!r}")
            return []

        outcome = RSVPResponse(verdict.value)
        if len(pending) > 1:
            logger.warning(
                "Reply from %s applies to %d pending events: %s",
                sender_id,
                len(pending),
                ", ".join(rsvp.event_id for rsvp in pending),
            )

        updated: list[RSVP] = []
        for rsvp in pending:
            result = self.rsvp_store.update_response(
                rsvp.event_id,
                sender_id,
                outcome,
                contact_name=contact_name,
                raw_message=raw_text,
            )
            if result is not None:
                updated.append(result)

        # every transition is recorded before any confirmation goes out
        for rsvp in updated:
            event = self.event_store.get(rsvp.event_id)
            if event is None:
                continue
            try:
                await self.gateway.send(sender_id, MessageTemplates.confirmation(outcome, event))
            except DeliveryError as e:
                logger.error(f"Confirmation to {sender_id} for event {event.id} failed: {e.reason}")

        logger.info(f"RSVP processed for {sender_id}: {outcome.value} (matched {pattern!r})")
        return updated

    async def consume(self, inbound: asyncio.Queue[InboundMessage]) -> None:
        """Process inbound messages until cancelled."""
        while True:
            message = await inbound.get()
            try:
                await self.handle_inbound_reply(
                    sender_id=message.sender_id,
                    raw_text=message.text,
                    contact_name=message.contact_name,
                    is_group_message=message.is_group_message,
                )
                await self.gateway.mark_as_read(message.message_id)
            except Exception as e:
                logger.error(f"Error handling message {message.message_id}: {e}", exc_info=True)
            finally:
                inbound.task_done()
