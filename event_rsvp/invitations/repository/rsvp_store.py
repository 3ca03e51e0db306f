"""Volatile RSVP store.

Rows live in a primary map keyed by RSVP id. A secondary index keyed by the
natural key ``(event_id, phone_number)`` gives O(1) lookups. The index is never
overwritten: creating RSVPs for a recipient that already has one for the same
event hands back the existing row, so no row can become unreachable.
"""

import logging
import threading

from event_rsvp.events import RSVPResponded, RSVPsCreated, log_domain_event
from event_rsvp.invitations.dtos import RSVP, RSVPContact, RSVPResponse, RSVPStats

logger = logging.getLogger(__name__)


class RSVPStore:
    def __init__(self) -> None:
        self._rsvps: dict[str, RSVP] = {}
        self._index: dict[tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def create_for_event(self, event_id: str, recipients: list[str]) -> list[RSVP]:
        """Create one pending RSVP per recipient and return one row per recipient.

        Recipients that already have an RSVP for this event get their existing
        row back unchanged.
        """
        rsvps: list[RSVP] = []
        created = 0

        with self._lock:
            for phone_number in recipients:
                rsvp_id = self._index.get((event_id, phone_number))
                if rsvp_id is not None:
                    rsvps.append(self._rsvps[rsvp_id])
                    continue

                rsvp = RSVP(event_id=event_id, phone_number=phone_number)
                self._rsvps[rsvp.id] = rsvp
                self._index[(event_id, phone_number)] = rsvp.id
                rsvps.append(rsvp)
                created += 1

        log_domain_event(
            logger,
            RSVPsCreated(event_id=event_id, created=created, reused=len(rsvps) - created),
            f"Created {created} RSVP records for event {event_id}",
        )
        return rsvps

    def get_by_event_and_recipient(self, event_id: str, recipient: str) -> RSVP | None:
        with self._lock:
            return self._get(event_id, recipient)

    def _get(self, event_id: str, recipient: str) -> RSVP | None:
        rsvp_id = self._index.get((event_id, recipient))
        if rsvp_id is None:
            return None
        return self._rsvps.get(rsvp_id)

    def list_for_event(self, event_id: str) -> list[RSVP]:
        with self._lock:
            return [rsvp for rsvp in self._rsvps.values() if rsvp.event_id == event_id]

    def update_response(
        self,
        event_id: str,
        recipient: str,
        outcome: RSVPResponse,
        contact_name: str | None = None,
        raw_message: str = "",
    ) -> RSVP | None:
        """Record an accept or decline for the recipient's RSVP to ``event_id``.

        Returns ``None`` (and logs a warning) when no such RSVP exists.
        """
        if outcome not in (RSVPResponse.ACCEPTED, RSVPResponse.DECLINED):
            raise ValueError(f"Cannot transition an RSVP to '{outcome}'")

        with self._lock:
            rsvp = self._get(event_id, recipient)
            if rsvp is None:
                logger.warning("RSVP not found for event %s and phone %s", event_id, recipient)
                return None

            if contact_name:
                rsvp.contact_name = contact_name

            if outcome == RSVPResponse.ACCEPTED:
                rsvp.accept(raw_message)
            else:
                rsvp.decline(raw_message)

        log_domain_event(
            logger,
            RSVPResponded(
                event_id=event_id,
                rsvp_id=rsvp.id,
                phone_number=recipient,
                response=outcome.value,
            ),
            f"RSVP updated for {recipient} on event {event_id}: {outcome.value}",
        )
        return rsvp

    def stats_for_event(self, event_id: str) -> RSVPStats:
        accepted: list[RSVPContact] = []
        declined: list[RSVPContact] = []
        pending: list[RSVPContact] = []

        rsvps = self.list_for_event(event_id)
        for rsvp in rsvps:
            if rsvp.response == RSVPResponse.ACCEPTED:
                accepted.append(RSVPContact(rsvp.phone_number, rsvp.contact_name, rsvp.responded_at))
            elif rsvp.response == RSVPResponse.DECLINED:
                declined.append(RSVPContact(rsvp.phone_number, rsvp.contact_name, rsvp.responded_at))
            else:
                pending.append(RSVPContact(rsvp.phone_number, rsvp.contact_name))

        return RSVPStats(
            total=len(rsvps),
            accepted=len(accepted),
            declined=len(declined),
            pending=len(pending),
            accepted_list=accepted,
            declined_list=declined,
            pending_list=pending,
        )

    def pending_for_recipient(self, recipient: str) -> list[RSVP]:
        """All pending RSVPs for ``recipient`` across every event."""
        with self._lock:
            return [
                rsvp
                for rsvp in self._rsvps.values()
                if rsvp.phone_number == recipient and rsvp.is_pending
            ]
