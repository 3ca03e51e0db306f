"""Volatile event store."""

import datetime as dt
import logging
import threading

from event_rsvp.errors import EventValidationError
from event_rsvp.events import EventCreated, EventDeleted, EventMarkedSent, EventUpdated, log_domain_event
from event_rsvp.invitations.dtos import Event, EventPatch, EventStatus

logger = logging.getLogger(__name__)


def validate_event_fields(
    title: str | None,
    date: dt.date | None,
    time: dt.time | None,
    invitees: list[str] | None,
) -> list[str]:
    """Return every rule the given fields break, in a stable order."""
    errors: list[str] = []

    if not title or not title.strip():
        errors.append("Event title is required")

    if not date:
        errors.append("Event date is required")

    if not time:
        errors.append("Event time is required")

    if not invitees:
        errors.append("At least one invitee is required")

    return errors


def validate_event_patch(patch: EventPatch) -> list[str]:
    errors: list[str] = []
    if patch.title is not None and not patch.title.strip():
        errors.append("Event title is required")
    return errors


class EventStore:
    """In-memory map of events keyed by id, kept in insertion order."""

    def __init__(self) -> None:
        self._events: dict[str, Event] = {}
        # events whose invitations are currently going out
        self._sending: set[str] = set()
        self._lock = threading.Lock()

    def create(
        self,
        title: str | None,
        date: dt.date | None,
        time: dt.time | None,
        invitees: list[str] | None,
        description: str | None = None,
        location: str | None = None,
        created_by: str | None = None,
    ) -> Event:
        """Validate and store a new event.

        Raises:
            EventValidationError: listing every violated rule.
        """
        errors = validate_event_fields(title, date, time, invitees)
        if errors:
            logger.warning("Rejected event: %s", ", ".join(errors))
            raise EventValidationError(errors)

        event = Event(
            title=title,
            date=date,
            time=time,
            invitees=list(invitees),
            description=description,
            location=location,
            created_by=created_by,
        )
        with self._lock:
            self._events[event.id] = event

        log_domain_event(
            logger,
            EventCreated(event_id=event.id, title=event.title, invitee_count=len(event.invitees)),
            f"Event created: {event.id} - {event.title}",
        )
        return event

    def get(self, event_id: str) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def list_all(self) -> list[Event]:
        with self._lock:
            return list(self._events.values())

    def update(self, event_id: str, patch: EventPatch) -> Event | None:
        """Apply ``patch`` to an event; ``None`` if the event does not exist.

        Raises:
            EventValidationError: if the patch itself is invalid.
        """
        errors = validate_event_patch(patch)
        if errors:
            raise EventValidationError(errors)

        changes = patch.changes()
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                return None
            for name, value in changes.items():
                setattr(event, name, value)

        log_domain_event(
            logger,
            EventUpdated(event_id=event_id, fields=sorted(changes)),
            f"Event updated: {event_id}",
        )
        return event

    def delete(self, event_id: str) -> bool:
        with self._lock:
            deleted = self._events.pop(event_id, None) is not None

        if deleted:
            log_domain_event(logger, EventDeleted(event_id=event_id), f"Event deleted: {event_id}")
        return deleted

    def begin_sending(self, event_id: str) -> bool:
        """Claim an event for sending its invitations.

        Returns ``False`` when the event is missing or already sent, and when
        another sender holds the claim. ``mark_sent`` releases it.
        """
        with self._lock:
            event = self._events.get(event_id)
            if event is None or event.status == EventStatus.SENT or event_id in self._sending:
                return False
            self._sending.add(event_id)
            return True

    def mark_sent(self, event_id: str) -> None:
        with self._lock:
            self._sending.discard(event_id)
            event = self._events.get(event_id)
            if event is None:
                return
            event.status = EventStatus.SENT

        log_domain_event(logger, EventMarkedSent(event_id=event_id), f"Event marked as sent: {event_id}")
