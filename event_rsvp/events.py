"""
Domain events for the event RSVP system.

Every mutation of the event and RSVP stores emits one of these records. They
are written to the application log as structured data (``extra["domain_event"]``)
so that log shippers can index them without parsing the message text.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import ClassVar


@dataclass(kw_only=True)
class DomainEvent:
    """Base domain event."""

    event_type: ClassVar[str] = ""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        data["event_type"] = self.event_type
        return data


@dataclass
class EventCreated(DomainEvent):
    """Fired when a new event is stored."""

    event_type: ClassVar[str] = "event.created"

    event_id: str
    title: str
    invitee_count: int


@dataclass
class EventUpdated(DomainEvent):
    """Fired when fields of an event are patched."""

    event_type: ClassVar[str] = "event.updated"

    event_id: str
    fields: list[str]


@dataclass
class EventDeleted(DomainEvent):
    event_type: ClassVar[str] = "event.deleted"

    event_id: str


@dataclass
class EventMarkedSent(DomainEvent):
    event_type: ClassVar[str] = "event.sent"

    event_id: str


@dataclass
class RSVPsCreated(DomainEvent):
    """Fired when pending RSVP rows are created for an event's invitees."""

    event_type: ClassVar[str] = "rsvp.created"

    event_id: str
    created: int
    reused: int


@dataclass
class RSVPResponded(DomainEvent):
    """Fired when a pending RSVP transitions to accepted or declined."""

    event_type: ClassVar[str] = "rsvp.responded"

    event_id: str
    rsvp_id: str
    phone_number: str
    response: str


def log_domain_event(logger: logging.Logger, event: DomainEvent, message: str) -> None:
    logger.info(message, extra={"domain_event": event.to_dict()})
