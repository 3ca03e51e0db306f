import datetime as dt
from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4


def _utcnow() -> datetime:
    return datetime.now(UTC)


def generate_event_id() -> str:
    return f"event_{uuid4().hex}"


def generate_rsvp_id() -> str:
    return f"rsvp_{uuid4().hex}"


class EventStatus(str, Enum):
    DRAFT = "draft"
    # reserved, nothing produces it yet
    SCHEDULED = "scheduled"
    SENT = "sent"


class RSVPResponse(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

    @property
    def label(self) -> str:
        return {
            RSVPResponse.ACCEPTED: "✅ Accepted",
            RSVPResponse.DECLINED: "❌ Declined",
            RSVPResponse.PENDING: "⏳ Pending",
        }[self]


@dataclass
class Event:
    """An occasion invitees are asked to RSVP to."""

    title: str
    date: dt.date
    time: dt.time
    invitees: list[str]
    description: str | None = None
    location: str | None = None
    created_by: str | None = None
    status: EventStatus = EventStatus.DRAFT
    id: str = field(default_factory=generate_event_id)
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class RSVP:
    """One recipient's response record for one event."""

    event_id: str
    phone_number: str
    contact_name: str = "Unknown"
    response: RSVPResponse = RSVPResponse.PENDING
    message: str = ""
    responded_at: datetime | None = None
    id: str = field(default_factory=generate_rsvp_id)
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def is_pending(self) -> bool:
        return self.response == RSVPResponse.PENDING

    def accept(self, message: str = "") -> None:
        self._respond(RSVPResponse.ACCEPTED, message)

    def decline(self, message: str = "") -> None:
        self._respond(RSVPResponse.DECLINED, message)

    def _respond(self, response: RSVPResponse, message: str) -> None:
        self.response = response
        self.message = message
        self.responded_at = _utcnow()


@dataclass(frozen=True)
class EventPatch:
    """The mutable fields of an event. ``None`` means "leave unchanged"."""

    title: str | None = None
    description: str | None = None
    date: dt.date | None = None
    time: dt.time | None = None
    location: str | None = None
    created_by: str | None = None

    def changes(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class RSVPContact:
    phone_number: str
    contact_name: str
    responded_at: datetime | None = None


@dataclass(frozen=True)
class RSVPStats:
    total: int = 0
    accepted: int = 0
    declined: int = 0
    pending: int = 0
    accepted_list: list[RSVPContact] = field(default_factory=list)
    declined_list: list[RSVPContact] = field(default_factory=list)
    pending_list: list[RSVPContact] = field(default_factory=list)


@dataclass(frozen=True)
class SendResult:
    """Outcome of sending one invitation to one recipient."""

    phone_number: str
    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class InvitationReport:
    total: int
    successful: int
    failed: int
    results: list[SendResult] = field(default_factory=list)
