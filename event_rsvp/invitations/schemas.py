import datetime as dt
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from event_rsvp.invitations.dtos import EventPatch, EventStatus

T = TypeVar("T")


class CamelModel(BaseModel):
    """JSON uses camelCase keys; snake_case is accepted on input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    count: int | None = None
    data: T | None = None


class EventCreateRequest(CamelModel):
    # Required fields are checked by the event store so that every missing
    # one is reported together.
    title: str | None = None
    description: str | None = None
    date: dt.date | None = None
    time: dt.time | None = None
    location: str | None = None
    created_by: str | None = None
    invitees: list[str] = Field(default_factory=list)


class EventUpdateRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    date: dt.date | None = None
    time: dt.time | None = None
    location: str | None = None
    created_by: str | None = None

    def to_patch(self) -> EventPatch:
        return EventPatch(
            title=self.title,
            description=self.description,
            date=self.date,
            time=self.time,
            location=self.location,
            created_by=self.created_by,
        )


class EventOut(CamelModel):
    id: str
    title: str
    description: str | None = None
    date: dt.date
    time: dt.time
    location: str | None = None
    created_by: str | None = None
    invitees: list[str]
    status: EventStatus
    created_at: dt.datetime


class RSVPContactOut(CamelModel):
    phone_number: str
    contact_name: str
    responded_at: dt.datetime | None = None


class RSVPStatsOut(CamelModel):
    total: int
    accepted: int
    declined: int
    pending: int
    accepted_list: list[RSVPContactOut]
    declined_list: list[RSVPContactOut]
    pending_list: list[RSVPContactOut]


class SendResultOut(CamelModel):
    phone_number: str
    success: bool
    message_id: str | None = None
    error: str | None = None


class InvitationReportOut(CamelModel):
    total: int
    successful: int
    failed: int
    results: list[SendResultOut]
