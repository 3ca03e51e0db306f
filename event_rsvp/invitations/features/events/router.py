from fastapi import APIRouter, Depends, status

from event_rsvp.dependencies import get_dispatcher, get_event_store, get_rsvp_store
from event_rsvp.errors import EventNotFoundError
from event_rsvp.invitations.dispatcher import InvitationDispatcher
from event_rsvp.invitations.repository import EventStore, RSVPStore
from event_rsvp.invitations.schemas import (
    ApiResponse,
    EventCreateRequest,
    EventOut,
    EventUpdateRequest,
    InvitationReportOut,
    RSVPStatsOut,
)
from event_rsvp.invitations.urls import EVENT_DETAIL_URL, EVENT_RSVPS_URL, EVENT_SEND_URL, EVENTS_URL

router = APIRouter()


@router.post(
    EVENTS_URL,
    response_model=ApiResponse[EventOut],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    payload: EventCreateRequest,
    event_store: EventStore = Depends(get_event_store),
) -> ApiResponse[EventOut]:
    """
    Create a draft event. Title, date, time and at least one invitee are required;
    every missing one is reported in the 400 response.
    """
    event = event_store.create(
        title=payload.title,
        date=payload.date,
        time=payload.time,
        invitees=payload.invitees,
        description=payload.description,
        location=payload.location,
        created_by=payload.created_by,
    )
    return ApiResponse(message="Event created successfully", data=EventOut.model_validate(event))


@router.get(EVENTS_URL, response_model=ApiResponse[list[EventOut]], response_model_exclude_none=True)
async def list_events(
    event_store: EventStore = Depends(get_event_store),
) -> ApiResponse[list[EventOut]]:
    events = event_store.list_all()
    return ApiResponse(
        count=len(events),
        data=[EventOut.model_validate(event) for event in events],
    )


@router.get(EVENT_DETAIL_URL, response_model=ApiResponse[EventOut], response_model_exclude_none=True)
async def get_event(
    event_id: str,
    event_store: EventStore = Depends(get_event_store),
) -> ApiResponse[EventOut]:
    event = event_store.get(event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return ApiResponse(data=EventOut.model_validate(event))


@router.put(EVENT_DETAIL_URL, response_model=ApiResponse[EventOut], response_model_exclude_none=True)
async def update_event(
    event_id: str,
    payload: EventUpdateRequest,
    event_store: EventStore = Depends(get_event_store),
) -> ApiResponse[EventOut]:
    """
    Patch the mutable fields of an event. Invitees and status cannot be changed here.
    """
    event = event_store.update(event_id, payload.to_patch())
    if event is None:
        raise EventNotFoundError(event_id)
    return ApiResponse(message="Event updated successfully", data=EventOut.model_validate(event))


@router.delete(EVENT_DETAIL_URL, response_model=ApiResponse[None], response_model_exclude_none=True)
async def delete_event(
    event_id: str,
    event_store: EventStore = Depends(get_event_store),
) -> ApiResponse[None]:
    if not event_store.delete(event_id):
        raise EventNotFoundError(event_id)
    return ApiResponse(message="Event deleted successfully")


@router.post(EVENT_SEND_URL, response_model=ApiResponse[InvitationReportOut], response_model_exclude_none=True)
async def send_invitations(
    event_id: str,
    dispatcher: InvitationDispatcher = Depends(get_dispatcher),
) -> ApiResponse[InvitationReportOut]:
    """
    Create pending RSVPs and send the invitation to every invitee over WhatsApp.

    Individual delivery failures are reported per recipient and do not fail the request.
    """
    report = await dispatcher.send_invitations(event_id)
    return ApiResponse(message="Invitations sent", data=InvitationReportOut.model_validate(report))


@router.get(EVENT_RSVPS_URL, response_model=ApiResponse[RSVPStatsOut], response_model_exclude_none=True)
async def get_event_rsvps(
    event_id: str,
    event_store: EventStore = Depends(get_event_store),
    rsvp_store: RSVPStore = Depends(get_rsvp_store),
) -> ApiResponse[RSVPStatsOut]:
    if event_store.get(event_id) is None:
        raise EventNotFoundError(event_id)
    stats = rsvp_store.stats_for_event(event_id)
    return ApiResponse(data=RSVPStatsOut.model_validate(stats))
