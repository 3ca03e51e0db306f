from fastapi import APIRouter, Depends
from pydantic import BaseModel

from event_rsvp.dependencies import get_event_store, get_messaging_gateway, get_rsvp_store
from event_rsvp.invitations.repository import EventStore, RSVPStore
from event_rsvp.invitations.schemas import ApiResponse
from event_rsvp.messaging.base import MessagingGateway

router = APIRouter()

STATS_URL = "/stats"


class RSVPTotals(BaseModel):
    total: int = 0
    accepted: int = 0
    declined: int = 0
    pending: int = 0


class ServiceStats(BaseModel):
    events: int
    rsvps: RSVPTotals
    messaging: str


@router.get(STATS_URL, response_model=ApiResponse[ServiceStats], response_model_exclude_none=True)
async def get_stats(
    event_store: EventStore = Depends(get_event_store),
    rsvp_store: RSVPStore = Depends(get_rsvp_store),
    gateway: MessagingGateway = Depends(get_messaging_gateway),
) -> ApiResponse[ServiceStats]:
    """
    RSVP totals summed over every stored event.
    """
    events = event_store.list_all()
    totals = RSVPTotals()
    for event in events:
        stats = rsvp_store.stats_for_event(event.id)
        totals.total += stats.total
        totals.accepted += stats.accepted
        totals.declined += stats.declined
        totals.pending += stats.pending

    return ApiResponse(
        data=ServiceStats(
            events=len(events),
            rsvps=totals,
            messaging="ready" if gateway.is_ready() else "not ready",
        )
    )
