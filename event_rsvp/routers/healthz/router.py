from fastapi import APIRouter, Depends
from pydantic import BaseModel

from event_rsvp.dependencies import get_messaging_gateway
from event_rsvp.messaging.base import MessagingGateway

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = "0.1.0"
    messaging: str


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    gateway: MessagingGateway = Depends(get_messaging_gateway),
) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running.
    """
    return HealthCheckResponse(
        status="healthy",
        messaging="ready" if gateway.is_ready() else "not ready",
    )
