from fastapi import APIRouter

from .features.events.router import router as events_router

router = APIRouter()

router.include_router(events_router)
