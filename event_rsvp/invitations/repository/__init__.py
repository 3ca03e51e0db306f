from .event_store import EventStore
from .rsvp_store import RSVPStore

__all__ = [
    "EventStore",
    "RSVPStore",
]
