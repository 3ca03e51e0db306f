import datetime as dt
from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient

from event_rsvp.dependencies import get_dispatcher, get_event_store, get_messaging_gateway, get_rsvp_store
from event_rsvp.invitations.dispatcher import InvitationDispatcher
from event_rsvp.invitations.repository import EventStore, RSVPStore
from event_rsvp.main import app
from event_rsvp.messaging.tests.inmemory_models import InMemoryMessagingGateway
from event_rsvp.tests.constants import ALICE, BOB


@pytest.fixture
def event_store() -> EventStore:
    return EventStore()


@pytest.fixture
def rsvp_store() -> RSVPStore:
    return RSVPStore()


@pytest.fixture
def gateway() -> InMemoryMessagingGateway:
    return InMemoryMessagingGateway()


@pytest.fixture
def dispatcher(event_store, rsvp_store, gateway) -> InvitationDispatcher:
    return InvitationDispatcher(event_store=event_store, rsvp_store=rsvp_store, gateway=gateway)


@pytest.fixture
def make_event(event_store):
    """Create a valid event, overriding any field by keyword."""

    def _make_event(**overrides):
        fields = {
            "title": "Team Dinner",
            "date": dt.date(2025, 12, 20),
            "time": dt.time(19, 0),
            "invitees": [ALICE, BOB],
            "location": "Main Hall",
        }
        fields.update(overrides)
        return event_store.create(**fields)

    return _make_event


@pytest.fixture
def client_factory(event_store, rsvp_store, gateway, dispatcher):
    """Build a test client wired to the fixture stores and gateway.

    ``overrides`` maps extra dependency providers to replacements.
    """

    @asynccontextmanager
    async def _client_factory(overrides: dict | None = None):
        app.dependency_overrides[get_event_store] = lambda: event_store
        app.dependency_overrides[get_rsvp_store] = lambda: rsvp_store
        app.dependency_overrides[get_messaging_gateway] = lambda: gateway
        app.dependency_overrides[get_dispatcher] = lambda: dispatcher
        app.dependency_overrides.update(overrides or {})

        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return _client_factory


@pytest.fixture
async def client(client_factory):
    """Create a test client."""
    async with client_factory() as ac:
        yield ac
