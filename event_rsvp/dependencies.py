"""FastAPI dependency providers. Override these in tests."""

from fastapi import Request

from event_rsvp.invitations.dispatcher import InvitationDispatcher
from event_rsvp.invitations.repository import EventStore, RSVPStore
from event_rsvp.messaging.base import MessagingGateway
from event_rsvp.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_event_store(request: Request) -> EventStore:
    return get_services(request).event_store


def get_rsvp_store(request: Request) -> RSVPStore:
    return get_services(request).rsvp_store


def get_messaging_gateway(request: Request) -> MessagingGateway:
    return get_services(request).gateway


def get_dispatcher(request: Request) -> InvitationDispatcher:
    return get_services(request).dispatcher
