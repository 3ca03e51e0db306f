from dataclasses import dataclass

from event_rsvp.config.settings import Settings
from event_rsvp.invitations.dispatcher import InvitationDispatcher, SendThrottle
from event_rsvp.invitations.repository import EventStore, RSVPStore
from event_rsvp.messaging import MessagingGateway, create_messaging_gateway


@dataclass
class Services:
    """The process-wide collaborators, built once when the app starts."""

    event_store: EventStore
    rsvp_store: RSVPStore
    gateway: MessagingGateway
    dispatcher: InvitationDispatcher


def build_services(config: Settings, gateway: MessagingGateway | None = None) -> Services:
    event_store = EventStore()
    rsvp_store = RSVPStore()
    gateway = gateway or create_messaging_gateway(config)
    dispatcher = InvitationDispatcher(
        event_store=event_store,
        rsvp_store=rsvp_store,
        gateway=gateway,
        throttle=SendThrottle(interval_seconds=config.invitation_send_interval_seconds),
    )
    return Services(
        event_store=event_store,
        rsvp_store=rsvp_store,
        gateway=gateway,
        dispatcher=dispatcher,
    )
