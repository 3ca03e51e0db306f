from event_rsvp.config.settings import Settings, settings
from event_rsvp.messaging.base import InboundMessage, MessagingGateway
from event_rsvp.messaging.message_logger import LoggingMessageLogger
from event_rsvp.messaging.templates import MessageTemplates
from event_rsvp.messaging.whatsapp_service import WhatsAppCloudGateway


def create_messaging_gateway(config: Settings = settings) -> MessagingGateway:
    return WhatsAppCloudGateway(config=config, message_logger=LoggingMessageLogger())


__all__ = [
    "InboundMessage",
    "MessagingGateway",
    "MessageTemplates",
    "create_messaging_gateway",
]
