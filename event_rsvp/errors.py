"""Error taxonomy shared by the stores, the dispatcher and the HTTP layer."""


class EventRSVPError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EventValidationError(EventRSVPError):
    """Raised when event input breaks one or more rules.

    Every violated rule is collected in ``errors``, not just the first one.
    """

    status_code = 400

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Event validation failed: {', '.join(self.errors)}")


class EventNotFoundError(EventRSVPError):
    status_code = 404

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__("Event not found")


class InvitationsAlreadySentError(EventRSVPError):
    status_code = 409

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Invitations for event '{event_id}' have already been sent")


class MessagingUnavailableError(EventRSVPError):
    status_code = 503

    def __init__(self, message: str = "WhatsApp client is not ready. Please try again later.") -> None:
        super().__init__(message)


class DeliveryError(Exception):
    """A single message could not be delivered to one recipient."""

    def __init__(self, recipient: str, reason: str) -> None:
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Failed to send message to {recipient}: {reason}")
