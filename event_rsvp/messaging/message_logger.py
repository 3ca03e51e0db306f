import logging
from abc import ABC, abstractmethod
from uuid import UUID, uuid4


class MessageLogger(ABC):
    """Abstract base class for recording outbound message deliveries."""

    @abstractmethod
    async def log_message_attempt(self, to_address: str, body: str) -> UUID:
        """
        Record a delivery attempt before sending.

        Returns:
            UUID identifying the attempt in later success/failure calls
        """
        pass

    @abstractmethod
    async def log_message_success(self, log_uuid: UUID, provider_message_id: str) -> None:
        pass

    @abstractmethod
    async def log_message_failure(self, log_uuid: UUID, error_message: str) -> None:
        pass


class LoggingMessageLogger(MessageLogger):
    """Writes delivery records to the application log."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("event_rsvp.messaging.deliveries")

    async def log_message_attempt(self, to_address: str, body: str) -> UUID:
        log_uuid = uuid4()
        self._logger.info(
            "Sending message to %s",
            to_address,
            extra={"delivery": {"log_uuid": str(log_uuid), "to": to_address, "length": len(body)}},
        )
        return log_uuid

    async def log_message_success(self, log_uuid: UUID, provider_message_id: str) -> None:
        self._logger.info(
            "Message sent successfully (%s)",
            provider_message_id,
            extra={"delivery": {"log_uuid": str(log_uuid), "status": "sent", "message_id": provider_message_id}},
        )

    async def log_message_failure(self, log_uuid: UUID, error_message: str) -> None:
        self._logger.error(
            "Message delivery failed: %s",
            error_message,
            extra={"delivery": {"log_uuid": str(log_uuid), "status": "failed", "error": error_message}},
        )


class NoOpMessageLogger(MessageLogger):
    """No-op implementation for testing or when delivery logging is disabled."""

    async def log_message_attempt(self, to_address: str, body: str) -> UUID:
        return uuid4()

    async def log_message_success(self, log_uuid: UUID, provider_message_id: str) -> None:
        pass

    async def log_message_failure(self, log_uuid: UUID, error_message: str) -> None:
        pass
