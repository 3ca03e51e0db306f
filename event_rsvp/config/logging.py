import json
import logging
import sys
from logging import StreamHandler

from event_rsvp.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# record attributes set through ``extra=`` that are rendered after the message
STRUCTURED_FIELDS = ("domain_event", "delivery")


class StructuredFormatter(logging.Formatter):
    """Appends structured ``extra`` payloads to the line as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        for name in STRUCTURED_FIELDS:
            payload = getattr(record, name, None)
            if payload is not None:
                line = f"{line} {name}={json.dumps(payload, default=str, ensure_ascii=False)}"
        return line


def setup_logging() -> None:
    handler = StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(LOG_FORMAT))
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        handlers=[handler],
    )
    # one line per Graph API request is too chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
