"""Keyword classification of free-text RSVP replies.

Matching is substring containment on the lower-cased, stripped reply. The
accept patterns are always tried first, so a reply that contains both an
accept and a decline pattern counts as accepted.
"""

from enum import Enum


class ReplyClassification(str, Enum):
    ACCEPTED = "accepted"
    DECLINED = "declined"
    UNRECOGNIZED = "unrecognized"


ACCEPT_PATTERNS: tuple[str, ...] = (
    "accept",
    "accepted",
    "accepting",
    "yes",
    "yeah",
    "yep",
    "yup",
    "sure",
    "surely",
    "ok",
    "okay",
    "confirm",
    "confirmed",
    "attending",
    "will attend",
    "i'll be there",
    "i'll come",
    "count me in",
    "✅",
    "👍",
)

DECLINE_PATTERNS: tuple[str, ...] = (
    "decline",
    "declined",
    "no",
    "nope",
    "nah",
    "sorry",
    "apologies",
    "cannot",
    "can't",
    "cant",
    "unable",
    "not attending",
    "won't attend",
    "won't be there",
    "can't make it",
    "count me out",
    "❌",
    "👎",
)


def matched_pattern(text: str) -> tuple[ReplyClassification, str | None]:
    """Classify ``text`` and return the pattern that decided it."""
    normalized = text.lower().strip()

    for pattern in ACCEPT_PATTERNS:
        if pattern in normalized:
            return ReplyClassification.ACCEPTED, pattern

    for pattern in DECLINE_PATTERNS:
        if pattern in normalized:
            return ReplyClassification.DECLINED, pattern

    return ReplyClassification.UNRECOGNIZED, None


def classify(text: str) -> ReplyClassification:
    verdict, _ = matched_pattern(text)
    return verdict
