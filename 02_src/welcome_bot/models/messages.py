"""Message-related data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class InboundMessage:
    """A message received from a conversation."""

    conversation_id: str
    text: str | None = None  # None when the message has no text payload
    received_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class OutboundMessage:
    """A reply sent to a conversation."""

    conversation_id: str
    text: str
    sent_at: datetime = field(default_factory=_utcnow)
