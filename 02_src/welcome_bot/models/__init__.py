"""Core data models for Welcome Bot."""

from .dialogue import (
    STATE_FORMAT_VERSION,
    STATE_TYPES,
    AwaitingUserName,
    DialogueState,
    ReceivedUserName,
    Start,
    decode_state,
    default_state,
    encode_state,
    state_from_dict,
    state_tag,
    state_to_dict,
)
from .messages import InboundMessage, OutboundMessage

__all__ = [
    # Dialogue
    "DialogueState",
    "Start",
    "AwaitingUserName",
    "ReceivedUserName",
    "STATE_TYPES",
    "STATE_FORMAT_VERSION",
    "default_state",
    "state_tag",
    "state_to_dict",
    "state_from_dict",
    "encode_state",
    "decode_state",
    # Messages
    "InboundMessage",
    "OutboundMessage",
]
