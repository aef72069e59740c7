"""Dialogue state variants and their persisted encoding."""

import json
from dataclasses import dataclass
from typing import Union

STATE_FORMAT_VERSION = 1


@dataclass(frozen=True)
class Start:
    """Initial state; no name collected yet."""


@dataclass(frozen=True)
class AwaitingUserName:
    """Bot has asked for a name and waits for the reply."""


@dataclass(frozen=True)
class ReceivedUserName:
    """Name captured; terminal for the onboarding flow."""

    user_name: str


DialogueState = Union[Start, AwaitingUserName, ReceivedUserName]

STATE_TYPES: tuple[type, ...] = (Start, AwaitingUserName, ReceivedUserName)

_TAGS: dict[type, str] = {
    Start: "start",
    AwaitingUserName: "awaiting_user_name",
    ReceivedUserName: "received_user_name",
}
_TYPES_BY_TAG: dict[str, type] = {tag: cls for cls, tag in _TAGS.items()}


def default_state() -> DialogueState:
    """State of a conversation that has no stored record."""
    return Start()


def state_tag(state: DialogueState) -> str:
    """Get the stable tag of a state variant."""
    try:
        return _TAGS[type(state)]
    except KeyError:
        raise TypeError(f"Unknown dialogue state: {state!r}") from None


def state_to_dict(state: DialogueState) -> dict:
    """Convert a state to its versioned tagged-variant form."""
    data = {}
    if isinstance(state, ReceivedUserName):
        data["user_name"] = state.user_name

    return {
        "version": STATE_FORMAT_VERSION,
        "type": state_tag(state),
        "data": data,
    }


def state_from_dict(payload: dict) -> DialogueState:
    """
    Build a state from its versioned tagged-variant form.

    Raises:
        ValueError: On unknown version, unknown tag or malformed payload.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"State payload must be an object, got {type(payload).__name__}")

    version = payload.get("version")
    # bool is an int subclass; true must not pass for 1
    if type(version) is not int or version != STATE_FORMAT_VERSION:
        raise ValueError(f"Unsupported state format version: {version!r}")

    tag = payload.get("type")
    cls = _TYPES_BY_TAG.get(tag) if isinstance(tag, str) else None
    if cls is None:
        raise ValueError(f"Unknown state type: {tag!r}")

    data = payload.get("data", {})
    if not isinstance(data, dict):
        raise ValueError(f"State data must be an object, got {type(data).__name__}")

    if cls is ReceivedUserName:
        user_name = data.get("user_name")
        if not isinstance(user_name, str):
            raise ValueError("received_user_name requires a string user_name")
        return ReceivedUserName(user_name=user_name)

    return cls()


def encode_state(state: DialogueState) -> str:
    """Serialize a state for storage."""
    return json.dumps(state_to_dict(state), ensure_ascii=False)


def decode_state(raw: str) -> DialogueState:
    """
    Deserialize a stored state.

    Raises:
        ValueError: If the stored text is not a valid encoded state.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValueError(f"State payload is not valid JSON: {e}") from e
    return state_from_dict(payload)
