"""Onboarding state machine: one handler per dialogue state."""

from dataclasses import dataclass
from typing import Callable, Mapping

from ..models import (
    STATE_TYPES,
    AwaitingUserName,
    DialogueState,
    InboundMessage,
    ReceivedUserName,
    Start,
)

START_PROMPT = "Давай начнем! Скажи мне, как мне тебя называть?"
GREETING = "Приятно познакомиться, {user_name}!"
REPROMPT = "Пришли мне обычный текст!"


@dataclass(frozen=True)
class Transition:
    """Result of a handler: state to persist and reply to send."""

    next_state: DialogueState
    reply: str


Handler = Callable[[DialogueState, InboundMessage], Transition]


def extract_text(message: InboundMessage) -> str | None:
    """Get usable text of a message.

    A message without a text payload and one with empty text are both
    reported as None.
    """
    if message.text is None:
        return None
    if message.text == "":
        return None
    return message.text


def _expect(state: DialogueState, cls: type) -> None:
    if not isinstance(state, cls):
        raise TypeError(f"{cls.__name__} handler invoked for {state!r}")


def start(state: DialogueState, message: InboundMessage) -> Transition:
    """Any message starts onboarding by asking for a name."""
    _expect(state, Start)
    return Transition(next_state=AwaitingUserName(), reply=START_PROMPT)


def receive_user_name(state: DialogueState, message: InboundMessage) -> Transition:
    """Capture the first non-empty text verbatim as the user's name."""
    _expect(state, AwaitingUserName)

    text = extract_text(message)
    if text is None:
        return Transition(next_state=state, reply=REPROMPT)

    return Transition(
        next_state=ReceivedUserName(user_name=text),
        reply=GREETING.format(user_name=text),
    )


# ReceivedUserName is terminal: no continuation is defined yet.
HANDLERS: dict[type, Handler | None] = {
    Start: start,
    AwaitingUserName: receive_user_name,
    ReceivedUserName: None,
}


def check_handlers(handlers: Mapping[type, Handler | None]) -> None:
    """Ensure the table has exactly one entry per state variant."""
    missing = [cls.__name__ for cls in STATE_TYPES if cls not in handlers]
    unknown = [cls.__name__ for cls in handlers if cls not in STATE_TYPES]
    if missing or unknown:
        raise ValueError(
            f"Handler table must cover every state: missing={missing}, unknown={unknown}"
        )


def handler_for(
    state: DialogueState,
    handlers: Mapping[type, Handler | None] = HANDLERS,
) -> Handler | None:
    """Get the handler registered for a state, or None for terminal states."""
    try:
        return handlers[type(state)]
    except KeyError:
        raise TypeError(f"No handler entry for state {state!r}") from None


check_handlers(HANDLERS)
