"""Dialogue module."""

from .dispatcher import Dispatcher
from .handlers import (
    GREETING,
    HANDLERS,
    REPROMPT,
    START_PROMPT,
    Handler,
    Transition,
    check_handlers,
    extract_text,
    handler_for,
    receive_user_name,
    start,
)

__all__ = [
    "Dispatcher",
    "Transition",
    "Handler",
    "HANDLERS",
    "START_PROMPT",
    "GREETING",
    "REPROMPT",
    "check_handlers",
    "extract_text",
    "handler_for",
    "start",
    "receive_user_name",
]
