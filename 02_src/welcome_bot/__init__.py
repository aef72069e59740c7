"""Welcome Bot: onboarding dialogue engine."""

from .app import Application, IApplication
from .config import Settings, load_settings
from .dialogue import Dispatcher, Transition
from .models import (
    AwaitingUserName,
    DialogueState,
    InboundMessage,
    OutboundMessage,
    ReceivedUserName,
    Start,
)
from .storage import (
    IStateStorage,
    InMemoryStateStorage,
    SqliteStateStorage,
    StoreError,
)
from .transport import (
    HttpOutbound,
    IInboundTransport,
    IOutboundTransport,
    Outbox,
    QueueInbound,
    SendError,
)

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    "load_settings",
    # Models
    "DialogueState",
    "Start",
    "AwaitingUserName",
    "ReceivedUserName",
    "InboundMessage",
    "OutboundMessage",
    # Components
    "IStateStorage",
    "SqliteStateStorage",
    "InMemoryStateStorage",
    "StoreError",
    "IInboundTransport",
    "IOutboundTransport",
    "QueueInbound",
    "Outbox",
    "HttpOutbound",
    "SendError",
    "Dispatcher",
    "Transition",
]
