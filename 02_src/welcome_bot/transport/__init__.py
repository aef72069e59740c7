"""Transport module."""

from .transport import (
    HttpOutbound,
    IInboundTransport,
    IOutboundTransport,
    Outbox,
    QueueInbound,
    SendError,
)

__all__ = [
    "IInboundTransport",
    "IOutboundTransport",
    "QueueInbound",
    "Outbox",
    "HttpOutbound",
    "SendError",
]
