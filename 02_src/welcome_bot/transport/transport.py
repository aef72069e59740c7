"""Inbound and outbound transport implementations."""

import asyncio
from typing import AsyncIterator, Protocol

import httpx

from ..logging_config import get_logger
from ..models import InboundMessage, OutboundMessage

logger = get_logger(__name__)


class SendError(RuntimeError):
    """A reply could not be delivered."""


class IInboundTransport(Protocol):
    """Lazy, unbounded sequence of inbound messages."""

    def __aiter__(self) -> AsyncIterator[InboundMessage]:
        ...


class IOutboundTransport(Protocol):
    """Delivery of reply texts to conversations."""

    async def send(self, conversation_id: str, text: str) -> None:
        """Send a reply. Raises SendError if it could not be delivered."""
        ...


class QueueInbound:
    """Inbound transport fed by put() and ended by close()."""

    _CLOSED = object()

    def __init__(self, maxsize: int = 0):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def put(self, message: InboundMessage) -> None:
        """Queue a message for dispatch."""
        if self._closed:
            raise RuntimeError("Inbound transport closed")
        await self._queue.put(message)

    def close(self) -> None:
        """Stop accepting messages; already queued ones are still yielded."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(self._CLOSED)

    def __aiter__(self) -> "QueueInbound":
        return self

    async def __anext__(self) -> InboundMessage:
        item = await self._queue.get()
        if item is self._CLOSED:
            raise StopAsyncIteration
        return item


class Outbox:
    """Outbound transport that keeps replies in memory per conversation."""

    def __init__(self):
        self._replies: dict[str, list[OutboundMessage]] = {}

    async def send(self, conversation_id: str, text: str) -> None:
        """Record a reply."""
        self._replies.setdefault(conversation_id, []).append(
            OutboundMessage(conversation_id=conversation_id, text=text)
        )

    def get_replies(self, conversation_id: str) -> list[OutboundMessage]:
        """Get replies sent to a conversation, oldest first."""
        return list(self._replies.get(conversation_id, []))

    def clear(self) -> None:
        """Forget all replies."""
        self._replies.clear()


class HttpOutbound:
    """Outbound transport posting replies to a webhook."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._client = client or httpx.AsyncClient()

    async def send(self, conversation_id: str, text: str) -> None:
        """POST the reply to the webhook."""
        try:
            response = await self._client.post(
                self._webhook_url,
                json={"conversation_id": conversation_id, "text": text},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise SendError(f"Failed to send reply to {conversation_id}: {e}") from e

        if response.is_error:
            raise SendError(
                f"Reply webhook returned {response.status_code} for {conversation_id}"
            )

        logger.debug("Reply delivered to %s", conversation_id)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
