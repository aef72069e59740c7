"""Application bootstrap and lifecycle management."""

import asyncio
from typing import Protocol

from .config import Settings, load_settings
from .dialogue import Dispatcher
from .logging_config import get_logger
from .models import InboundMessage
from .storage import SqliteStateStorage
from .transport import HttpOutbound, IOutboundTransport, Outbox, QueueInbound

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order, finishing in-flight messages."""
        ...

    async def reset(self) -> None:
        """Reset data between test runs."""
        ...

    async def submit(self, message: InboundMessage) -> None:
        """Queue an inbound message for dispatch."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(self, settings: Settings | None = None, db_path: str | None = None):
        self._settings = settings or load_settings()
        self._db_path = db_path if db_path is not None else self._settings.db_path

        # Components (will be initialized in start())
        self._storage: SqliteStateStorage | None = None
        self._outbound: IOutboundTransport | None = None
        self._inbound: QueueInbound | None = None
        self._dispatcher: Dispatcher | None = None
        self._dispatch_task: asyncio.Task | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Launching bot...")

        # 1. Storage (no dependencies)
        self._storage = SqliteStateStorage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. Outbound transport
        if self._settings.reply_webhook_url:
            self._outbound = HttpOutbound(
                self._settings.reply_webhook_url,
                timeout=self._settings.send_timeout,
            )
            logger.info("Replies go to %s", self._settings.reply_webhook_url)
        else:
            self._outbound = Outbox()
            logger.info("Replies kept in outbox")

        # 3. Inbound transport
        self._inbound = QueueInbound()

        # 4. Dispatcher (depends on Storage + Outbound)
        self._dispatcher = Dispatcher(self._storage, self._outbound)
        self._dispatch_task = asyncio.create_task(
            self._dispatcher.dispatch(self._inbound)
        )
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order, finishing in-flight messages."""
        logger.info("Stopping application")

        # Queued messages are still dispatched after close()
        if self._inbound:
            self._inbound.close()
        if self._dispatch_task:
            await self._dispatch_task
            self._dispatch_task = None
        if self._dispatcher:
            await self._dispatcher.stop()
        if isinstance(self._outbound, HttpOutbound):
            await self._outbound.close()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Reset data between test runs."""
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")
        if isinstance(self._outbound, Outbox):
            self._outbound.clear()

    async def submit(self, message: InboundMessage) -> None:
        """Queue an inbound message for dispatch."""
        if not self._inbound or self._inbound.closed:
            raise RuntimeError("Application not accepting messages")
        await self._inbound.put(message)

    @property
    def accepting(self) -> bool:
        """Whether submit() will accept messages."""
        return self._inbound is not None and not self._inbound.closed

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def storage(self) -> SqliteStateStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def dispatcher(self) -> Dispatcher:
        """Get dispatcher instance."""
        if not self._dispatcher:
            raise RuntimeError("Application not started")
        return self._dispatcher

    @property
    def outbox(self) -> Outbox | None:
        """Get the outbox, or None when replies go to a webhook."""
        if not self._outbound:
            raise RuntimeError("Application not started")
        return self._outbound if isinstance(self._outbound, Outbox) else None
