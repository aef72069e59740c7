"""Dispatcher routing inbound messages to state handlers."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping

from ..logging_config import get_logger
from ..models import InboundMessage, state_tag
from ..storage import IStateStorage, StoreError
from ..transport import IInboundTransport, IOutboundTransport, SendError
from .handlers import HANDLERS, Handler, Transition, check_handlers, handler_for

logger = get_logger(__name__)


class Dispatcher:
    """Runs load -> transition -> persist -> reply cycles.

    Cycles for one conversation run one at a time in arrival order;
    cycles for different conversations run concurrently.
    """

    def __init__(
        self,
        storage: IStateStorage,
        outbound: IOutboundTransport,
        handlers: Mapping[type, Handler | None] | None = None,
    ):
        self._storage = storage
        self._outbound = outbound
        self._handlers = HANDLERS if handlers is None else handlers
        check_handlers(self._handlers)

        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_refs: dict[str, int] = {}
        self._tasks: set[asyncio.Task] = set()
        self._running = False

    @property
    def in_flight(self) -> int:
        """Number of cycles started by dispatch() and not yet finished."""
        return len(self._tasks)

    @asynccontextmanager
    async def _conversation_lock(self, conversation_id: str) -> AsyncIterator[None]:
        # Taken before the first await, so waiters queue in arrival order
        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        self._lock_refs[conversation_id] = self._lock_refs.get(conversation_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_refs[conversation_id] -= 1
            if not self._lock_refs[conversation_id]:
                del self._lock_refs[conversation_id]
                del self._locks[conversation_id]

    async def handle_message(self, message: InboundMessage) -> Transition | None:
        """
        Handle one inbound message.

        Args:
            message: Inbound message

        Returns:
            Applied transition, or None if the state has no handler.

        Raises:
            StoreError: If state could not be loaded or persisted.
            SendError: If the reply could not be delivered.
        """
        conversation_id = message.conversation_id
        context = {"conversation_id": conversation_id}

        async with self._conversation_lock(conversation_id):
            state = await self._storage.get(conversation_id)
            context["state"] = state_tag(state)

            handler = handler_for(state, self._handlers)
            if handler is None:
                logger.info(
                    "No handler for state %s, dropping message from %s",
                    context["state"],
                    conversation_id,
                    extra={"context": context},
                )
                return None

            transition = handler(state, message)

            # Persist before replying: a repeated reply is better than a lost name
            if transition.next_state != state:
                await self._storage.set(conversation_id, transition.next_state)
                context["next_state"] = state_tag(transition.next_state)
                logger.info(
                    "Conversation %s moved %s -> %s",
                    conversation_id,
                    context["state"],
                    context["next_state"],
                    extra={"context": context},
                )

            await self._outbound.send(conversation_id, transition.reply)

        return transition

    async def dispatch(self, inbound: IInboundTransport) -> None:
        """Handle messages from an inbound transport until it ends or stop() is called."""
        self._running = True
        logger.info("Dispatcher started")

        async for message in inbound:
            if not self._running:
                logger.warning(
                    "Dispatcher stopping, message from %s not handled",
                    message.conversation_id,
                )
                continue

            task = asyncio.create_task(self._process(message))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        logger.info("Inbound transport exhausted")

    async def stop(self) -> None:
        """Stop accepting messages and wait for in-flight cycles."""
        self._running = False

        if self._tasks:
            logger.info("Waiting for %s in-flight messages", len(self._tasks))
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

        logger.info("Dispatcher stopped")

    async def _process(self, message: InboundMessage) -> None:
        """Run one cycle; failures are logged and the message is left unhandled."""
        conversation_id = message.conversation_id
        context = {"conversation_id": conversation_id}

        try:
            await self.handle_message(message)
        except StoreError as e:
            logger.error(
                "Store error for %s: %s", conversation_id, e,
                exc_info=True, extra={"context": context},
            )
        except SendError as e:
            logger.error(
                "Reply to %s failed: %s", conversation_id, e,
                exc_info=True, extra={"context": context},
            )
        except Exception as e:
            logger.error(
                "Unexpected error handling message from %s: %s", conversation_id, e,
                exc_info=True, extra={"context": context},
            )
