"""SIM implementation - hardcoded onboarding scenario for testing."""

import asyncio
import random
from typing import Protocol

import httpx

from welcome_bot.logging_config import get_logger

logger = get_logger(__name__)


class ISim(Protocol):
    """Generate test traffic against the HTTP API."""

    async def start(self) -> None:
        """Start hardcoded scenario."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


# Each virtual conversation: greeting, a message without text, then a name
SCENARIO: list[tuple[str, list[str | None]]] = [
    ("sim_001", ["Привет!", None, "Алиса"]),
    ("sim_002", ["/start", "", "Боб"]),
    ("sim_003", ["Добрый день", "Чарли"]),
]


class Sim:
    """SIM with hardcoded scenario for testing."""

    def __init__(
        self,
        api_url: str = "http://localhost:8000",
        client: httpx.AsyncClient | None = None,
    ):
        self._api_url = api_url
        self._running = False
        self._task: asyncio.Task | None = None
        self._client = client
        self._owns_client = client is None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start hardcoded scenario."""
        if self._running:
            return

        self._running = True
        if self._client is None:
            self._client = httpx.AsyncClient()

        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _run_scenario(self) -> None:
        """Run hardcoded scenario."""
        rounds = max(len(messages) for _, messages in SCENARIO)

        try:
            for i in range(rounds):
                if not self._running:
                    break

                for conversation_id, messages in SCENARIO:
                    if not self._running:
                        break

                    if i < len(messages):
                        await self._send_message(conversation_id, messages[i])
                        await asyncio.sleep(random.uniform(0.5, 1.5))

                await asyncio.sleep(1)

            for conversation_id, _ in SCENARIO:
                await self._log_replies(conversation_id)

        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False

    async def _send_message(self, conversation_id: str, text: str | None) -> None:
        """Send a message via HTTP API."""
        if not self._client:
            return

        try:
            response = await self._client.post(
                f"{self._api_url}/api/messages",
                json={"conversation_id": conversation_id, "text": text},
                timeout=10.0,
            )

            if response.status_code == 202:
                logger.info("SIM: %s -> %r", conversation_id, text)
            else:
                logger.error(
                    "SIM: Error sending message: %s",
                    response.status_code,
                )

        except httpx.HTTPError as e:
            logger.error("SIM: Failed to send message: %s", e)

    async def _log_replies(self, conversation_id: str) -> None:
        """Log replies the bot sent to a conversation."""
        try:
            response = await self._client.get(
                f"{self._api_url}/api/conversations/{conversation_id}/replies",
                timeout=10.0,
            )
        except httpx.HTTPError as e:
            logger.error("SIM: Failed to fetch replies: %s", e)
            return

        if response.status_code != 200:
            logger.info("SIM: Replies for %s unavailable (%s)", conversation_id, response.status_code)
            return

        for reply in response.json():
            logger.info("SIM: %s <- %s", conversation_id, reply["text"])
