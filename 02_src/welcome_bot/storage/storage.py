"""SQLite storage implementation."""

import asyncio
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..logging_config import get_logger
from ..models import DialogueState, decode_state, default_state, encode_state

logger = get_logger(__name__)


class StoreError(RuntimeError):
    """Dialogue state could not be read or written."""


class IStateStorage(Protocol):
    """Durable dialogue state keyed by conversation identity."""

    async def get(self, conversation_id: str) -> DialogueState:
        """Get stored state, or the default state if there is no record."""
        ...

    async def set(self, conversation_id: str, state: DialogueState) -> None:
        """Durably overwrite the state of a conversation."""
        ...

    async def remove(self, conversation_id: str) -> None:
        """Delete the record, resetting the conversation to the default state."""
        ...


class SqliteStateStorage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    async def init(self) -> None:
        """Create the database file if needed and apply the schema."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self._conn = await aiosqlite.connect(self._db_path)
            # set() must not return before the write reaches the disk
            await self._conn.execute("PRAGMA synchronous=FULL")

            schema_path = Path(__file__).parent / "schema.sql"
            with open(schema_path, "r", encoding="utf-8") as f:
                schema_sql = f.read()
            await self._conn.executescript(schema_sql)
            await self._conn.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to open state storage at {self._db_path}: {e}") from e

        logger.info("State storage opened at %s", self._db_path)

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    async def get(self, conversation_id: str) -> DialogueState:
        """Get stored state, or Start if there is no record."""
        conn = self._require_conn()

        try:
            cursor = await conn.execute(
                """
                SELECT payload
                FROM dialogue_states
                WHERE conversation_id = ?
                """,
                (conversation_id,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read state for {conversation_id}: {e}") from e

        if not row:
            return default_state()

        try:
            return decode_state(row[0])
        except ValueError as e:
            raise StoreError(f"Unreadable state for {conversation_id}: {e}") from e

    async def set(self, conversation_id: str, state: DialogueState) -> None:
        """Durably overwrite the state of a conversation."""
        conn = self._require_conn()

        try:
            payload = encode_state(state)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Failed to serialize state {state!r}: {e}") from e

        async with self._write_lock:
            try:
                await conn.execute(
                    """
                    INSERT OR REPLACE INTO dialogue_states
                    (conversation_id, payload, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    """,
                    (conversation_id, payload),
                )
                await conn.commit()
            except aiosqlite.Error as e:
                await self._rollback()
                raise StoreError(f"Failed to write state for {conversation_id}: {e}") from e

    async def remove(self, conversation_id: str) -> None:
        """Delete the record of a conversation."""
        conn = self._require_conn()

        async with self._write_lock:
            try:
                await conn.execute(
                    "DELETE FROM dialogue_states WHERE conversation_id = ?",
                    (conversation_id,),
                )
                await conn.commit()
            except aiosqlite.Error as e:
                await self._rollback()
                raise StoreError(f"Failed to remove state for {conversation_id}: {e}") from e

    async def clear(self) -> None:
        """Delete all records."""
        conn = self._require_conn()

        async with self._write_lock:
            try:
                await conn.execute("DELETE FROM dialogue_states")
                await conn.commit()
            except aiosqlite.Error as e:
                await self._rollback()
                raise StoreError(f"Failed to clear state storage: {e}") from e

    async def _rollback(self) -> None:
        try:
            await self._conn.rollback()
        except aiosqlite.Error:
            logger.warning("Rollback failed for %s", self._db_path, exc_info=True)
