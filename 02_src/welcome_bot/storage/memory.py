"""In-memory storage implementation."""

from ..models import DialogueState, decode_state, default_state, encode_state
from .storage import StoreError


class InMemoryStateStorage:
    """Dict-backed storage with the same encoding as SqliteStateStorage.

    Nothing survives the process; used for tests and throwaway runs.
    """

    def __init__(self):
        self._records: dict[str, str] = {}

    async def get(self, conversation_id: str) -> DialogueState:
        raw = self._records.get(conversation_id)
        if raw is None:
            return default_state()
        try:
            return decode_state(raw)
        except ValueError as e:
            raise StoreError(f"Unreadable state for {conversation_id}: {e}") from e

    async def set(self, conversation_id: str, state: DialogueState) -> None:
        try:
            self._records[conversation_id] = encode_state(state)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Failed to serialize state {state!r}: {e}") from e

    async def remove(self, conversation_id: str) -> None:
        self._records.pop(conversation_id, None)

    async def clear(self) -> None:
        self._records.clear()
