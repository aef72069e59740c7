"""Storage module."""

from .memory import InMemoryStateStorage
from .storage import IStateStorage, SqliteStateStorage, StoreError

__all__ = [
    "IStateStorage",
    "SqliteStateStorage",
    "InMemoryStateStorage",
    "StoreError",
]
