"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest_asyncio.fixture
async def storage():
    """Create in-memory SQLite storage for testing."""
    from welcome_bot.storage import SqliteStateStorage

    st = SqliteStateStorage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def memory_storage():
    """Create dict-backed storage."""
    from welcome_bot.storage import InMemoryStateStorage

    return InMemoryStateStorage()


@pytest.fixture
def db_path(tmp_path):
    """Path of a SQLite file in a temporary directory."""
    return tmp_path / "data" / "storage.db"


@pytest.fixture
def outbox():
    """Create in-memory outbound transport."""
    from welcome_bot.transport import Outbox

    return Outbox()


@pytest.fixture
def dispatcher(memory_storage, outbox):
    """Create Dispatcher over in-memory storage and outbox."""
    from welcome_bot.dialogue import Dispatcher

    return Dispatcher(storage=memory_storage, outbound=outbox)


@pytest.fixture
def settings(db_path):
    """Settings pointing at a temporary database."""
    from welcome_bot.config import Settings

    return Settings(db_path=db_path, log_file=db_path.parent / "app.log")
