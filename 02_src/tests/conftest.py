"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dialogs.dialog import Dialog  # noqa: E402


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TwoStepDialog(Dialog):
    """Records answers; ends after its second step."""

    dialog_type = "test.two_step"
    steps = ["first", "second"]

    async def first(self, update):
        self.remember("first", update.get_message().text)
        await self.reply("second question")

    async def second(self, update):
        self.remember("second", update.get_message().text)


def make_update(
    text: str = "hi",
    user_id: int | None = 42,
    chat_id: int | None = 7,
    update_id: int = 1,
    **message_fields,
):
    """Build an Update with a plain text message."""
    from dialogs.models import Update

    message: dict = {"message_id": update_id, "text": text, **message_fields}
    if user_id is not None:
        message["from"] = {"id": user_id, "is_bot": False, "first_name": "Test"}
    if chat_id is not None:
        message["chat"] = {"id": chat_id, "type": "private"}
    return Update({"update_id": update_id, "message": message})


@pytest.fixture
def clock():
    """Create fake clock."""
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    """Create in-memory store driven by the fake clock."""
    from dialogs.storage import MemoryStore

    return MemoryStore(clock=clock)


@pytest_asyncio.fixture
async def sqlite_store(clock):
    """Create in-memory SQLite store for testing."""
    from dialogs.storage import SqliteStore

    st = SqliteStore(":memory:", clock=clock)
    await st.init()
    yield st
    await st.close()


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def store(request, clock):
    """Each store backend in turn."""
    from dialogs.storage import MemoryStore, SqliteStore

    if request.param == "memory":
        yield MemoryStore(clock=clock)
        return

    st = SqliteStore(":memory:", clock=clock)
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def mock_bot():
    """Create mock bot client."""
    bot = Mock()
    bot.send_message = AsyncMock(return_value={"message_id": 1})
    return bot


@pytest.fixture
def manager(memory_store, mock_bot):
    """Create DialogManager over the memory store."""
    from dialogs.manager import DialogManager

    return DialogManager(memory_store, mock_bot)
