"""Tests for Application."""

import asyncio

import pytest

from conftest import TwoStepDialog, make_update
from dialogs.app import Application
from dialogs.config import Settings
from dialogs.locks import KeyedLocks
from dialogs.models import Update
from dialogs.storage import MemoryStore, SqliteStore


@pytest.fixture
async def application(memory_store, mock_bot):
    """Create started Application with injected store and bot."""
    app = Application(Settings(), store=memory_store, bot=mock_bot)
    app.register_command("/two", TwoStepDialog.from_update)
    await app.start()
    yield app
    await app.stop()


class TestApplicationLifecycle:
    """Tests for start/stop."""

    async def test_start_builds_sqlite_store(self):
        """Test that sqlite settings create and initialize a SqliteStore."""
        app = Application(Settings(store="sqlite", db_path=":memory:"))
        await app.start()
        try:
            assert isinstance(app.store, SqliteStore)
            assert not await app.store.has("42-7")
            assert app.manager.bot is None
        finally:
            await app.stop()

    async def test_start_builds_memory_store(self):
        """Test the default memory store."""
        app = Application(Settings())
        await app.start()
        assert isinstance(app.store, MemoryStore)
        await app.stop()

    async def test_start_builds_telegram_bot(self):
        """Test that a bot token creates a TelegramBot."""
        from dialogs.bot import TelegramBot

        app = Application(Settings(bot_token="123:abc"))
        await app.start()
        assert isinstance(app.manager.bot, TelegramBot)
        await app.stop()

    def test_manager_before_start(self):
        """Test that accessing the manager before start raises."""
        app = Application(Settings())
        with pytest.raises(RuntimeError):
            app.manager
        with pytest.raises(RuntimeError):
            app.store

    async def test_stop_keeps_injected_store(self, memory_store, mock_bot):
        """Test that injected components survive stop()."""
        app = Application(Settings(), store=memory_store, bot=mock_bot)
        await app.start()
        await app.stop()
        assert app.store is memory_store

    def test_register_command_requires_slash(self):
        """Test that commands must start with '/'."""
        with pytest.raises(ValueError):
            Application(Settings()).register_command("two", TwoStepDialog.from_update)


class TestApplicationHandleUpdate:
    """Tests for Application.handle_update()."""

    async def test_plain_message_without_dialog(self, application, mock_bot):
        """Test that ordinary text with no dialog is not handled."""
        assert not await application.handle_update(make_update("hello there"))
        mock_bot.send_message.assert_not_awaited()

    async def test_command_starts_dialog(self, application, memory_store, mock_bot):
        """Test that a registered command activates and runs the first step."""
        assert await application.handle_update(make_update("/two"))

        stored = await memory_store.get("42-7")
        assert isinstance(stored, TwoStepDialog)
        assert stored.next == 1
        assert stored.recall("first") == "/two"
        mock_bot.send_message.assert_awaited_once()

    async def test_command_with_bot_suffix(self, application, memory_store):
        """Test that "/two@bot args" matches "/two"."""
        assert await application.handle_update(make_update("/two@my_bot now"))
        assert await memory_store.has("42-7")

    async def test_unknown_command(self, application):
        """Test that an unregistered command is not handled."""
        assert not await application.handle_update(make_update("/unknown"))

    async def test_active_dialog_receives_message(self, application, memory_store):
        """Test that an active dialog is resumed and finishes."""
        await application.handle_update(make_update("/two"))
        assert await application.handle_update(make_update("done"))
        assert not await memory_store.has("42-7")

    async def test_command_during_dialog_is_an_answer(self, application, memory_store):
        """Test that a command sent mid-dialog goes to the active dialog."""
        await application.handle_update(make_update("/two"))
        await application.handle_update(make_update("/hello"))
        assert not await memory_store.has("42-7")

    async def test_default_hello_command(self, application, memory_store, mock_bot):
        """Test that /hello is registered by default."""
        assert await application.handle_update(make_update("/hello"))
        mock_bot.send_message.assert_awaited_once_with(chat_id=7, text="Hi! What is your name?")

    async def test_callback_press_resumes_dialog(self, application, memory_store, mock_bot):
        """Test that an inline button press in the chat continues its dialog."""
        await application.handle_update(make_update("/hello"))

        press = Update(
            {
                "update_id": 2,
                "callback_query": {
                    "id": "cb1",
                    "from": {"id": 42},
                    "message": {"message_id": 1, "chat": {"id": 7}, "text": "Hi!"},
                    "data": "Ann",
                },
            }
        )
        assert await application.handle_update(press)

        stored = await memory_store.get("42-7")
        assert stored.recall("name") == "Ann"
        assert stored.next == 2
        mock_bot.send_message.assert_awaited_with(
            chat_id=7, text="Nice to meet you, Ann! How old are you?"
        )

    async def test_update_without_message(self, application):
        """Test that updates without a message are ignored."""
        assert not await application.handle_update(Update({"update_id": 1, "poll": {}}))

    async def test_update_without_user(self, application, memory_store):
        """Test that messages without a user are ignored."""
        assert not await application.handle_update(make_update("/two", user_id=None))
        assert len(memory_store) == 0

    async def test_concurrent_updates_serialized(self, application, memory_store):
        """Test that parallel updates for one key do not lose progress."""
        await application.handle_update(make_update("/hello"))

        await asyncio.gather(
            application.handle_update(make_update("Ann", update_id=2)),
            application.handle_update(make_update("30", update_id=3)),
        )

        assert not await memory_store.has("42-7")


class TestKeyedLocks:
    """Tests for KeyedLocks."""

    async def test_lock_released_and_dropped(self):
        """Test that locks are removed once unused."""
        locks = KeyedLocks()
        async with locks.hold("a"):
            assert len(locks) == 1
        assert len(locks) == 0

    async def test_same_key_is_exclusive(self):
        """Test that holders of one key run one at a time."""
        locks = KeyedLocks()
        order: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold("k"):
                order.append(f"{name}:in")
                await asyncio.sleep(0)
                order.append(f"{name}:out")

        await asyncio.gather(worker("a"), worker("b"))
        assert order == ["a:in", "a:out", "b:in", "b:out"]
        assert len(locks) == 0

    async def test_lock_released_on_error(self):
        """Test that an exception releases the lock."""
        locks = KeyedLocks()
        with pytest.raises(RuntimeError):
            async with locks.hold("k"):
                raise RuntimeError("boom")
        assert len(locks) == 0
