"""Application bootstrap and lifecycle management."""

from typing import Callable, Protocol

from .bot import IBot, TelegramBot
from .config import Settings
from .dialog import Dialog, HelloDialog, generate_dialog_key
from .locks import KeyedLocks
from .logging_config import get_logger
from .manager import DialogManager
from .models import Update
from .storage import IDialogStore, SqliteStore, create_store

logger = get_logger(__name__)

DialogFactory = Callable[[Update], Dialog]


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    @property
    def settings(self) -> Settings:
        """Runtime settings."""
        ...

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def handle_update(self, update: Update) -> bool:
        """Route one update to its dialog. Return whether a dialog handled it."""
        ...


class Application:
    """Wires store, bot and DialogManager, and starts dialogs on commands."""

    def __init__(
        self,
        settings: Settings | None = None,
        store: IDialogStore | None = None,
        bot: IBot | None = None,
    ):
        self._settings = settings or Settings.from_env()

        # Injected components are used as-is and not closed on stop()
        self._store: IDialogStore | None = store
        self._bot: IBot | None = bot
        self._owns_store = store is None
        self._owns_bot = bot is None

        self._manager: DialogManager | None = None
        self._commands: dict[str, DialogFactory] = {}
        self._locks = KeyedLocks()

        self.register_command("/hello", HelloDialog.from_update)

    @property
    def settings(self) -> Settings:
        return self._settings

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Store
        if self._store is None:
            self._store = create_store(self._settings.store, self._settings.db_path)
        if self._owns_store and isinstance(self._store, SqliteStore):
            await self._store.init()
        logger.info("Dialog store initialized: %s", type(self._store).__name__)

        # 2. Bot (optional: without a token dialogs run but cannot reply)
        if self._bot is None and self._settings.bot_token:
            self._bot = TelegramBot(
                self._settings.bot_token, base_url=self._settings.telegram_api_url
            )
        if self._bot is None:
            logger.warning("No bot token configured, dialogs cannot send messages")

        # 3. DialogManager
        self._manager = DialogManager(self._store, self._bot)
        logger.info("DialogManager started with %d commands", len(self._commands))

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        self._manager = None
        if self._owns_bot and isinstance(self._bot, TelegramBot):
            await self._bot.close()
            self._bot = None
        if self._owns_store and isinstance(self._store, SqliteStore):
            await self._store.close()
            logger.info("Dialog store closed")
        if self._owns_store:
            self._store = None

    def register_command(self, command: str, factory: DialogFactory) -> None:
        """Start the dialog built by ``factory`` when a message begins with ``command``."""
        if not command.startswith("/"):
            raise ValueError(f"Command must start with '/': {command!r}")
        self._commands[command] = factory

    def _match_command(self, text: str) -> DialogFactory | None:
        if not text.startswith("/"):
            return None
        # "/hello@my_bot arg" -> "/hello"
        command = text.split(maxsplit=1)[0].split("@", 1)[0]
        return self._commands.get(command)

    async def handle_update(self, update: Update) -> bool:
        """Resume the sender's dialog, or start one for a registered command."""
        if not update.has_message():
            logger.debug("Ignoring update %s without message", update.update_id)
            return False

        manager = self.manager
        message = update.get_message()
        key = generate_dialog_key(message)
        if key is None:
            logger.debug("Ignoring update %s without user id", update.update_id)
            return False

        async with self._locks.hold(key):
            if await manager.exists(update):
                await manager.proceed(update)
                return True

            factory = self._match_command(message.text)
            if factory is None:
                return False

            dialog = factory(update)
            await manager.activate(dialog)
            await manager.proceed(update)
            return True

    @property
    def manager(self) -> DialogManager:
        """Get dialog manager instance."""
        if self._manager is None:
            raise RuntimeError("Application not started")
        return self._manager

    @property
    def store(self) -> IDialogStore:
        """Get store instance."""
        if self._store is None:
            raise RuntimeError("Application not started")
        return self._store
