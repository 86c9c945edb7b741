"""DialogManager: activation, resumption and termination of dialogs."""

from .bot import IBot
from .dialog import Dialog, generate_dialog_key
from .logging_config import get_logger
from .models import Update
from .storage import IDialogStore

logger = get_logger(__name__)


class DialogManager:
    """Stores dialog state between updates and runs one step per update."""

    def __init__(self, store: IDialogStore, bot: IBot | None = None):
        self._store = store
        self._bot = bot

    @property
    def bot(self) -> IBot | None:
        return self._bot

    def set_bot(self, bot: IBot | None) -> None:
        """Use a different bot for later resumptions."""
        self._bot = bot

    async def activate(self, dialog: Dialog) -> None:
        """Persist a new dialog, replacing any state under its key.

        The first step runs on the next proceed() call.
        """
        await self._store_dialog_state(dialog)
        logger.info(
            "Dialog activated",
            extra={"session_key": dialog.get_dialog_key(), "dialog_type": type(dialog).__name__},
        )

    def dialog_key(self, update: Update) -> str | None:
        """Session key for an update, None when no user id is present."""
        return generate_dialog_key(update.get_message())

    async def exists(self, update: Update) -> bool:
        """Whether a dialog is stored for the update's user and chat."""
        key = self.dialog_key(update)
        return key is not None and await self._store.has(key)

    async def proceed(self, update: Update, bot: IBot | None = None) -> None:
        """Run the next step of the active dialog, if there is one.

        ``bot`` overrides the configured client for this call only.
        """
        key = self.dialog_key(update)
        if key is None:
            logger.debug("No session key for update %s", update.update_id)
            return
        if not await self._store.has(key):
            logger.debug("No active dialog", extra={"session_key": key})
            return

        dialog = await self._store.get(key)
        dialog.set_bot(bot if bot is not None else self._bot)

        await dialog.proceed(update)

        if dialog.is_end():
            await self._store.delete(dialog.get_dialog_key())
            logger.info("Dialog finished", extra={"session_key": dialog.get_dialog_key()})
        else:
            await self._store_dialog_state(dialog)
            logger.debug("Dialog state saved", extra={"session_key": dialog.get_dialog_key()})

    async def _store_dialog_state(self, dialog: Dialog) -> None:
        await self._store.set(dialog.get_dialog_key(), dialog, dialog.ttl())
