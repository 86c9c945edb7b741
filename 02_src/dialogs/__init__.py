"""Multi-step dialogs for Telegram bots."""

from .app import Application, IApplication
from .bot import IBot, TelegramBot, TelegramError
from .config import Settings
from .dialog import (
    Dialog,
    DialogSerializationError,
    HelloDialog,
    IDialog,
    generate_dialog_key,
)
from .manager import DialogManager
from .models import Message, Update
from .storage import IDialogStore, MemoryStore, SqliteStore, create_store

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Core
    "DialogManager",
    "generate_dialog_key",
    # Models
    "Update",
    "Message",
    # Dialogs
    "IDialog",
    "Dialog",
    "HelloDialog",
    "DialogSerializationError",
    # Storage
    "IDialogStore",
    "MemoryStore",
    "SqliteStore",
    "create_store",
    # Bot
    "IBot",
    "TelegramBot",
    "TelegramError",
]
