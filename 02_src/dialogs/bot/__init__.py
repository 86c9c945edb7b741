"""Bot client module."""

from .telegram import IBot, TelegramBot, TelegramError

__all__ = ["IBot", "TelegramBot", "TelegramError"]
