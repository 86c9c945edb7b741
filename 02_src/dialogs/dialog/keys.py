"""Session key derivation."""

from typing import Any

from ..models import Message


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def format_key(user_id: Any, chat_id: Any) -> str:
    """Join a user/chat pair into a session key; absent parts render empty."""
    user_part = "" if _is_absent(user_id) else str(user_id)
    chat_part = "" if _is_absent(chat_id) else str(chat_id)
    return f"{user_part}-{chat_part}"


def generate_dialog_key(message: Message) -> str | None:
    """Derive the session key for a message, or None without a user id.

    User id comes from ``from.id`` falling back to ``user.id``; chat id from
    ``chat.id`` falling back to ``user_chat_id``. A missing chat id still
    yields a key (``"42-"``), a missing user id never does.
    """
    user_id = message.get("from.id", message.get("user.id"))
    chat_id = message.get("chat.id", message.get("user_chat_id"))

    if _is_absent(user_id):
        return None

    return format_key(user_id, chat_id)
