"""Read-only wrappers over Telegram update payloads."""

from dataclasses import dataclass, field
from typing import Any

_MISSING = object()

# Update fields that carry a message-like object, in lookup order
MESSAGE_FIELDS = (
    "message",
    "edited_message",
    "channel_post",
    "edited_channel_post",
    "callback_query",
)


def _dig(data: Any, path: str) -> Any:
    """Walk a dotted path through nested dicts, or return _MISSING."""
    current = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _callback_as_message(callback: dict[str, Any]) -> dict[str, Any]:
    """Flatten a callback_query into message shape.

    The sender stays at ``from``; the chat is taken from the message the
    button was attached to and the button ``data`` becomes the text.
    """
    data = dict(callback)
    attached = callback.get("message")
    if isinstance(attached, dict):
        data.setdefault("chat", attached.get("chat"))
    data.setdefault("text", callback.get("data", ""))
    return data


@dataclass(frozen=True)
class Message:
    """A message-like field bag with dotted-path access."""

    data: dict[str, Any] = field(default_factory=dict)

    def get(self, path: str, default: Any = None) -> Any:
        """Return the value at ``path`` ("chat.id"), or default if missing or None."""
        value = _dig(self.data, path)
        if value is _MISSING or value is None:
            return default
        return value

    def has(self, path: str) -> bool:
        """Whether ``path`` resolves to a non-None value."""
        return self.get(path) is not None

    @property
    def text(self) -> str:
        return self.get("text", "")

    @property
    def chat_id(self) -> Any:
        return self.get("chat.id", self.get("user_chat_id"))

    @property
    def from_id(self) -> Any:
        return self.get("from.id", self.get("user.id"))


@dataclass(frozen=True)
class Update:
    """An inbound platform event."""

    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Update":
        """Wrap a decoded webhook body."""
        if not isinstance(data, dict):
            raise TypeError(f"Update payload must be an object, got {type(data).__name__}")
        return cls(data=data)

    @property
    def update_id(self) -> int | None:
        return self.data.get("update_id")

    def has_message(self) -> bool:
        """Whether any message-bearing field is present."""
        return any(isinstance(self.data.get(name), dict) for name in MESSAGE_FIELDS)

    def get_message(self) -> Message:
        """Return the message-bearing object of this update.

        Raises:
            ValueError: If the update carries no message at all.
        """
        for name in MESSAGE_FIELDS:
            payload = self.data.get(name)
            if isinstance(payload, dict):
                if name == "callback_query":
                    payload = _callback_as_message(payload)
                return Message(payload)
        raise ValueError(f"Update {self.update_id} has no message")
