"""Dialog type registry and JSON codec for persisted dialog state."""

import json
from typing import TYPE_CHECKING, Any

from ..logging_config import get_logger

if TYPE_CHECKING:
    from .base import Dialog

logger = get_logger(__name__)

_REGISTRY: dict[str, type["Dialog"]] = {}


class DialogSerializationError(ValueError):
    """Dialog state could not be encoded or decoded."""


def type_tag(cls: type) -> str:
    """Tag a dialog class is stored under.

    ``dialog_type`` is looked up on the class itself only, so subclasses of a
    tagged dialog get their own default tag.
    """
    return cls.__dict__.get("dialog_type") or f"{cls.__module__}.{cls.__qualname__}"


def register(cls: type["Dialog"]) -> type["Dialog"]:
    """Register a dialog class under its type tag."""
    tag = type_tag(cls)
    existing = _REGISTRY.get(tag)
    if existing is not None and existing is not cls:
        logger.warning("Dialog type %s re-registered by %s", tag, cls.__qualname__)
    _REGISTRY[tag] = cls
    return cls


def resolve(tag: str) -> type["Dialog"]:
    """Look up a registered dialog class."""
    try:
        return _REGISTRY[tag]
    except KeyError:
        raise DialogSerializationError(f"Unknown dialog type: {tag!r}") from None


def registered_types() -> list[str]:
    return sorted(_REGISTRY)


def dump_dialog(dialog: "Dialog") -> str:
    """Serialize a dialog to tagged JSON. The bot reference is never included."""
    state: dict[str, Any] = dialog.to_state()
    state["type"] = type_tag(type(dialog))
    try:
        return json.dumps(state)
    except (TypeError, ValueError) as e:
        raise DialogSerializationError(
            f"Dialog {dialog.get_dialog_key()} state is not JSON-serializable: {e}"
        ) from e


def load_dialog(payload: str | bytes) -> "Dialog":
    """Rebuild a dialog from tagged JSON."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DialogSerializationError(f"Malformed dialog payload: {e}") from e

    if not isinstance(data, dict) or "type" not in data:
        raise DialogSerializationError("Dialog payload has no type tag")

    cls = resolve(data.pop("type"))
    try:
        return cls.from_state(data)
    except (KeyError, TypeError) as e:
        raise DialogSerializationError(
            f"Dialog payload does not match {cls.__qualname__}: {e}"
        ) from e
