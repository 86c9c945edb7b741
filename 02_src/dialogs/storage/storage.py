"""Dialog state store contract and in-memory implementation."""

import time
from typing import Callable, Protocol

from ..dialog import Dialog, dump_dialog, load_dialog

Clock = Callable[[], float]


class IDialogStore(Protocol):
    """Key-value store for dialog state with per-entry expiration."""

    async def has(self, key: str) -> bool:
        """Whether a live entry exists for key."""
        ...

    async def get(self, key: str) -> Dialog:
        """Load the dialog stored under key. Raises KeyError if absent."""
        ...

    async def set(self, key: str, dialog: Dialog, ttl: int | None) -> None:
        """Store dialog under key for ttl seconds (None: no expiry)."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key. Absent keys are ignored."""
        ...


def expires_at(now: float, ttl: int | None) -> float | None:
    """Absolute expiry for a ttl in seconds."""
    if ttl is None:
        return None
    if ttl <= 0:
        raise ValueError(f"ttl must be positive or None, got {ttl}")
    return now + ttl


class MemoryStore:
    """Process-local store. Entries are kept serialized, not as live objects."""

    def __init__(self, clock: Clock = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[str, float | None]] = {}

    def _live_payload(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        payload, deadline = entry
        if deadline is not None and self._clock() >= deadline:
            del self._entries[key]
            return None
        return payload

    async def has(self, key: str) -> bool:
        return self._live_payload(key) is not None

    async def get(self, key: str) -> Dialog:
        payload = self._live_payload(key)
        if payload is None:
            raise KeyError(key)
        return load_dialog(payload)

    async def set(self, key: str, dialog: Dialog, ttl: int | None) -> None:
        deadline = expires_at(self._clock(), ttl)
        self._entries[key] = (dump_dialog(dialog), deadline)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def purge_expired(self) -> int:
        """Drop expired entries, return how many were removed."""
        now = self._clock()
        expired = [
            key
            for key, (_, deadline) in self._entries.items()
            if deadline is not None and now >= deadline
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
