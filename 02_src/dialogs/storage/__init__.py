"""Dialog state storage."""

from pathlib import Path

from .sqlite import SqliteStore
from .storage import IDialogStore, MemoryStore, expires_at


def create_store(kind: str = "memory", db_path: str | Path | None = None) -> IDialogStore:
    """Build a store by name. SqliteStore still needs ``await store.init()``."""
    if kind == "memory":
        return MemoryStore()
    if kind == "sqlite":
        return SqliteStore(db_path)
    raise ValueError(f"Unknown dialog store: {kind!r}")


__all__ = ["IDialogStore", "MemoryStore", "SqliteStore", "create_store", "expires_at"]
