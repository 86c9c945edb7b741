"""Dialog module."""

from .base import Dialog, IDialog, Step
from .hello import HelloDialog
from .keys import format_key, generate_dialog_key
from .registry import (
    DialogSerializationError,
    dump_dialog,
    load_dialog,
    register,
    registered_types,
    resolve,
)

__all__ = [
    "Dialog",
    "IDialog",
    "Step",
    "HelloDialog",
    "format_key",
    "generate_dialog_key",
    "DialogSerializationError",
    "dump_dialog",
    "load_dialog",
    "register",
    "registered_types",
    "resolve",
]
