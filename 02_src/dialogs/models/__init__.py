"""Inbound event models."""

from .updates import MESSAGE_FIELDS, Message, Update

__all__ = ["Message", "Update", "MESSAGE_FIELDS"]
