"""Shared storage for names and events."""

from .event_store import EventStore
from .name_interner import NameInterner

__all__ = ["EventStore", "NameInterner"]
