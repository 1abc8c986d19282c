"""Adapters - I/O implementations of ports."""

from .memory_store import InMemoryTaskStore
from .json_store import JsonTaskStore
from .config_sleep import ConfigSleepProvider

__all__ = [
    "InMemoryTaskStore",
    "JsonTaskStore",
    "ConfigSleepProvider",
]
