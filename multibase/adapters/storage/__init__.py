"""Storage adapters.

Implements the KeyValueStore protocol in memory and on disk.
"""

from multibase.adapters.storage.fake import FakeStore
from multibase.adapters.storage.json_file import JsonFileStore
from multibase.adapters.storage.memory import MemoryStore

__all__ = ["FakeStore", "JsonFileStore", "MemoryStore"]
