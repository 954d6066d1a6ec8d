"""In-memory key/value store.

Keeps values in a dict with optional per-key expiry. Suitable for
short-lived processes and tests; nothing survives a restart.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


class MemoryStore:
    """In-memory implementation of the KeyValueStore protocol."""

    def __init__(self, name: str = "memory") -> None:
        """Initialize an empty store."""
        self.name = name
        self._values: dict[str, tuple[str, Optional[datetime]]] = {}  # key → (value, expires_at)

    def get(self, key: str) -> Optional[str]:
        """Return the value for ``key``; expired entries are dropped and read as absent."""
        entry = self._values.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and expires_at <= datetime.now(timezone.utc):
            del self._values[key]
            return None
        return value or None

    def set(self, key: str, value: str, expiry_days: Optional[int] = None) -> None:
        """Store ``value``, optionally expiring after ``expiry_days``."""
        expires_at = None
        if expiry_days is not None:
            expires_at = datetime.now(timezone.utc) + timedelta(days=expiry_days)
        self._values[key] = (value, expires_at)
