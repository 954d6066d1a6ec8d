"""KeyValueStore protocol for identity persistence backends.

The identity store reconciles one value across two independently evictable
backends: a short-lived, cookie-like store and a long-lived local store.
Both are accessed through this interface.

Usage:
    value = store.get("multibase_user_id")
    store.set("multibase_user_id", value, expiry_days=365)
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for a string key/value persistence backend.

    Implementations raise StorageUnavailableError when the backend cannot be
    accessed. Callers decide how to degrade.
    """

    name: str

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent or expired.

        Args:
            key: Storage key.
        """
        ...

    def set(self, key: str, value: str, expiry_days: Optional[int] = None) -> None:
        """Store ``value`` under ``key``.

        Args:
            key: Storage key.
            value: Value to persist.
            expiry_days: Days until the value expires. None means no expiry.
        """
        ...
