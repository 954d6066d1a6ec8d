"""Identity store: one stable user identifier across two persistence backends.

The short-lived store plays the role of a cookie and the long-lived store the
role of local storage. Either may be cleared or disabled independently, so
every read reconciles them:

    short   long    result
    -----   -----   -------------------------------------------
    a       a       a, nothing written
    a       b       a, long store overwritten with a
    a       -       a, copied into the long store
    -       b       b, copied into the short store (365-day expiry)
    -       -       fresh UUID4, written to both

A backend that raises any exception is treated as absent for that call;
host-supplied stores are not limited to StorageUnavailableError.
Reconciliation only depends on current store contents, so concurrent reads
need no lock; racing reads may repeat a write-back, which is harmless.
"""

import logging
from typing import Optional, Union

from multibase.core.config.constants import IDENTITY_EXPIRY_DAYS, IDENTITY_KEY
from multibase.core.logging import logger as default_logger
from multibase.core.protocols.storage import KeyValueStore
from multibase.domains.identity.types import UserIdentity, generate_user_id


class IdentityStore:
    """Reads and reconciles the user identity across both backends."""

    def __init__(
        self,
        short_store: KeyValueStore,
        long_store: KeyValueStore,
        key: str = IDENTITY_KEY,
        expiry_days: int = IDENTITY_EXPIRY_DAYS,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ) -> None:
        """Initialize the identity store.

        Args:
            short_store: Authoritative, cookie-like backend.
            long_store: Long-lived, local-storage-like backend.
            key: Storage key shared by both backends.
            expiry_days: Expiry applied when writing the short store.
            logger: Logger instance. Defaults to the SDK logger.
        """
        self._short = short_store
        self._long = long_store
        self._key = key
        self._expiry_days = expiry_days
        self._logger = logger or default_logger

    def read(self) -> UserIdentity:
        """Return the reconciled identity, creating one if both stores are empty."""
        short_value = self._get(self._short)
        long_value = self._get(self._long)

        if short_value is not None and long_value is not None:
            if short_value != long_value:
                # Short store is authoritative
                self._set(self._long, short_value)
            return UserIdentity(id=short_value)

        if short_value is not None:
            self._set(self._long, short_value)
            return UserIdentity(id=short_value)

        if long_value is not None:
            self._set(self._short, long_value, self._expiry_days)
            return UserIdentity(id=long_value)

        new_id = generate_user_id()
        self.write(new_id, self._expiry_days)
        self._logger.debug(f"Generated new user id {new_id}")
        return UserIdentity(id=new_id)

    def write(self, value: str, expiry_days: Optional[int] = None) -> None:
        """Write ``value`` into both backends unconditionally."""
        self._set(self._short, value, expiry_days)
        self._set(self._long, value)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _get(self, store: KeyValueStore) -> Optional[str]:
        try:
            value = store.get(self._key)
        except Exception as e:
            self._logger.warning(f"Treating '{store.name}' store as empty: {e}")
            return None
        return value or None

    def _set(self, store: KeyValueStore, value: str, expiry_days: Optional[int] = None) -> None:
        try:
            store.set(self._key, value, expiry_days)
        except Exception as e:
            self._logger.warning(f"Could not persist identity to '{store.name}' store: {e}")
