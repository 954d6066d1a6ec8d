"""Fake key/value store for testing.

Records every call and can simulate a backend that is disabled by the host
environment.
"""

from typing import Optional

from multibase.core.exceptions import StorageUnavailableError


class FakeStore:
    """Test implementation of KeyValueStore.

    Usage:
        cookies = FakeStore("cookie")
        cookies.seed("multibase_user_id", "abc")
        store = IdentityStore(short_store=cookies, long_store=FakeStore("local"))
        store.read()

        assert cookies.call_count("set") == 0
    """

    def __init__(
        self,
        name: str = "fake",
        *,
        fail_reads: bool = False,
        fail_writes: bool = False,
        error: Optional[Exception] = None,
    ) -> None:
        """Initialize the fake.

        Args:
            name: Backend name.
            fail_reads: Raise from get().
            fail_writes: Raise from set().
            error: Exception raised on failure. Defaults to StorageUnavailableError.
        """
        self.name = name
        self.values: dict[str, str] = {}
        self.expiry: dict[str, Optional[int]] = {}
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self._error = error
        self._calls: list[tuple] = []

    def _failure(self) -> Exception:
        return self._error or StorageUnavailableError(self.name)

    def seed(self, key: str, value: str) -> None:
        """Set a value without recording a call."""
        self.values[key] = value

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name, *_ in self._calls if name == method)

    def get(self, key: str) -> Optional[str]:
        """Return the seeded or written value."""
        self._calls.append(("get", key))
        if self.fail_reads:
            raise self._failure()
        return self.values.get(key)

    def set(self, key: str, value: str, expiry_days: Optional[int] = None) -> None:
        """Record the write."""
        self._calls.append(("set", key, value, expiry_days))
        if self.fail_writes:
            raise self._failure()
        self.values[key] = value
        self.expiry[key] = expiry_days
