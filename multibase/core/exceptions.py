"""Shared exceptions module.

These are raised at adapter and validation seams inside the package. The
public surface (``Multibase``) converts every one of them into a log line;
none of them is allowed to reach host application code.
"""

from typing import Optional


class MultibaseException(Exception):
    """Base exception for the Multibase SDK."""

    pass


class ConfigurationError(MultibaseException):
    """Exception raised when the SDK configuration is missing or invalid."""

    def __init__(
        self,
        message: Optional[str] = "Invalid configuration for Multibase SDK",
        errors: Optional[list[str]] = None,
    ):
        """Create a new ConfigurationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.
            errors (list[str], optional): One line per offending field.

        """
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)


class InvalidAddressError(MultibaseException):
    """Exception raised for a malformed wallet address."""

    def __init__(self, address: str, message: str = "Invalid address"):
        """Create a new InvalidAddressError instance.

        Args:
        ----
            address (str): The rejected address.
            message (str, optional): The error message. Has default message.

        """
        self.address = address
        self.message = message
        super().__init__(f"{message}: {address!r}")


class StorageUnavailableError(MultibaseException):
    """Raised when a persistence backend cannot be read or written."""

    def __init__(self, backend: str, message: Optional[str] = None):
        """Initialize with the backend name and an optional reason."""
        self.backend = backend
        self.message = message or f"Storage backend '{backend}' is unavailable"
        super().__init__(self.message)


class DeliveryError(MultibaseException):
    """Raised by a transport when a request could not be delivered."""

    def __init__(self, url: str, message: Optional[str] = None):
        """Initialize with the target URL and an optional reason."""
        self.url = url
        self.message = message or f"Could not deliver payload to {url}"
        super().__init__(self.message)
