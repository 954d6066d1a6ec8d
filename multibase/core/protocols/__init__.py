"""Core protocols for dependency injection."""

from multibase.core.protocols.delivery import Delivery
from multibase.core.protocols.storage import KeyValueStore
from multibase.core.protocols.transport import HttpTransport

__all__ = [
    "Delivery",
    "HttpTransport",
    "KeyValueStore",
]
