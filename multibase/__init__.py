"""Multibase client-side telemetry SDK.

Buffers track events into debounced batches, reconciles a durable user
identity across two local stores, and delivers every payload to each
configured endpoint independently.
"""

from multibase.client import Multibase
from multibase.core.config import Endpoint, MultibaseConfig
from multibase.domains.events.types import Event, Identify, Properties

__version__ = "0.1.0"

__all__ = [
    "Endpoint",
    "Event",
    "Identify",
    "Multibase",
    "MultibaseConfig",
    "Properties",
    "__version__",
]
