"""Container factory.

All wiring decisions live here: which storage backends to use, which HTTP
transport, and how the identity store, fan-out and queue are connected.
Anything passed in explicitly wins over what the configuration would build.
A transport passed in stays owned by the caller and is never closed here.
"""

from typing import Callable, Optional

from multibase.adapters.storage import JsonFileStore, MemoryStore
from multibase.adapters.transport import HttpxTransport
from multibase.core.config import MultibaseConfig
from multibase.core.container.container import Container
from multibase.core.logging import ContextualLogger
from multibase.core.logging import logger as default_logger
from multibase.core.protocols import HttpTransport, KeyValueStore
from multibase.domains.delivery.fanout import DeliveryFanout
from multibase.domains.events.queue import EventQueue
from multibase.domains.identity.store import IdentityStore

SHORT_STORE_FILENAME = "cookies.json"
LONG_STORE_FILENAME = "local_storage.json"


def create_container(
    config: MultibaseConfig,
    *,
    is_suppressed: Callable[[], bool],
    short_store: Optional[KeyValueStore] = None,
    long_store: Optional[KeyValueStore] = None,
    transport: Optional[HttpTransport] = None,
    logger: Optional[ContextualLogger] = None,
) -> Container:
    """Build every core component for a validated configuration.

    Args:
        config: Validated configuration.
        is_suppressed: Suppression check consulted by the event queue.
        short_store: Cookie-like backend override.
        long_store: Local-storage-like backend override.
        transport: HTTP transport override.
        logger: Base logger; each component gets a derived one.

    Returns:
        A fully wired Container.
    """
    logger = logger or default_logger
    if short_store is None or long_store is None:
        default_short, default_long = _create_stores(config)
        short_store = short_store or default_short
        long_store = long_store or default_long
    owns_transport = transport is None
    if transport is None:
        transport = HttpxTransport(timeout=config.request_timeout)

    identity_store = IdentityStore(
        short_store=short_store,
        long_store=long_store,
        logger=logger.with_context(component="identity_store"),
    )
    delivery = DeliveryFanout(
        endpoints=config.endpoints(),
        identity_store=identity_store,
        transport=transport,
        logger=logger.with_context(component="delivery"),
    )
    event_queue = EventQueue(
        delivery=delivery,
        debounce_seconds=config.debounce_seconds,
        is_suppressed=is_suppressed,
        logger=logger.with_context(component="event_queue"),
    )

    return Container(
        short_store=short_store,
        long_store=long_store,
        transport=transport,
        identity_store=identity_store,
        delivery=delivery,
        event_queue=event_queue,
        owns_transport=owns_transport,
    )


def _create_stores(config: MultibaseConfig) -> tuple[KeyValueStore, KeyValueStore]:
    """File-backed stores under ``storage_dir``, or in-memory when it is unset."""
    if config.storage_dir is None:
        return MemoryStore(name="cookie"), MemoryStore(name="local")
    return (
        JsonFileStore(config.storage_dir / SHORT_STORE_FILENAME, name="cookie"),
        JsonFileStore(config.storage_dir / LONG_STORE_FILENAME, name="local"),
    )
