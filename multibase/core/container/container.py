"""Dependency container for one SDK session.

An immutable dataclass holding the wired core components. It has no
construction logic; that belongs in the factory. Tests construct it
directly with fakes.
"""

from dataclasses import dataclass

from multibase.core.protocols import HttpTransport, KeyValueStore
from multibase.domains.delivery.fanout import DeliveryFanout
from multibase.domains.events.queue import EventQueue
from multibase.domains.identity.store import IdentityStore


@dataclass(frozen=True)
class Container:
    """Components owned by an initialized ``Multibase`` session."""

    short_store: KeyValueStore
    long_store: KeyValueStore
    transport: HttpTransport
    identity_store: IdentityStore
    delivery: DeliveryFanout
    event_queue: EventQueue
    owns_transport: bool = False
