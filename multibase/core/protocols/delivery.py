"""Delivery protocol consumed by the event queue and the identify path."""

from typing import Any, Optional, Protocol, runtime_checkable

import httpx


@runtime_checkable
class Delivery(Protocol):
    """Protocol for delivering one logical payload to every endpoint."""

    async def send(self, path: str, body: dict[str, Any]) -> list[Optional[httpx.Response]]:
        """Deliver ``body`` to ``{endpoint}/{path}`` for every endpoint.

        Never raises. Returns one outcome per endpoint, None where the
        request failed at the transport level.
        """
        ...
