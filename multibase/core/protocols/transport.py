"""HttpTransport protocol for outbound POST requests.

The delivery fan-out issues one request per configured endpoint through this
interface, so tests can swap in a recording fake.
"""

from typing import Any, Protocol, runtime_checkable

import httpx


@runtime_checkable
class HttpTransport(Protocol):
    """Protocol for sending a JSON POST request."""

    async def post(self, url: str, *, headers: dict[str, str], json: Any) -> httpx.Response:
        """POST ``json`` to ``url``.

        Returns the response for any HTTP status. Raises on transport-level
        failure (connection refused, DNS, timeout).
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
