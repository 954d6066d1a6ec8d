"""httpx transport adapter.

Implements the HttpTransport protocol on top of one shared
``httpx.AsyncClient`` so every endpoint request reuses the connection pool.
"""

from typing import Any, Optional

import httpx

from multibase.core.exceptions import DeliveryError


class HttpxTransport:
    """Send JSON POST requests with httpx.

    Any HTTP response is returned as-is, whatever its status code. Only
    transport-level failures (connect errors, timeouts, protocol errors)
    raise, as DeliveryError.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Pre-built client. Created lazily when omitted.
            timeout: Request timeout in seconds. None keeps the httpx default.
        """
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            if self._timeout is None:
                self._client = httpx.AsyncClient()
            else:
                self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def post(self, url: str, *, headers: dict[str, str], json: Any) -> httpx.Response:
        """POST ``json`` to ``url`` and return the response.

        Raises:
            DeliveryError: If the request could not be completed.
        """
        try:
            return await self._get_client().post(url, headers=headers, json=json)
        except httpx.TimeoutException as exc:
            raise DeliveryError(url, f"Request to {url} timed out") from exc
        except httpx.ConnectError as exc:
            raise DeliveryError(url, f"Could not connect to {url}") from exc
        except httpx.HTTPError as exc:
            raise DeliveryError(url, f"Failed to reach {url}: {exc}") from exc

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
