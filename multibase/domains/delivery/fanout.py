"""Delivery fan-out: one payload posted to every endpoint with isolated failures.

Each configured endpoint gets its own POST, all issued concurrently. A
transport failure on one endpoint is logged and recorded as None in the
outcome list; it never cancels sibling requests and never reaches the caller.
The call settles only once every endpoint attempt has settled.
"""

import asyncio
import logging
from typing import Any, Optional, Sequence, Union

import httpx

from multibase.core.config.constants import API_KEY_HEADER
from multibase.core.config.settings import Endpoint
from multibase.core.logging import logger as default_logger
from multibase.core.protocols.transport import HttpTransport
from multibase.domains.identity.store import IdentityStore


class DeliveryFanout:
    """Implements the Delivery protocol over an HttpTransport."""

    def __init__(
        self,
        endpoints: Sequence[Endpoint],
        identity_store: IdentityStore,
        transport: HttpTransport,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ) -> None:
        """Initialize the fan-out.

        Args:
            endpoints: Destinations, fixed for the lifetime of the fan-out.
            identity_store: Stamps each payload with the current identity.
            transport: Sends the individual requests.
            logger: Logger instance. Defaults to the SDK logger.
        """
        self._endpoints = tuple(endpoints)
        self._identity_store = identity_store
        self._transport = transport
        self._logger = logger or default_logger

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        """Configured endpoints, primary first."""
        return self._endpoints

    async def send(self, path: str, body: dict[str, Any]) -> list[Optional[httpx.Response]]:
        """POST ``body`` to ``{endpoint}/{path}`` on every endpoint concurrently.

        Identity fields are merged under ``body``; keys already present in
        ``body`` win.

        Args:
            path: Path suffix such as ``event/track``.
            body: JSON-serializable payload.

        Returns:
            One entry per endpoint, in endpoint order: the response, or None
            if the request failed at the transport level.
        """
        try:
            identity = self._identity_store.read()
        except Exception as e:
            self._logger.error(f"Could not resolve the user identity, nothing sent: {e}")
            return [None] * len(self._endpoints)
        payload = {**identity.to_payload(), **body}

        results = await asyncio.gather(
            *[self._post(endpoint, path, payload) for endpoint in self._endpoints],
            return_exceptions=True,
        )

        outcomes: list[Optional[httpx.Response]] = []
        for endpoint, result in zip(self._endpoints, results):
            if isinstance(result, BaseException):
                # _post already catches Exception; this is cancellation or worse
                self._logger.error(
                    f"Request to {endpoint.url_for(path)} did not complete: {result!r}"
                )
                outcomes.append(None)
            else:
                outcomes.append(result)
        return outcomes

    async def _post(
        self, endpoint: Endpoint, path: str, payload: dict[str, Any]
    ) -> Optional[httpx.Response]:
        url = endpoint.url_for(path)
        headers = {
            "Content-Type": "application/json",
            API_KEY_HEADER: endpoint.token or "",
        }
        try:
            response = await self._transport.post(url, headers=headers, json=payload)
        except Exception as e:
            self._logger.error(f"There was an error connecting to the server at {url}: {e}")
            return None

        if not response.is_success:
            self._logger.warning(f"Endpoint {url} responded with HTTP {response.status_code}")
        return response
