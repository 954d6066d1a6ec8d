"""Fake delivery for testing.

Records every send() without building requests, so queue tests can assert
on batches directly.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import httpx


@dataclass
class SentPayload:
    """Single recorded send() call."""

    path: str
    body: dict[str, Any]


class FakeDelivery:
    """Test implementation of the Delivery protocol.

    Usage:
        delivery = FakeDelivery()
        queue = EventQueue(delivery, debounce_seconds=0.05)
        queue.enqueue(Event(name="click"))
        await asyncio.sleep(0.1)

        assert delivery.event_names(0) == ["click"]
    """

    def __init__(
        self,
        outcomes: Optional[list[Optional[httpx.Response]]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        """Initialize the fake.

        Args:
            outcomes: Returned from every send(). Defaults to one 200 response.
            error: If set, raised from every send() after recording it.
        """
        self.sent: list[SentPayload] = []
        self._outcomes = outcomes
        self._error = error
        self._gate: Optional[asyncio.Event] = None

    def hold(self) -> asyncio.Event:
        """Block every send() until the returned event is set."""
        self._gate = asyncio.Event()
        return self._gate

    async def send(self, path: str, body: dict[str, Any]) -> list[Optional[httpx.Response]]:
        """Record the payload and return the scripted outcomes."""
        self.sent.append(SentPayload(path=path, body=body))
        if self._gate is not None:
            await self._gate.wait()
        if self._error is not None:
            raise self._error
        if self._outcomes is not None:
            return list(self._outcomes)
        return [httpx.Response(200, request=httpx.Request("POST", f"https://fake/{path}"))]

    # Test helpers

    def event_names(self, index: int) -> list[str]:
        """Event names of the ``index``-th batch, in order."""
        return [e["event"] for e in self.sent[index].body["events"]]

    def clear(self) -> None:
        """Forget recorded payloads."""
        self.sent.clear()
