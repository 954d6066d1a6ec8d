"""Fake HTTP transport for testing.

Records requests and replays scripted outcomes without touching the network.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx

Outcome = Union[httpx.Response, Exception, int]


@dataclass
class RecordedRequest:
    """Single recorded POST."""

    url: str
    headers: dict[str, str]
    json: Any


class FakeTransport:
    """Test implementation of HttpTransport.

    Outcomes are scripted per URL prefix: an ``httpx.Response`` is returned,
    an ``int`` becomes a response with that status code, and an exception
    instance is raised. Unscripted URLs get a 200 response.

    Usage:
        transport = FakeTransport()
        transport.script("https://b.example.com", httpx.ConnectError("down"))
        fanout = DeliveryFanout(endpoints, identity_store, transport=transport)
        await fanout.send("event/track", {"events": []})

        assert transport.urls == ["https://a.example.com/event/track", ...]
    """

    def __init__(self, delay: float = 0.0) -> None:
        """Initialize the fake.

        Args:
            delay: Seconds each post() waits before settling.
        """
        self.requests: list[RecordedRequest] = []
        self.closed = False
        self._delay = delay
        self._scripts: list[tuple[str, Outcome]] = []
        self._gates: dict[str, asyncio.Event] = {}

    def script(self, url_prefix: str, outcome: Outcome) -> None:
        """Set the outcome for every request whose URL starts with ``url_prefix``."""
        self._scripts.append((url_prefix, outcome))

    def hold(self, url_prefix: str) -> asyncio.Event:
        """Block requests to ``url_prefix`` until the returned event is set."""
        gate = asyncio.Event()
        self._gates[url_prefix] = gate
        return gate

    async def post(self, url: str, *, headers: dict[str, str], json: Any) -> httpx.Response:
        """Record the request and return or raise the scripted outcome."""
        self.requests.append(RecordedRequest(url=url, headers=dict(headers), json=json))

        if self._delay:
            await asyncio.sleep(self._delay)
        for prefix, gate in self._gates.items():
            if url.startswith(prefix):
                await gate.wait()

        outcome = self._outcome_for(url)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome, request=httpx.Request("POST", url))
        return outcome

    async def aclose(self) -> None:
        """Record that the transport was closed."""
        self.closed = True

    # Test helpers

    @property
    def urls(self) -> list[str]:
        """URLs of all recorded requests, in call order."""
        return [r.url for r in self.requests]

    def requests_to(self, path: str) -> list[RecordedRequest]:
        """All recorded requests whose URL ends with ``path``."""
        return [r for r in self.requests if r.url.endswith(path)]

    def clear(self) -> None:
        """Forget recorded requests."""
        self.requests.clear()

    def _outcome_for(self, url: str) -> Outcome:
        outcome: Optional[Outcome] = None
        for prefix, scripted in self._scripts:
            if url.startswith(prefix):
                outcome = scripted
        return outcome if outcome is not None else 200
