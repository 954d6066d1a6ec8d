"""Unit tests for the Multibase session facade.

Wires the real identity store, fan-out and queue to fake stores and a fake
transport, so these exercise the full track/identify pipeline.
"""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from multibase import Multibase
from multibase.adapters.storage import MemoryStore
from multibase.adapters.storage.fake import FakeStore
from multibase.adapters.transport import HttpxTransport
from multibase.adapters.transport.fake import FakeTransport
from multibase.core.config.constants import DEFAULT_REMOTE_URL, IDENTITY_KEY

TOKEN = "mb_test_token"
ADDRESS = "0x" + "AbCdEf0123" * 4
WINDOW = 0.1
SETTLE = WINDOW * 3


def _make_client(configuration=None, *, token=TOKEN, transport=None, logger=None):
    transport = transport or FakeTransport()
    logger = logger or MagicMock()
    client = Multibase(
        short_store=FakeStore("cookie"),
        long_store=FakeStore("local"),
        transport=transport,
        logger=logger,
    )
    client.init(token, {"debounce_seconds": WINDOW, **(configuration or {})})
    return client, transport, logger


# ---------------------------------------------------------------------------
# init()
# ---------------------------------------------------------------------------


class TestInit:
    def test_successful_init(self):
        client, _, _ = _make_client()

        assert client.loaded
        assert client.config.token == TOKEN
        assert client.config.remote_url == DEFAULT_REMOTE_URL

    def test_missing_token(self):
        client, _, logger = _make_client(token="")

        assert not client.loaded
        logger.error.assert_called_once_with("API key is required")

    def test_second_init_warns_and_keeps_first_config(self):
        client, _, logger = _make_client()

        client.init("other-token")

        assert client.config.token == TOKEN
        logger.warning.assert_called_once_with("Multibase SDK already initialized")

    def test_invalid_configuration_leaves_sdk_uninitialized(self):
        client, _, logger = _make_client({"enabled": "sometimes", "unknownKey": 1})

        assert not client.loaded
        messages = [c.args[0] for c in logger.error.call_args_list]
        assert any(m.startswith("Error in /enabled") for m in messages)
        assert any(m.startswith("Error in /unknownKey") for m in messages)
        assert messages[-1] == "Invalid configuration for Multibase SDK"

    def test_camel_case_overrides(self):
        client, _, _ = _make_client(
            {
                "remoteUrl": "https://primary.example.com/",
                "additionalEndpoints": [{"remoteUrl": "https://extra.example.com", "token": "t2"}],
            }
        )

        endpoints = client.config.endpoints()
        assert [e.remote_url for e in endpoints] == [
            "https://primary.example.com",
            "https://extra.example.com",
        ]
        assert [e.token for e in endpoints] == [TOKEN, "t2"]

    def test_init_returns_self_for_chaining(self):
        client = Multibase(transport=FakeTransport(), logger=MagicMock())

        assert client.init(TOKEN) is client

    def test_debug_lowers_sdk_log_level(self):
        sdk_logger = logging.getLogger("multibase")
        previous = sdk_logger.level
        try:
            _make_client({"debug": True})
            assert sdk_logger.level == logging.DEBUG
        finally:
            sdk_logger.setLevel(previous)


# ---------------------------------------------------------------------------
# Not initialized
# ---------------------------------------------------------------------------


class TestNotInitialized:
    @pytest.mark.asyncio
    async def test_operations_are_rejected(self):
        transport, logger = FakeTransport(), MagicMock()
        client = Multibase(transport=transport, logger=logger)

        client.track("click")
        assert await client.identify(ADDRESS) is None
        assert await client.flush() is None

        assert transport.requests == []
        assert logger.error.call_count == 3
        logger.error.assert_called_with("Multibase SDK not initialized")

    def test_user_id_is_none(self):
        assert Multibase(logger=MagicMock()).user_id is None

    @pytest.mark.asyncio
    async def test_aclose_is_noop(self):
        await Multibase(logger=MagicMock()).aclose()


# ---------------------------------------------------------------------------
# track()
# ---------------------------------------------------------------------------


class TestTrack:
    @pytest.mark.asyncio
    async def test_click_then_scroll_sends_one_batch(self):
        client, transport, _ = _make_client()

        client.track("click")
        await asyncio.sleep(WINDOW / 5)
        client.track("scroll", {"depth": 0.5})
        await asyncio.sleep(SETTLE)

        requests = transport.requests_to("event/track")
        assert len(requests) == 1
        body = requests[0].json
        assert body["id"] == client.user_id
        assert [e["event"] for e in body["events"]] == ["click", "scroll"]
        assert body["events"][1]["properties"] == {"depth": 0.5}
        assert body["events"][0]["timestamp"] < body["events"][1]["timestamp"]

    @pytest.mark.asyncio
    async def test_batch_fans_out_to_every_endpoint(self):
        client, transport, _ = _make_client(
            {"additional_endpoints": [{"remote_url": "https://extra.example.com"}]}
        )

        client.track("click")
        await client.flush()

        assert sorted(transport.urls) == [
            f"{DEFAULT_REMOTE_URL}/event/track",
            "https://extra.example.com/event/track",
        ]

    @pytest.mark.asyncio
    async def test_invalid_properties_logged_not_queued(self):
        client, transport, logger = _make_client()

        client.track("click", {"bad": object()})
        await client.flush()

        assert transport.requests == []
        logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_non_finite_property_drops_only_that_event(self):
        client, transport, logger = _make_client()

        client.track("good", {"a": 1})
        client.track("bad", {"x": float("nan")})
        outcomes = await client.flush()

        assert [o.status_code for o in outcomes] == [200]
        events = transport.requests_to("event/track")[0].json["events"]
        assert [e["event"] for e in events] == ["good"]
        logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_failed_delivery_is_not_retried(self):
        transport = FakeTransport()
        transport.script("https://", ConnectionError("offline"))
        client, _, _ = _make_client(transport=transport)

        client.track("click")
        await asyncio.sleep(SETTLE)
        client.track("scroll")
        await asyncio.sleep(SETTLE)

        batches = [r.json["events"] for r in transport.requests_to("event/track")]
        assert [[e["event"] for e in batch] for batch in batches] == [["click"], ["scroll"]]


# ---------------------------------------------------------------------------
# identify()
# ---------------------------------------------------------------------------


class TestIdentify:
    @pytest.mark.asyncio
    async def test_sends_immediately_with_normalized_address(self):
        client, transport, _ = _make_client()

        outcomes = await client.identify(ADDRESS, {"plan": "pro"})

        assert [o.status_code for o in outcomes] == [200]
        request = transport.requests_to("user/identify")[0]
        assert request.json == {
            "id": client.user_id,
            "address": ADDRESS.lower(),
            "properties": {"plan": "pro"},
        }
        assert request.headers["x-api-key"] == TOKEN

    @pytest.mark.asyncio
    async def test_bypasses_queue(self):
        client, transport, _ = _make_client()

        client.track("click")
        await client.identify(ADDRESS)

        assert len(transport.requests_to("user/identify")) == 1
        assert transport.requests_to("event/track") == []
        assert [e.name for e in client._container.event_queue.pending] == ["click"]

    @pytest.mark.parametrize(
        "address",
        ["", "0x123", "0x" + "g" * 40, "0x" + "a" * 41, ("0x" + "a" * 40) + "\n"],
        ids=["empty", "short", "non_hex", "long", "trailing_newline"],
    )
    @pytest.mark.asyncio
    async def test_invalid_address(self, address):
        client, transport, logger = _make_client()

        assert await client.identify(address) is None

        assert transport.requests == []
        logger.error.assert_called_once_with("Invalid address")

    @pytest.mark.asyncio
    async def test_address_without_prefix_accepted(self):
        client, transport, _ = _make_client()

        await client.identify("F" * 40)

        assert transport.requests[0].json["address"] == "f" * 40


# ---------------------------------------------------------------------------
# Suppression
# ---------------------------------------------------------------------------


class TestDisabled:
    @pytest.mark.asyncio
    async def test_disabled_config_sends_nothing(self):
        client, transport, _ = _make_client({"enabled": False})

        client.track("click")
        assert await client.identify(ADDRESS) is None
        await asyncio.sleep(SETTLE)

        assert transport.requests == []
        assert client._container.event_queue.pending == []

    @pytest.mark.asyncio
    async def test_blocked_user_agent_sends_nothing(self):
        client, transport, _ = _make_client(
            {"user_agent": "Mozilla/5.0 (compatible; Googlebot/2.1)"}
        )

        client.track("click")
        await client.identify(ADDRESS)
        await asyncio.sleep(SETTLE)

        assert client.is_disabled()
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_regular_user_agent_is_not_blocked(self):
        client, _, _ = _make_client(
            {"user_agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) Safari/605.1.15"}
        )

        assert not client.is_disabled()


# ---------------------------------------------------------------------------
# Identity and lifecycle
# ---------------------------------------------------------------------------


class TestIdentityAndLifecycle:
    def test_user_id_is_stable_and_persisted(self):
        short_store, long_store = FakeStore("cookie"), FakeStore("local")
        client = Multibase(
            short_store=short_store, long_store=long_store, transport=FakeTransport(), logger=MagicMock()
        ).init(TOKEN)

        first = client.user_id

        assert client.user_id == first
        assert short_store.values[IDENTITY_KEY] == first
        assert long_store.values[IDENTITY_KEY] == first

    @pytest.mark.asyncio
    async def test_async_context_manager_flushes_and_leaves_injected_transport_open(self):
        transport = FakeTransport()
        client = Multibase(
            short_store=FakeStore("cookie"),
            long_store=FakeStore("local"),
            transport=transport,
            logger=MagicMock(),
        ).init(TOKEN, {"debounce_seconds": 60})

        async with client as mb:
            mb.track("click")

        assert len(transport.requests_to("event/track")) == 1
        assert not transport.closed

    @pytest.mark.asyncio
    async def test_aclose_closes_sdk_built_transport(self):
        client = Multibase(
            short_store=FakeStore("cookie"), long_store=FakeStore("local"), logger=MagicMock()
        ).init(TOKEN)

        with patch.object(HttpxTransport, "aclose", new_callable=AsyncMock) as aclose:
            await client.aclose()

        aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_identify_and_flush_run_concurrently(self):
        transport = FakeTransport(delay=0.05)
        client, _, _ = _make_client(transport=transport)

        client.track("click")
        await asyncio.gather(client.flush(), client.identify(ADDRESS))

        assert len(transport.requests_to("event/track")) == 1
        assert len(transport.requests_to("user/identify")) == 1

    @pytest.mark.asyncio
    async def test_failing_host_store_never_reaches_caller(self):
        denied = PermissionError("storage disabled by host")
        transport = FakeTransport()
        client = Multibase(
            short_store=FakeStore("cookie", fail_reads=True, fail_writes=True, error=denied),
            long_store=MemoryStore(),
            transport=transport,
            logger=MagicMock(),
        ).init(TOKEN)

        outcomes = await client.identify(ADDRESS)

        assert [o.status_code for o in outcomes] == [200]
        assert transport.requests[0].json["id"] == client.user_id
