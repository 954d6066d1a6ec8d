"""Root conftest for pytest configuration and shared fixtures.

Loaded before both testpaths (tests/ and multibase/), so fixtures are
available to centralized tests and colocated component tests alike.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment: keep developer MULTIBASE_* settings out of the test run
# ---------------------------------------------------------------------------
for _name in [name for name in os.environ if name.upper().startswith("MULTIBASE_")]:
    del os.environ[_name]


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def short_store():
    """Fake cookie-like store."""
    from multibase.adapters.storage.fake import FakeStore

    return FakeStore("cookie")


@pytest.fixture
def long_store():
    """Fake local-storage-like store."""
    from multibase.adapters.storage.fake import FakeStore

    return FakeStore("local")


@pytest.fixture
def identity_store(short_store, long_store):
    """IdentityStore wired to the fake stores."""
    from multibase.domains.identity.store import IdentityStore

    return IdentityStore(short_store=short_store, long_store=long_store)


@pytest.fixture
def fake_transport():
    """Fake HTTP transport that records requests."""
    from multibase.adapters.transport.fake import FakeTransport

    return FakeTransport()


@pytest.fixture
def mock_logger():
    """MagicMock standing in for a logger, for asserting on log calls."""
    from unittest.mock import MagicMock

    return MagicMock()
