"""Multibase session facade.

One ``Multibase`` object is one SDK session: construct it, call ``init()``
once with a token, then ``track()`` and ``identify()``. Pass the session to
the code that needs it rather than keeping it in a module global.

Telemetry must never break the host application, so no method here raises:
configuration problems, invalid input and delivery failures all end in a
log line.

Usage:
    async with Multibase().init("mb_token", {"debug": True}) as mb:
        mb.track("click", {"button": "buy"})
        await mb.identify("0x" + "ab" * 20)
"""

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from multibase.core.config import MultibaseConfig
from multibase.core.config.constants import IDENTIFY_PATH
from multibase.core.container import Container, create_container
from multibase.core.exceptions import ConfigurationError, InvalidAddressError
from multibase.core.logging import ContextualLogger, LoggerConfigurator
from multibase.core.logging import logger as default_logger
from multibase.core.protocols import HttpTransport, KeyValueStore
from multibase.domains.events.types import Event, Identify, Properties
from multibase.validation import get_valid_address, is_blocked_user_agent


class Multibase:
    """Client-side telemetry session."""

    def __init__(
        self,
        *,
        short_store: Optional[KeyValueStore] = None,
        long_store: Optional[KeyValueStore] = None,
        transport: Optional[HttpTransport] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Create an uninitialized session.

        Args:
            short_store: Cookie-like identity backend. Built from config if omitted.
            long_store: Local-storage-like identity backend. Built from config if omitted.
            transport: HTTP transport. An httpx transport is built if omitted.
            logger: Logger instance. Defaults to the SDK logger.
        """
        self._short_store = short_store
        self._long_store = long_store
        self._transport = transport
        self._logger = logger or default_logger

        self._config = MultibaseConfig.model_construct()
        self._container: Optional[Container] = None

    # -- lifecycle -----------------------------------------------------------

    @property
    def loaded(self) -> bool:
        """Whether ``init()`` has completed successfully."""
        return self._container is not None

    @property
    def config(self) -> MultibaseConfig:
        """The active configuration (defaults until ``init()`` succeeds)."""
        return self._config

    def init(self, token: str, configuration: Optional[dict[str, Any]] = None) -> "Multibase":
        """Validate configuration and wire the session.

        Args:
            token: SDK token for the primary endpoint.
            configuration: Partial overrides of the defaults.

        Returns:
            self, so calls can be chained.
        """
        if not token:
            self._logger.error("API key is required")
            return self

        if self.loaded:
            self._logger.warning("Multibase SDK already initialized")
            return self

        try:
            config = self._build_config(token, configuration)
        except ConfigurationError as e:
            for line in e.errors:
                self._logger.error(line)
            self._logger.error(e.message)
            return self

        self._config = config
        LoggerConfigurator.set_debug(config.debug)
        self._container = create_container(
            config,
            is_suppressed=self.is_disabled,
            short_store=self._short_store,
            long_store=self._long_store,
            transport=self._transport,
            logger=self._logger,
        )
        self._debug_log(f"Initialized with {len(config.endpoints())} endpoint(s)")
        return self

    async def flush(self) -> Optional[list[Optional[httpx.Response]]]:
        """Send queued events now instead of waiting for the debounce timer."""
        if not self._ensure_loaded():
            return None
        return await self._container.event_queue.flush()

    async def aclose(self) -> None:
        """Flush pending events, wait for in-flight batches and close an SDK-built transport."""
        if self._container is None:
            return
        await self._container.event_queue.aclose()
        if self._container.owns_transport:
            await self._container.transport.aclose()

    async def __aenter__(self) -> "Multibase":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # -- public operations ---------------------------------------------------

    @property
    def user_id(self) -> Optional[str]:
        """The reconciled identity, or None before ``init()``."""
        if self._container is None:
            return None
        return self._container.identity_store.read().id

    def is_disabled(self) -> bool:
        """True when tracking is switched off or the environment is blocked."""
        if is_blocked_user_agent(self._config.user_agent):
            return True
        if not self._config.enabled:
            return True
        return False

    def track(self, event: str, properties: Optional[Properties] = None) -> None:
        """Queue an event for the next batch."""
        if not self._ensure_loaded():
            return
        if self.is_disabled():
            return

        self._debug_log(f"Tracking event '{event}'...")
        try:
            record = Event(name=event, properties=properties)
        except ValidationError as e:
            self._logger.error(f"Invalid event '{event}': {_first_error(e)}")
            return
        self._container.event_queue.enqueue(record)

    async def identify(
        self, address: str, properties: Optional[Properties] = None
    ) -> Optional[list[Optional[httpx.Response]]]:
        """Associate the current identity with ``address``, bypassing the queue.

        Returns:
            Per-endpoint outcomes, or None when nothing was sent.
        """
        if not self._ensure_loaded():
            return None
        if self.is_disabled():
            return None

        self._debug_log(f"Identifying user with address '{address}'...")
        try:
            record = self._build_identify(address, properties)
        except InvalidAddressError:
            self._logger.error("Invalid address")
            return None
        except ValidationError as e:
            self._logger.error(f"Invalid identify properties: {_first_error(e)}")
            return None

        return await self._container.delivery.send(IDENTIFY_PATH, record.to_payload())

    # -- helpers -------------------------------------------------------------

    def _ensure_loaded(self) -> bool:
        if self._container is None:
            self._logger.error("Multibase SDK not initialized")
            return False
        return True

    def _debug_log(self, message: str) -> None:
        if self._config.debug:
            self._logger.debug(message)

    @staticmethod
    def _build_config(token: str, configuration: Optional[dict[str, Any]]) -> MultibaseConfig:
        """Merge defaults, token and overrides.

        Raises:
            ConfigurationError: With one line per invalid field.
        """
        try:
            return MultibaseConfig(token=token).merge_with(configuration)
        except ValidationError as e:
            errors = [
                f"Error in /{'/'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise ConfigurationError(errors=errors) from e

    @staticmethod
    def _build_identify(address: str, properties: Optional[Properties]) -> Identify:
        valid_address = get_valid_address(address)
        if valid_address is None:
            raise InvalidAddressError(address)
        return Identify(address=valid_address, properties=properties)


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    return details[0]["msg"] if details else str(error)
