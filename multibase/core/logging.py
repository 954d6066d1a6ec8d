"""Logging for the Multibase SDK.

All SDK output goes through the standard ``logging`` module under the
``multibase`` logger hierarchy so host applications control handlers and
levels. ``ContextualLogger`` adds structured dimensions and a message prefix.

Usage:
    from multibase.core.logging import logger

    logger.error("Invalid address")
    queue_logger = logger.with_context(component="event_queue")
"""

import logging
from typing import Any, MutableMapping, Optional

ROOT_LOGGER_NAME = "multibase"
DEFAULT_PREFIX = "[multibase] "


class ContextualLogger(logging.LoggerAdapter):
    """LoggerAdapter that carries context dimensions and a message prefix.

    Dimensions are attached to every record via ``extra`` so structured
    handlers can pick them up. Derived loggers are cheap and immutable:
    ``with_context`` and ``with_prefix`` return new adapters.
    """

    def __init__(
        self,
        logger: logging.Logger,
        prefix: str = "",
        dimensions: Optional[dict[str, Any]] = None,
    ) -> None:
        """Wrap ``logger`` with a prefix and context dimensions."""
        super().__init__(logger, dict(dimensions or {}))
        self.prefix = prefix
        self.dimensions: dict[str, Any] = dict(dimensions or {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        """Prefix the message and merge dimensions into ``extra``."""
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return f"{self.prefix}{msg}", kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with additional context dimensions."""
        merged = {**self.dimensions, **dimensions}
        return ContextualLogger(self.logger, prefix=self.prefix, dimensions=merged)

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a new logger whose messages carry ``prefix``."""
        return ContextualLogger(self.logger, prefix=prefix, dimensions=self.dimensions)


class LoggerConfigurator:
    """Builds ``ContextualLogger`` instances for SDK components."""

    @staticmethod
    def configure_logger(
        name: str,
        *,
        prefix: str = DEFAULT_PREFIX,
        dimensions: Optional[dict[str, Any]] = None,
    ) -> ContextualLogger:
        """Return a contextual logger for ``name`` under the SDK hierarchy.

        Args:
            name: Logger name. Names outside ``multibase`` are nested under it.
            prefix: Message prefix.
            dimensions: Context dimensions attached to every record.

        Returns:
            A configured ContextualLogger.
        """
        if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return ContextualLogger(logging.getLogger(name), prefix=prefix, dimensions=dimensions)

    @staticmethod
    def set_debug(enabled: bool) -> None:
        """Lower the SDK logger to DEBUG when ``enabled``, otherwise leave it alone."""
        if enabled:
            logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.DEBUG)


# Library logger: the host application decides where records go.
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())

logger = LoggerConfigurator.configure_logger(ROOT_LOGGER_NAME)
