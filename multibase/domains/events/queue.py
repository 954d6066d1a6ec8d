"""Event queue: debounced batching of tracked events.

``enqueue()`` appends to an ordered buffer and restarts a single debounce
timer. When the timer fires without another enqueue in between, the whole
buffer is swapped out and delivered as one ``{"events": [...]}`` batch.

Delivery is at-most-once: a batch is swapped out before its network phase
starts, so events enqueued meanwhile go to the next batch, and a batch that
fails is dropped with a logged error rather than requeued.
"""

import asyncio
import logging
from typing import Callable, Optional, Union

import httpx

from multibase.core.config.constants import DEFAULT_DEBOUNCE_SECONDS, TRACK_PATH
from multibase.core.logging import logger as default_logger
from multibase.core.protocols.delivery import Delivery
from multibase.domains.events.types import Event


def _never_suppressed() -> bool:
    return False


class EventQueue:
    """In-memory accumulator with a debounce timer.

    At most one timer is armed at any time; every enqueue cancels it and arms
    a fresh one. Flushes run as tasks on the running event loop, and once a
    flush's network phase has started it runs to completion regardless of
    later enqueues.
    """

    def __init__(
        self,
        delivery: Delivery,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        is_suppressed: Callable[[], bool] = _never_suppressed,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ) -> None:
        """Initialize the queue.

        Args:
            delivery: Sends each batch to every endpoint.
            debounce_seconds: Quiet period before a batch is flushed.
            is_suppressed: Checked on enqueue and again when the timer fires;
                while it returns True nothing is queued or sent.
            logger: Logger instance. Defaults to the SDK logger.
        """
        self._delivery = delivery
        self._debounce = debounce_seconds
        self._is_suppressed = is_suppressed
        self._logger = logger or default_logger

        self._pending: list[Event] = []
        self._timer: Optional[asyncio.TimerHandle] = None
        self._flushes: set[asyncio.Task] = set()

    @property
    def pending(self) -> list[Event]:
        """Snapshot of events waiting for the next flush, in enqueue order."""
        return list(self._pending)

    @property
    def timer_armed(self) -> bool:
        """Whether a debounce timer is currently pending."""
        return self._timer is not None

    def enqueue(self, event: Event) -> None:
        """Buffer ``event`` and restart the debounce countdown."""
        if self._is_suppressed():
            return
        self._pending.append(event)
        self._arm_timer()

    async def flush(self) -> Optional[list[Optional[httpx.Response]]]:
        """Deliver every pending event as one batch.

        Returns the per-endpoint outcomes, or None when nothing was sent
        (suppressed or empty buffer).
        """
        self._cancel_timer()
        if self._is_suppressed():
            return None
        if not self._pending:
            return None

        batch, self._pending = self._pending, []
        outcomes = await self._delivery.send(
            TRACK_PATH, {"events": [event.to_payload() for event in batch]}
        )

        if outcomes and all(outcome is None for outcome in outcomes):
            self._logger.error(
                f"Dropping batch of {len(batch)} event(s): delivery failed on every endpoint"
            )
        else:
            self._logger.debug(f"Flushed batch of {len(batch)} event(s)")
        return outcomes

    async def join(self) -> None:
        """Wait until every scheduled flush has settled."""
        while self._flushes:
            await asyncio.gather(*list(self._flushes), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel the timer, flush what is pending and wait for in-flight flushes."""
        await self._run_scheduled_flush()
        await self.join()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _arm_timer(self) -> None:
        if self._is_suppressed():
            return
        self._cancel_timer()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._logger.warning(
                "No running event loop; events stay queued until the next flush"
            )
            return
        self._timer = loop.call_later(self._debounce, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        task = asyncio.get_running_loop().create_task(self._run_scheduled_flush())
        self._flushes.add(task)
        task.add_done_callback(self._flushes.discard)

    async def _run_scheduled_flush(self) -> None:
        """Flush, converting any failure into a logged, dropped batch."""
        try:
            await self.flush()
        except Exception:
            self._logger.error("There was an error executing the event queue", exc_info=True)
