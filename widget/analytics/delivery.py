"""Event queue and the real-time/batched delivery state machine.

REAL_TIME --(send fails)--> BATCHED --(batch flush succeeds)--> REAL_TIME

While REAL_TIME every event is posted on its own. While BATCHED events wait
in a bounded FIFO queue that is flushed as one batch on a fixed interval, or
early once it holds ``eager_flush_threshold`` events. Everything runs on one
event loop; the only interleaving happens at ``await`` points, so the single
in-flight flag is all the guarding a flush needs.
"""

from __future__ import annotations

import asyncio
import contextlib
from enum import Enum
from typing import Any, Protocol

from shared.logging.logger import get_logger
from shared.metrics import get_counter, get_gauge
from shared.schemas import AnalyticsEvent
from widget.core.config import settings
from widget.transport.http import DeliveryError

logger = get_logger("widget.delivery")

EVENTS_SENT = get_counter("events_sent_total", "Events accepted by the API", "widget")
EVENTS_QUEUED = get_counter("events_queued_total", "Events put on the queue", "widget")
EVENTS_DROPPED = get_counter(
    "events_dropped_total", "Events evicted from a full queue", "widget"
)
BATCH_FLUSHES = get_counter(
    "batch_flushes_total", "Batch flush attempts", "widget", labelnames=("outcome",)
)
MODE_TRANSITIONS = get_counter(
    "delivery_mode_transitions_total",
    "Delivery mode changes",
    "widget",
    labelnames=("mode",),
)
QUEUE_SIZE = get_gauge("event_queue_size", "Events waiting for a batch flush", "widget")


class DeliveryMode(str, Enum):
    REAL_TIME = "real_time"
    BATCHED = "batched"


class AnalyticsTransport(Protocol):
    async def send_event(self, event: dict[str, Any]) -> None: ...

    async def send_batch(self, events: list[dict[str, Any]]) -> None: ...


class EventQueue:
    """Bounded FIFO; the oldest event makes room for the newest."""

    def __init__(self, max_size: int = settings.widget_queue_max_size):
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._events: list[AnalyticsEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    def snapshot(self) -> list[AnalyticsEvent]:
        return list(self._events)

    def push(self, event: AnalyticsEvent) -> AnalyticsEvent | None:
        """Append ``event``; return the evicted event when the queue was full."""
        dropped = None
        if len(self._events) >= self.max_size:
            dropped = self._events.pop(0)
        self._events.append(event)
        return dropped

    def drain(self) -> list[AnalyticsEvent]:
        events, self._events = self._events, []
        return events

    def requeue_front(self, events: list[AnalyticsEvent]) -> int:
        """Put ``events`` back ahead of anything queued since; return drop count."""
        merged = list(events) + self._events
        overflow = max(0, len(merged) - self.max_size)
        self._events = merged[overflow:]
        return overflow


class DeliveryController:
    def __init__(
        self,
        transport: AnalyticsTransport,
        queue: EventQueue | None = None,
        flush_interval: float = settings.widget_flush_interval_seconds,
        eager_flush_threshold: int = settings.widget_eager_flush_threshold,
    ):
        self.transport = transport
        self.queue = queue if queue is not None else EventQueue()
        self.flush_interval = flush_interval
        self.eager_flush_threshold = eager_flush_threshold
        self.mode = DeliveryMode.REAL_TIME
        self._flush_in_flight = False
        self._timer: asyncio.Task | None = None

    @property
    def flush_in_flight(self) -> bool:
        return self._flush_in_flight

    def _transition(self, mode: DeliveryMode) -> None:
        if mode is self.mode:
            return
        logger.info(
            "delivery_mode_changed",
            extra={"from_mode": self.mode.value, "to_mode": mode.value},
        )
        self.mode = mode
        MODE_TRANSITIONS.labels(mode=mode.value).inc()

    async def track(self, event: AnalyticsEvent) -> None:
        if self.mode is DeliveryMode.REAL_TIME:
            await self._send_now(event)
        else:
            await self.enqueue(event)

    async def _send_now(self, event: AnalyticsEvent) -> None:
        try:
            await self.transport.send_event(event.to_payload())
            EVENTS_SENT.inc()
        except DeliveryError as e:
            logger.warning(
                "analytics_send_failed_switching_to_batch",
                extra={"event_type": event.event_type, "error": str(e)},
            )
            self._transition(DeliveryMode.BATCHED)
            await self.enqueue(event)

    async def enqueue(self, event: AnalyticsEvent) -> None:
        dropped = self.queue.push(event)
        EVENTS_QUEUED.inc()
        if dropped is not None:
            EVENTS_DROPPED.inc()
            logger.debug(
                "analytics_queue_full_dropped_oldest",
                extra={"dropped_event_type": dropped.event_type},
            )
        QUEUE_SIZE.set(len(self.queue))
        if (
            self.mode is DeliveryMode.BATCHED
            and len(self.queue) >= self.eager_flush_threshold
        ):
            await self.flush()

    async def flush(self) -> bool:
        """Send the whole queue as one batch; True when the API accepted it."""
        if self._flush_in_flight or not len(self.queue):
            return False

        self._flush_in_flight = True
        events = self.queue.drain()
        try:
            await self.transport.send_batch([e.to_payload() for e in events])
        except DeliveryError as e:
            dropped = self.queue.requeue_front(events)
            if dropped:
                EVENTS_DROPPED.inc(dropped)
            BATCH_FLUSHES.labels(outcome="failed").inc()
            logger.warning(
                "analytics_batch_failed",
                extra={
                    "batch_size": len(events),
                    "requeued": len(events) - dropped,
                    "error": str(e),
                },
            )
            return False
        else:
            EVENTS_SENT.inc(len(events))
            BATCH_FLUSHES.labels(outcome="sent").inc()
            self._transition(DeliveryMode.REAL_TIME)
            return True
        finally:
            self._flush_in_flight = False
            QUEUE_SIZE.set(len(self.queue))

    def start(self) -> None:
        """Start the interval flush; needs a running event loop."""
        if self._timer is None or self._timer.done():
            self._timer = asyncio.create_task(self._flush_periodically())

    async def _flush_periodically(self) -> None:
        while True:
            await asyncio.sleep(self.flush_interval)
            if self.mode is DeliveryMode.BATCHED:
                await self.flush()

    async def close(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._timer
            self._timer = None
