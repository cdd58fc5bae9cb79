"""Last-chance delivery when the page is hidden or torn down.

Nothing awaited here is guaranteed to finish, so both payloads go through
the beacon sender and the hook itself is fully synchronous.
"""

from shared.constants import EventTypes
from shared.logging.logger import get_logger
from widget.analytics.tracker import AnalyticsTracker
from widget.playback.bridge import PlaybackBridge
from widget.transport.beacon import BeaconSender

logger = get_logger("widget.unload")


class UnloadFlushHook:
    def __init__(
        self,
        tracker: AnalyticsTracker,
        beacon: BeaconSender,
        playback: PlaybackBridge | None = None,
    ):
        self.tracker = tracker
        self.beacon = beacon
        self.playback = playback

    def on_visibility_change(self, visibility_state: str) -> None:
        if visibility_state == "hidden":
            self.flush()

    def on_page_hide(self) -> None:
        self.flush()

    def flush(self) -> None:
        try:
            self._send_abandonment()
            self._send_queue()
        except Exception as e:
            # Page teardown must never see an exception from analytics
            logger.warning("unload_flush_failed", extra={"error": str(e)})

    def _send_abandonment(self) -> None:
        if self.playback is None or self.tracker.is_bot:
            return
        metadata = self.playback.abandonment_metadata()
        if metadata is None:
            return
        event = self.tracker.build_event(EventTypes.AUDIO_ABANDONED, metadata)
        accepted = self.beacon.send({"event": event.to_payload()})
        logger.debug(
            "abandonment_beacon",
            extra={"accepted": accepted, "completion_rate": metadata["completionRate"]},
        )

    def _send_queue(self) -> None:
        queue = self.tracker.delivery.queue
        if not len(queue):
            return
        events = queue.drain()
        refused = self.beacon.send_events([e.to_payload() for e in events])
        if refused:
            # Kept for the next batch flush if the page survives
            queue.requeue_front([events[i] for i in refused])
        logger.debug(
            "queue_beacon",
            extra={"batch_size": len(events), "refused": len(refused)},
        )
