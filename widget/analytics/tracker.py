"""Builds analytics events from widget actions and hands them to delivery."""

from typing import Any

from shared.logging.logger import bind, get_logger
from shared.schemas import AnalyticsEvent
from widget.analytics.bot_filter import is_bot
from widget.analytics.context import get_context
from widget.analytics.delivery import DeliveryController
from widget.analytics.session import get_or_create_session_id
from widget.environment import BrowserEnvironment
from widget.playback.models import SegmentInfo
from widget.storage import KeyValueStorage

logger = get_logger("widget.tracker")

DEFAULT_SEGMENT = "default"


class AnalyticsTracker:
    def __init__(
        self,
        site_id: str,
        environment: BrowserEnvironment,
        delivery: DeliveryController,
        storage: KeyValueStorage | None = None,
    ):
        self.site_id = site_id
        self.environment = environment
        self.delivery = delivery
        self.session_id = get_or_create_session_id(storage)
        self.current_segment: SegmentInfo | None = None
        # Second bot check, in case the load-time gate was bypassed
        self.is_bot = is_bot(environment.user_agent, environment.navigator)
        self.log = bind(logger, site_id=site_id, session_id=self.session_id)

    def set_segment(self, segment: SegmentInfo | None) -> None:
        self.current_segment = segment

    def build_event(
        self, event_type: str, metadata: dict[str, Any] | None = None
    ) -> AnalyticsEvent:
        segment = self.current_segment
        return AnalyticsEvent(
            session_id=self.session_id,
            event_type=event_type,
            project_id=self.site_id,
            segment_type=segment.type if segment else DEFAULT_SEGMENT,
            segment_id=segment.id if segment else DEFAULT_SEGMENT,
            audio_version=segment.audio_version if segment else "v1",
            script_version=segment.script_version if segment else "1",
            audio_url=segment.audio_url if segment else None,
            metadata=metadata or {},
            user_context=get_context(self.environment).to_payload(),
        )

    async def track(
        self, event_type: str, metadata: dict[str, Any] | None = None
    ) -> AnalyticsEvent | None:
        """Emit one event; returns it, or None when the visitor looks like a bot."""
        if self.is_bot:
            self.log.debug("event_skipped_bot", extra={"event_type": event_type})
            return None
        event = self.build_event(event_type, metadata)
        await self.delivery.track(event)
        return event
