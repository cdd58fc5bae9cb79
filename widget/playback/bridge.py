"""Turns audio element events into analytics events."""

import math
from typing import Any

from shared.constants import EventTypes
from shared.logging.logger import get_logger
from widget.analytics.tracker import AnalyticsTracker
from widget.events import EventBus
from widget.playback.player import AudioPlayer

logger = get_logger("widget.playback")


def completion_rate(position: float, duration: float | None) -> float:
    """Percent of the clip heard, rounded half-up to two decimals."""
    if not duration or duration <= 0:
        return 0
    return math.floor(position / duration * 100 * 100 + 0.5) / 100


def listening_metadata(player: AudioPlayer) -> dict[str, Any]:
    duration = player.duration or 0
    position = player.current_time or 0
    return {
        "listeningDuration": position,
        "completionRate": completion_rate(position, duration),
        "audioDuration": duration,
    }


class PlaybackBridge:
    def __init__(self, tracker: AnalyticsTracker, player: AudioPlayer, bus: EventBus):
        self.tracker = tracker
        self.player = player
        self.fired_milestones: set[int] = set()
        self.completed = False
        bus.subscribe("loadstart", self._on_load_start)
        bus.subscribe("loadedmetadata", self._on_loaded_metadata)
        bus.subscribe("timeupdate", self._on_time_update)
        bus.subscribe("ended", self._on_ended)

    async def _on_load_start(self, src: str) -> None:
        # Each new source is a new playback
        self.fired_milestones.clear()
        self.completed = False
        logger.debug("audio_source_loaded", extra={"audio_url": src})

    async def _on_loaded_metadata(self, duration: float) -> None:
        await self.tracker.track(EventTypes.AUDIO_PLAY, {"audioDuration": duration or 0})

    async def _on_time_update(self, current_time: float, duration: float | None) -> None:
        if not duration or duration <= 0:
            return
        progress = current_time / duration * 100
        for milestone in EventTypes.PROGRESS_MILESTONES:
            if progress >= milestone and milestone not in self.fired_milestones:
                self.fired_milestones.add(milestone)
                await self.tracker.track(
                    EventTypes.progress(milestone), {"currentTime": current_time}
                )

    async def _on_ended(self, duration: float | None) -> None:
        if self.completed:
            return
        self.completed = True
        await self.tracker.track(
            EventTypes.AUDIO_COMPLETE,
            {
                "listeningDuration": duration or 0,
                "completionRate": 100,
                "audioDuration": duration or 0,
            },
        )

    async def track_pause(self) -> None:
        await self.tracker.track(EventTypes.AUDIO_PAUSE, listening_metadata(self.player))

    def abandonment_metadata(self) -> dict[str, Any] | None:
        """Metadata for ``audio.abandoned``, or None unless audio is mid-playback."""
        player = self.player
        if not player.playing or not player.duration or player.current_time <= 0:
            return None
        return listening_metadata(player)
