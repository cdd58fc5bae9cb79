"""The widget instance: one per page load, owning every piece of state.

``VoiceHeroWidget`` wires the analytics pipeline (session, context,
delivery, unload hook) to the audio player and to the API. The host page
drives it through the public coroutines (``start``, ``expand``,
``toggle_play``...) and the lifecycle callbacks (``on_visibility_change``,
``on_page_hide``).
"""

from __future__ import annotations

import time
from typing import Any
from urllib.parse import urlsplit

import httpx
from pydantic import ValidationError

from shared.constants import EventTypes
from shared.logging.logger import bind, get_logger
from widget.analytics.bot_filter import should_skip_loading
from widget.analytics.context import get_utm_params
from widget.analytics.delivery import DeliveryController, EventQueue
from widget.analytics.tracker import AnalyticsTracker
from widget.analytics.unload import UnloadFlushHook
from widget.core.config import Settings, settings
from widget.environment import BrowserEnvironment
from widget.events import EventBus
from widget.playback.bridge import PlaybackBridge
from widget.playback.models import PlaybackData
from widget.playback.player import AudioPlayer
from widget.storage import CookieJar, JsonFileStorage, KeyValueStorage, MemoryStorage
from widget.transport.beacon import BeaconSender
from widget.transport.http import ApiClient

logger = get_logger("widget")

FEEDBACK_THANKS = "Thank you for your feedback!"
FEEDBACK_FAILED = "Sorry, I couldn't process that. Please try again."


def resolve_api_base(api_base: str | None, script_url: str | None) -> str:
    """Explicit API base wins; otherwise the origin the script was served from."""
    if api_base:
        return api_base.rstrip("/")
    if script_url:
        parts = urlsplit(script_url)
        if parts.scheme and parts.netloc:
            return f"{parts.scheme}://{parts.netloc}"
        logger.error("widget_invalid_script_url", extra={"script_url": script_url})
    return ""


def _default_storage(config: Settings) -> KeyValueStorage:
    if config.widget_storage_path:
        return JsonFileStorage(config.widget_storage_path)
    return MemoryStorage()


class VoiceHeroWidget:
    def __init__(
        self,
        environment: BrowserEnvironment,
        site_id: str | None = None,
        api_base: str | None = None,
        script_url: str | None = None,
        storage: KeyValueStorage | None = None,
        cookies: CookieJar | None = None,
        api_client: ApiClient | None = None,
        beacon: BeaconSender | None = None,
        config: Settings = settings,
    ):
        self.config = config
        self.environment = environment
        self.site_id = site_id if site_id is not None else config.widget_site_id
        self.api_base = resolve_api_base(
            api_base or config.widget_api_base, script_url or config.widget_script_url
        )
        self.cookies = cookies or CookieJar()
        self.api = api_client or ApiClient(self.api_base)
        self.beacon = beacon or BeaconSender(self.api_base)

        self.delivery = DeliveryController(
            self.api,
            EventQueue(config.widget_queue_max_size),
            flush_interval=config.widget_flush_interval_seconds,
            eager_flush_threshold=config.widget_eager_flush_threshold,
        )
        self.tracker = AnalyticsTracker(
            self.site_id or "",
            environment,
            self.delivery,
            storage if storage is not None else _default_storage(config),
        )
        self.bus = EventBus()
        self.player = AudioPlayer(self.bus)
        self.playback = PlaybackBridge(self.tracker, self.player, self.bus)
        self.unload_hook = UnloadFlushHook(self.tracker, self.beacon, self.playback)

        self.data: PlaybackData | None = None
        self.expanded = False
        self.recording = False
        self.status_text = ""
        self.log = bind(
            logger,
            site_id=self.site_id,
            page_url=environment.page_url_without_query,
        )
        self._created_at = time.monotonic()
        self._conversation_started_at: float | None = None

    @property
    def is_returning(self) -> bool:
        return self.cookies.has(self.config.widget_returning_cookie, "true")

    async def start(self) -> bool:
        """Initialise the widget; False when it must stay dormant on this page."""
        if should_skip_loading(self.environment, self.config):
            self.log.debug("widget_loading_skipped")
            return False
        if not self.site_id:
            self.log.error("widget_site_id_missing")
            return False

        self.delivery.start()
        await self.tracker.track(
            EventTypes.WIDGET_LOADED,
            {"loadTime": (time.monotonic() - self._created_at) * 1000},
        )
        await self.fetch_playback()
        return True

    def playback_query(self) -> dict[str, str]:
        query = {
            "siteId": self.site_id or "",
            "lang": self.environment.language,
            "isReturning": "true" if self.is_returning else "false",
            "pageUrl": self.environment.page_url_without_query,
        }
        utm_source = get_utm_params(self.environment.page_url).get("utm_source")
        if utm_source:
            query["utmSource"] = utm_source
        return query

    async def fetch_playback(self) -> PlaybackData | None:
        try:
            raw = await self.api.get_playback(self.playback_query())
            if raw is None:
                return None
            data = PlaybackData.model_validate(raw)
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            self.log.error("playback_fetch_failed", extra={"error": str(e)})
            return None

        self.data = data
        if data.voice_disabled:
            self.log.info("voice_disabled_for_page")
            return data

        self.tracker.set_segment(data.segment())
        if data.audio_url:
            await self.player.load(data.audio_url)

        self.cookies.set(
            self.config.widget_returning_cookie,
            "true",
            max_age=self.config.widget_returning_cookie_max_age,
        )
        return data

    async def expand(self) -> None:
        await self.tracker.track(EventTypes.BUBBLE_CLICKED, {})
        self.expanded = True
        await self.toggle_play()

    async def collapse(self) -> None:
        if self.player.playing:
            await self.playback.track_pause()
            await self.player.pause()
        self.expanded = False

    async def toggle_play(self) -> None:
        if not self.player.has_source:
            return
        if self.player.playing:
            await self.playback.track_pause()
            await self.player.pause()
        else:
            await self.player.play()

    async def start_recording(self) -> None:
        self._conversation_started_at = time.monotonic()
        await self.tracker.track(EventTypes.CONVERSATION_START, {})
        self.recording = True
        if self.player.playing:
            await self.toggle_play()

    async def stop_recording(self, audio: bytes) -> str:
        """Finish a voice note and submit it; returns the text to show."""
        if not self.recording:
            return self.status_text
        self.recording = False
        return await self.process_conversation(audio)

    async def process_conversation(self, audio: bytes) -> str:
        try:
            data: dict[str, Any] = await self.api.post_conversation(
                audio, self.site_id or ""
            )
        except (httpx.HTTPError, ValueError) as e:
            self.log.error("conversation_failed", extra={"error": str(e)})
            self.status_text = FEEDBACK_FAILED
            return self.status_text

        if self._conversation_started_at is not None:
            await self.tracker.track(
                EventTypes.AI_RESPONSE,
                {
                    "responseTime": round(
                        (time.monotonic() - self._conversation_started_at) * 1000
                    )
                },
            )
            self._conversation_started_at = None

        transcription = (data.get("transcription") or "").strip()
        message = data.get("message") or FEEDBACK_THANKS
        self.status_text = (
            f'"{data["transcription"]}"\n\n{message}' if transcription else message
        )
        await self.tracker.track(
            EventTypes.INTERACTION_SAVED,
            {"hasTranscription": bool(data.get("transcription"))},
        )
        return self.status_text

    def on_visibility_change(self, visibility_state: str) -> None:
        self.environment.visibility_state = visibility_state
        self.unload_hook.on_visibility_change(visibility_state)

    def on_page_hide(self) -> None:
        self.unload_hook.on_page_hide()

    async def close(self) -> None:
        await self.delivery.close()
        await self.api.aclose()
        self.beacon.close()
