"""Picks the segment a visitor hears, from page-level or project-level segments."""

from typing import Any

from ingestion.core.logger import get_logger
from ingestion.infrastructure.firestore.repository import SegmentRepository
from ingestion.schemas.playback import PlaybackResponse

logger = get_logger("services.playback")


class VoiceDisabled(Exception):
    """The page exists and has voice turned off."""


class NoSegmentsFound(Exception):
    """The project has no segments at all."""


class NoPlayableSegment(Exception):
    """Segments exist but the selected one has no synthesised audio."""


def select_segment(
    segments: list[dict[str, Any]],
    utm_source: str | None,
    is_returning: bool,
    lang: str | None,
) -> dict[str, Any] | None:
    """Most specific match wins: UTM source, returning, language, new visitor."""

    def first(predicate):
        return next((s for s in segments if predicate(s)), None)

    selected = None
    if utm_source:
        selected = first(
            lambda s: s.get("type") == "utm_source"
            and s.get("conditionValue") == utm_source
        )
    if selected is None and is_returning:
        selected = first(lambda s: s.get("type") == "returning_visitor")
    if selected is None and lang:
        selected = first(
            lambda s: s.get("type") == "language"
            and lang.startswith(s.get("conditionValue") or "")
        )
    if selected is None:
        selected = first(lambda s: s.get("type") == "new_visitor")
    if selected is None and segments:
        selected = segments[0]
    return selected


def to_response(segment: dict[str, Any]) -> PlaybackResponse:
    return PlaybackResponse(
        audio_url=segment["audioUrl"],
        transcript=segment.get("scriptContent") or "",
        segment_id=segment.get("id") or "",
        segment_type=segment.get("type") or "",
        version=segment.get("version"),
    )


class PlaybackService:
    def __init__(self, repository: SegmentRepository):
        self.repo = repository

    async def resolve(
        self,
        site_id: str,
        lang: str | None = None,
        is_returning: bool = False,
        utm_source: str | None = None,
        page_url: str | None = None,
    ) -> PlaybackResponse:
        if page_url:
            page = await self.repo.find_page(site_id, page_url)
            if page is not None:
                if page.get("voiceEnabled") is False:
                    raise VoiceDisabled(page_url)
                page_segments = await self.repo.list_page_segments(site_id, page["id"])
                selected = select_segment(page_segments, utm_source, is_returning, lang)
                if selected and selected.get("audioUrl"):
                    logger.debug(
                        "page_segment_selected",
                        extra={"site_id": site_id, "segment_id": selected.get("id")},
                    )
                    return to_response(selected)

        segments = await self.repo.list_segments(site_id)
        if not segments:
            raise NoSegmentsFound(site_id)
        selected = select_segment(segments, utm_source, is_returning, lang)
        if not selected or not selected.get("audioUrl"):
            raise NoPlayableSegment(site_id)
        return to_response(selected)
