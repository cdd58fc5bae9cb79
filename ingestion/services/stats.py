"""Aggregates stored analytics events into dashboard metrics."""

import math
from typing import Any, Iterable

from ingestion.schemas.stats import AnalyticsStats, BreakdownStats
from shared.constants import EventTypes


def percent(part: int, whole: int) -> int:
    """Rounded (half-up) percentage, 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return math.floor(part / whole * 100 + 0.5)


def compute_stats(events: Iterable[dict[str, Any]]) -> AnalyticsStats:
    events = list(events)
    sessions: set[str] = set()
    completions = 0
    conversation_starts = 0
    response_times: list[float] = []
    segments: dict[str, BreakdownStats] = {}
    versions: dict[str, BreakdownStats] = {}

    # Plays first, so a completion counts towards its segment whatever the
    # order the documents came back in
    plays = [e for e in events if e.get("eventType") == EventTypes.AUDIO_PLAY]
    for event in plays:
        segments.setdefault(event.get("segmentType"), BreakdownStats()).plays += 1
        if event.get("audioVersion"):
            versions.setdefault(event["audioVersion"], BreakdownStats()).plays += 1

    for event in events:
        sessions.add(event.get("sessionId"))
        event_type = event.get("eventType")

        if event_type == EventTypes.AUDIO_COMPLETE:
            completions += 1
            if event.get("segmentType") in segments:
                segments[event["segmentType"]].completions += 1
            if event.get("audioVersion") in versions:
                versions[event["audioVersion"]].completions += 1
        elif event_type == EventTypes.CONVERSATION_START:
            conversation_starts += 1
        elif event_type == EventTypes.AI_RESPONSE:
            response_time = (event.get("metadata") or {}).get("responseTime")
            if response_time:
                response_times.append(response_time)

    for stats in (*segments.values(), *versions.values()):
        stats.engagement_rate = percent(stats.completions, stats.plays)

    total_plays = len(plays)
    return AnalyticsStats(
        total_plays=total_plays,
        unique_visitors=len(sessions),
        completions=completions,
        listen_through_rate=percent(completions, total_plays),
        conversation_starts=conversation_starts,
        conversation_rate=percent(conversation_starts, total_plays),
        avg_response_time=(
            math.floor(sum(response_times) / len(response_times) + 0.5)
            if response_times
            else 0
        ),
        segment_breakdown=segments,
        version_breakdown=versions,
    )
