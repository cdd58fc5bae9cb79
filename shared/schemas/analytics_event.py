import math
import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# 2024-01-01T00:00:00Z, the earliest timestamp the ingestion API accepts
MIN_EVENT_TIMESTAMP_MS = 1_704_067_200_000
MAX_EVENT_SKEW_MS = 365 * 24 * 60 * 60 * 1000


class AnalyticsEvent(BaseModel):
    """One widget analytics event, as built by the visitor-side pipeline.

    Wire names are camelCase; ``model_dump(by_alias=True)`` produces the
    payload the ingestion API stores verbatim.
    """

    session_id: str = Field(..., alias="sessionId", description="Per-browser id")
    event_type: str = Field(..., alias="eventType", description="e.g. audio.play")
    timestamp: int = Field(
        default_factory=lambda: int(time.time() * 1000),
        description="Epoch-ms when the event occurred",
    )
    project_id: str = Field(..., alias="projectId")
    segment_type: str = Field(..., alias="segmentType")
    segment_id: str = Field(..., alias="segmentId")
    audio_version: str = Field(..., alias="audioVersion")
    script_version: str = Field(..., alias="scriptVersion")
    audio_url: str | None = Field(None, alias="audioUrl")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Playback measurements and other extras"
    )
    user_context: dict[str, Any] = Field(
        default_factory=dict,
        alias="userContext",
        description="Device, browser, referrer and UTM snapshot",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class IngestedEvent(AnalyticsEvent):
    """Server-side view of an event, with the ingestion acceptance rules."""

    timestamp: int | float
    metadata: dict[str, Any]
    user_context: dict[str, Any] = Field(..., alias="userContext")

    @field_validator(
        "session_id",
        "event_type",
        "project_id",
        "segment_type",
        "segment_id",
        "audio_version",
        "script_version",
    )
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("timestamp", mode="before")
    @classmethod
    def _numeric_timestamp(cls, value: Any) -> Any:
        # No coercion: "1718..." and true are rejected, not parsed
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("timestamp must be a number")
        if math.isnan(value):
            raise ValueError("timestamp must not be NaN")
        return value

    @field_validator("timestamp")
    @classmethod
    def _plausible_timestamp(cls, value: int | float) -> int | float:
        now_ms = int(time.time() * 1000)
        if value < MIN_EVENT_TIMESTAMP_MS or value > now_ms + MAX_EVENT_SKEW_MS:
            raise ValueError("timestamp outside accepted window")
        return value
