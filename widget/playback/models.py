from pydantic import BaseModel, ConfigDict, Field


class SegmentInfo(BaseModel):
    """The segment selected for this page load, stamped onto every event."""

    id: str
    type: str
    version: int | None = None
    audio_url: str | None = Field(None, alias="audioUrl")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def audio_version(self) -> str:
        return f"v{self.version}" if self.version else "v1"

    @property
    def script_version(self) -> str:
        return str(self.version) if self.version is not None else "1"


class PlaybackData(BaseModel):
    """Response of ``GET /api/playback``."""

    voice_disabled: bool = Field(False, alias="voiceDisabled")
    audio_url: str | None = Field(None, alias="audioUrl")
    transcript: str = ""
    label: str = "Overview"
    segment_id: str | None = Field(None, alias="segmentId")
    segment_type: str | None = Field(None, alias="segmentType")
    version: int | None = None

    model_config = ConfigDict(populate_by_name=True)

    def segment(self) -> SegmentInfo | None:
        if not self.segment_id or not self.segment_type:
            return None
        return SegmentInfo(
            id=self.segment_id,
            type=self.segment_type,
            version=self.version,
            audio_url=self.audio_url,
        )
