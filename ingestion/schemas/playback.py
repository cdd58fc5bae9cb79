from pydantic import BaseModel, ConfigDict, Field


class PlaybackResponse(BaseModel):
    audio_url: str = Field(..., alias="audioUrl")
    transcript: str = ""
    label: str = "Overview"
    segment_id: str = Field(..., alias="segmentId")
    segment_type: str = Field(..., alias="segmentType")
    version: int | None = None

    model_config = ConfigDict(populate_by_name=True)
