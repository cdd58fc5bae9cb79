from pydantic import BaseModel, ConfigDict, Field


class BreakdownStats(BaseModel):
    plays: int = 0
    completions: int = 0
    engagement_rate: int = Field(0, alias="engagementRate")

    model_config = ConfigDict(populate_by_name=True)


class AnalyticsStats(BaseModel):
    total_plays: int = Field(0, alias="totalPlays")
    unique_visitors: int = Field(0, alias="uniqueVisitors")
    completions: int = 0
    listen_through_rate: int = Field(0, alias="listenThroughRate")
    conversation_starts: int = Field(0, alias="conversationStarts")
    conversation_rate: int = Field(0, alias="conversationRate")
    avg_response_time: int = Field(0, alias="avgResponseTime")
    segment_breakdown: dict[str, BreakdownStats] = Field(
        default_factory=dict, alias="segmentBreakdown"
    )
    version_breakdown: dict[str, BreakdownStats] = Field(
        default_factory=dict, alias="versionBreakdown"
    )

    model_config = ConfigDict(populate_by_name=True)
