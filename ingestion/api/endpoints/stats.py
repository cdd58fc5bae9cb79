from datetime import datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from google.api_core.exceptions import GoogleAPIError

from ingestion.api.dependencies import get_analytics_repository
from ingestion.core.config import settings
from ingestion.core.logger import get_logger
from ingestion.infrastructure.firestore.repository import AnalyticsRepository
from ingestion.services.stats import compute_stats

router = APIRouter()
logger = get_logger("api.stats")


@router.get("/analytics/stats", summary="Aggregate playback analytics for a project")
async def analytics_stats(
    projectId: str | None = None,
    startDate: datetime | None = None,
    endDate: datetime | None = None,
    repo: AnalyticsRepository = Depends(get_analytics_repository),
):
    if not projectId:
        return JSONResponse(
            {"error": "projectId is required"}, status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        events = await repo.list_events(
            projectId,
            start=startDate,
            end=endDate,
            limit=settings.ingestion_stats_max_events,
        )
    except GoogleAPIError as e:
        logger.error(
            "stats_query_failed", extra={"error": str(e), "project_id": projectId}
        )
        return JSONResponse(
            {"error": "Failed to fetch analytics stats"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    stats = compute_stats(events)
    logger.debug(
        "stats_computed", extra={"project_id": projectId, "event_count": len(events)}
    )
    return stats.model_dump(by_alias=True)
