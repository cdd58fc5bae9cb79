from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from google.api_core.exceptions import GoogleAPIError

from ingestion.api.dependencies import get_playback_service
from ingestion.core.logger import get_logger
from ingestion.services.playback import (
    NoPlayableSegment,
    NoSegmentsFound,
    PlaybackService,
    VoiceDisabled,
)

router = APIRouter()
logger = get_logger("api.playback")


@router.get("/playback", summary="Select the voice intro for a visitor")
async def playback(
    siteId: str | None = None,
    lang: str | None = None,
    isReturning: str | None = None,
    utmSource: str | None = None,
    pageUrl: str | None = None,
    svc: PlaybackService = Depends(get_playback_service),
):
    if not siteId:
        return JSONResponse(
            {"error": "Missing siteId"}, status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        selected = await svc.resolve(
            siteId,
            lang=lang,
            is_returning=isReturning == "true",
            utm_source=utmSource,
            page_url=pageUrl,
        )
    except VoiceDisabled:
        return {"voiceDisabled": True}
    except NoSegmentsFound:
        return JSONResponse(
            {"error": "No segments found"}, status_code=status.HTTP_404_NOT_FOUND
        )
    except NoPlayableSegment:
        return JSONResponse(
            {"error": "No matching segment with audio found"},
            status_code=status.HTTP_404_NOT_FOUND,
        )
    except GoogleAPIError as e:
        logger.error("playback_lookup_failed", extra={"error": str(e), "site_id": siteId})
        return JSONResponse(
            {"error": "Internal Server Error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return selected.model_dump(by_alias=True, exclude_none=True)
