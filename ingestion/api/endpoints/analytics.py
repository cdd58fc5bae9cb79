import time
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram
from pydantic import ValidationError

from ingestion.api.dependencies import get_analytics_repository
from ingestion.core.config import settings
from ingestion.core.logger import get_logger
from ingestion.infrastructure.firestore.repository import AnalyticsRepository
from ingestion.schemas.requests import IngestRequest
from shared.schemas import IngestedEvent

INGESTION_REQUESTS = Counter(
    "ingestion_requests_total", "Total analytics requests", ["kind"]
)
INGESTION_LATENCY = Histogram("ingestion_request_latency_seconds", "Request latency")
EVENTS_STORED = Counter("ingestion_events_stored_total", "Events written to Firestore")
EVENTS_REJECTED = Counter("ingestion_events_rejected_total", "Invalid event payloads")
STORAGE_ERRORS = Counter("ingestion_storage_errors_total", "Firestore write errors")

INVALID_EVENT = "Invalid event data. Missing required fields."
INVALID_BATCH = "Invalid event data in batch. Missing required fields."
MISSING_BODY = 'Request must contain either "event" or "events" field'
BATCH_TOO_LARGE = "Too many events in batch."
STORE_FAILED = "Failed to store analytics event"

router = APIRouter()
logger = get_logger("api.analytics")


def _error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
    return JSONResponse({"error": message}, status_code=status_code)


@router.post(
    "/analytics",
    summary="Store widget analytics events",
    response_description="Events stored",
)
async def ingest_analytics(
    body: IngestRequest,
    repo: AnalyticsRepository = Depends(get_analytics_repository),
):
    start_time = time.time()
    try:
        if body.has_event:
            INGESTION_REQUESTS.labels(kind="single").inc()
            return await _store_single(body.event, repo)
        if body.has_batch:
            INGESTION_REQUESTS.labels(kind="batch").inc()
            return await _store_batch(body.events, repo)
        INGESTION_REQUESTS.labels(kind="empty").inc()
        return _error(MISSING_BODY)
    finally:
        INGESTION_LATENCY.observe(time.time() - start_time)


async def _store_single(raw: Any, repo: AnalyticsRepository):
    try:
        event = IngestedEvent.model_validate(raw)
    except ValidationError as e:
        EVENTS_REJECTED.inc()
        logger.info("event_rejected", extra={"errors": e.errors(include_url=False)})
        return _error(INVALID_EVENT)

    try:
        doc_id = await repo.add_event(event)
    except Exception as e:
        STORAGE_ERRORS.inc()
        logger.error(
            "event_store_failed",
            extra={
                "error_type": type(e).__name__,
                "error": str(e),
                "project_id": event.project_id,
            },
        )
        return _error(STORE_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR)

    EVENTS_STORED.inc()
    logger.info(
        "event_stored",
        extra={
            "doc_id": doc_id,
            "event_type": event.event_type,
            "project_id": event.project_id,
        },
    )
    return {"success": True}


async def _store_batch(raw_events: list, repo: AnalyticsRepository):
    if len(raw_events) > settings.ingestion_max_batch_events:
        EVENTS_REJECTED.inc(len(raw_events))
        return _error(BATCH_TOO_LARGE)

    events = []
    for raw in raw_events:
        try:
            events.append(IngestedEvent.model_validate(raw))
        except ValidationError as e:
            EVENTS_REJECTED.inc(len(raw_events))
            logger.info(
                "batch_rejected",
                extra={
                    "batch_size": len(raw_events),
                    "errors": e.errors(include_url=False),
                },
            )
            return _error(INVALID_BATCH)

    if events:
        try:
            await repo.add_events(events)
        except Exception as e:
            STORAGE_ERRORS.inc()
            logger.error(
                "batch_store_failed",
                extra={
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "batch_size": len(events),
                },
            )
            return _error(STORE_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR)

    EVENTS_STORED.inc(len(events))
    logger.info("batch_stored", extra={"batch_size": len(events)})
    return {"success": True, "count": len(events)}
