"""Firestore access for analytics events and playback segments.

The google-cloud-firestore client is synchronous; every call is pushed to a
worker thread with ``run_blocking`` so handlers stay non-blocking.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from uuid6 import uuid7

from ingestion.core.config import settings
from ingestion.core.logger import get_logger
from shared.constants import Collections
from shared.metrics import get_histogram
from shared.schemas import IngestedEvent
from shared.utils.concurrency import run_blocking
from shared.utils.retry import retry_async

logger = get_logger("firestore.repository")

TRANSIENT_ERRORS = (
    gcp_exceptions.ServiceUnavailable,
    gcp_exceptions.DeadlineExceeded,
    gcp_exceptions.Aborted,
)

COMMIT_SECONDS = get_histogram(
    "firestore_commit_seconds",
    "Wall time of Firestore event writes, retries included",
    "ingestion",
)


def _log_retry(attempt: int, exc: BaseException, delay: float) -> None:
    logger.warning(
        "firestore_commit_retry",
        extra={"attempt": attempt, "error": str(exc), "delay": delay},
    )


def event_document(event: IngestedEvent, now: datetime | None = None) -> dict[str, Any]:
    """Stored shape: the event verbatim, with datetimes for ordering queries."""
    doc = event.model_dump(by_alias=True, exclude_none=True)
    doc["timestamp"] = datetime.fromtimestamp(event.timestamp / 1000, tz=timezone.utc)
    doc["createdAt"] = now or datetime.now(timezone.utc)
    return doc


class AnalyticsRepository:
    def __init__(self, db: firestore.Client):
        self.db = db

    def _collection(self, project_id: str):
        return self.db.collection(Collections.project_path("analytics", project_id))

    async def add_event(self, event: IngestedEvent) -> str:
        doc_id = str(uuid7())
        doc_ref = self._collection(event.project_id).document(doc_id)
        with COMMIT_SECONDS.time():
            await retry_async(
                lambda: run_blocking(doc_ref.set, event_document(event)),
                retries=settings.firestore_commit_retries,
                retry_on=TRANSIENT_ERRORS,
                on_retry=_log_retry,
            )
        return doc_id

    async def add_events(self, events: list[IngestedEvent]) -> list[str]:
        """Store all events in one atomic write batch."""
        now = datetime.now(timezone.utc)
        batch = self.db.batch()
        doc_ids = []
        for event in events:
            doc_id = str(uuid7())
            batch.set(
                self._collection(event.project_id).document(doc_id),
                event_document(event, now),
            )
            doc_ids.append(doc_id)
        with COMMIT_SECONDS.time():
            await retry_async(
                lambda: run_blocking(batch.commit),
                retries=settings.firestore_commit_retries,
                retry_on=TRANSIENT_ERRORS,
                on_retry=_log_retry,
            )
        return doc_ids

    async def list_events(
        self,
        project_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = settings.ingestion_stats_max_events,
    ) -> list[dict[str, Any]]:
        query = self._collection(project_id).where(
            filter=FieldFilter("projectId", "==", project_id)
        )
        if start is not None:
            query = query.where(filter=FieldFilter("timestamp", ">=", start))
        if end is not None:
            query = query.where(filter=FieldFilter("timestamp", "<=", end))
        query = query.limit(limit)
        docs = await run_blocking(lambda: list(query.stream()))
        return [doc.to_dict() for doc in docs]


class SegmentRepository:
    def __init__(self, db: firestore.Client):
        self.db = db

    async def find_page(self, project_id: str, url: str) -> dict[str, Any] | None:
        query = (
            self.db.collection(Collections.project_path("pages", project_id))
            .where(filter=FieldFilter("url", "==", url))
            .limit(1)
        )
        docs = await run_blocking(lambda: list(query.stream()))
        if not docs:
            return None
        page = docs[0].to_dict() or {}
        page.setdefault("id", docs[0].id)
        return page

    async def list_page_segments(
        self, project_id: str, page_id: str
    ) -> list[dict[str, Any]]:
        ref = self.db.collection(Collections.page_segments_path(project_id, page_id))
        docs = await run_blocking(lambda: list(ref.stream()))
        return [_with_id(doc) for doc in docs]

    async def list_segments(self, project_id: str) -> list[dict[str, Any]]:
        ref = self.db.collection(Collections.project_path("segments", project_id))
        docs = await run_blocking(lambda: list(ref.stream()))
        return [_with_id(doc) for doc in docs]


def _with_id(doc) -> dict[str, Any]:
    data = doc.to_dict() or {}
    data.setdefault("id", doc.id)
    return data
