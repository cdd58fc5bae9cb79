from functools import lru_cache

from fastapi import Depends
from google.cloud import firestore

from ingestion.infrastructure.firestore.client import create_firestore_client
from ingestion.infrastructure.firestore.repository import (
    AnalyticsRepository,
    SegmentRepository,
)
from ingestion.services.playback import PlaybackService


@lru_cache
def get_firestore_client() -> firestore.Client:
    """Cached Firestore client singleton."""
    return create_firestore_client()


def get_analytics_repository(
    db: firestore.Client = Depends(get_firestore_client),
) -> AnalyticsRepository:
    return AnalyticsRepository(db)


def get_playback_service(
    db: firestore.Client = Depends(get_firestore_client),
) -> PlaybackService:
    return PlaybackService(SegmentRepository(db))
