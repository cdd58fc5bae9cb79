from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from ingestion.schemas.playback import PlaybackResponse


@pytest.fixture
def mock_repository():
    """Mock analytics repository for API tests"""
    repo = MagicMock()
    repo.add_event = AsyncMock(return_value="0190a6f2-7c3e-7d2a-9c1b-1f2e3d4c5b6a")
    repo.add_events = AsyncMock(
        side_effect=lambda events: [f"id-{i}" for i in range(len(events))]
    )
    repo.list_events = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_playback_service():
    svc = MagicMock()
    svc.resolve = AsyncMock(
        return_value=PlaybackResponse(
            audio_url="https://cdn.example.com/a.mp3",
            transcript="Hello there",
            segment_id="seg-1",
            segment_type="new_visitor",
            version=2,
        )
    )
    return svc


@pytest.fixture
def test_client(mock_repository, mock_playback_service):
    from ingestion.api.dependencies import (
        get_analytics_repository,
        get_firestore_client,
        get_playback_service,
    )
    from ingestion.main import app

    # Clear the cache first
    get_firestore_client.cache_clear()

    app.dependency_overrides[get_analytics_repository] = lambda: mock_repository
    app.dependency_overrides[get_playback_service] = lambda: mock_playback_service
    with TestClient(app) as client:
        yield client

    # Clean up
    app.dependency_overrides.clear()
