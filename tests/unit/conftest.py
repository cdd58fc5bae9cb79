import time
from unittest.mock import AsyncMock, MagicMock

import pytest

from shared.schemas import AnalyticsEvent
from widget.environment import BrowserEnvironment, NavigatorInfo, ScreenInfo

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
GOOGLEBOT_UA = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


@pytest.fixture
def browser_environment():
    """Desktop Chrome visitor landing from a newsletter link"""
    return BrowserEnvironment(
        navigator=NavigatorInfo(user_agent=CHROME_UA, language="en-GB"),
        screen=ScreenInfo(width=1920, height=1080),
        page_url="https://shop.example.com/pricing?utm_source=newsletter&utm_medium=email",
        page_title="Pricing",
        referrer="https://www.google.com/",
    )


@pytest.fixture
def bot_environment():
    """Googlebot rendering the page with a full browser profile"""
    return BrowserEnvironment(
        navigator=NavigatorInfo(user_agent=GOOGLEBOT_UA),
        screen=ScreenInfo(width=1280, height=800),
        page_url="https://shop.example.com/pricing",
    )


@pytest.fixture
def make_event():
    """Factory for widget-side analytics events"""

    def _make(event_type: str = "audio.play", **overrides) -> AnalyticsEvent:
        fields = {
            "session_id": "vh-1718000000000-abcdefghi",
            "event_type": event_type,
            "project_id": "site-1",
            "segment_type": "default",
            "segment_id": "default",
            "audio_version": "v1",
            "script_version": "1",
        }
        fields.update(overrides)
        return AnalyticsEvent(**fields)

    return _make


@pytest.fixture
def event_payload():
    """Factory for wire-format events as the ingestion API receives them"""

    def _make(**overrides) -> dict:
        payload = {
            "sessionId": "vh-1718000000000-abcdefghi",
            "eventType": "audio.play",
            "timestamp": int(time.time() * 1000),
            "projectId": "site-1",
            "segmentType": "new_visitor",
            "segmentId": "seg-1",
            "audioVersion": "v2",
            "scriptVersion": "2",
            "metadata": {"audioDuration": 42.5},
            "userContext": {"deviceType": "desktop", "language": "en-GB"},
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def mock_analytics_transport():
    """Mock analytics transport; every send succeeds unless told otherwise"""
    transport = MagicMock()
    transport.send_event = AsyncMock()
    transport.send_batch = AsyncMock()
    return transport
