import time

import pytest
from pydantic import ValidationError

from shared.schemas import MIN_EVENT_TIMESTAMP_MS, AnalyticsEvent, IngestedEvent


def test_analytics_event_defaults(make_event):
    """Timestamp defaults to now in epoch ms; metadata and context to empty."""
    before = int(time.time() * 1000)
    event = make_event()
    after = int(time.time() * 1000)

    assert before <= event.timestamp <= after
    assert event.metadata == {}
    assert event.user_context == {}
    assert event.audio_url is None


def test_analytics_event_payload_uses_wire_names(make_event):
    """to_payload emits camelCase keys and leaves out unset optionals."""
    event = make_event(metadata={"audioDuration": 12.0}, timestamp=1718000000000)

    payload = event.to_payload()

    assert payload == {
        "sessionId": "vh-1718000000000-abcdefghi",
        "eventType": "audio.play",
        "timestamp": 1718000000000,
        "projectId": "site-1",
        "segmentType": "default",
        "segmentId": "default",
        "audioVersion": "v1",
        "scriptVersion": "1",
        "metadata": {"audioDuration": 12.0},
        "userContext": {},
    }


def test_analytics_event_accepts_wire_names(event_payload):
    """Events can be built straight from the camelCase payload."""
    event = AnalyticsEvent.model_validate(event_payload())

    assert event.session_id == "vh-1718000000000-abcdefghi"
    assert event.segment_type == "new_visitor"
    assert event.user_context["deviceType"] == "desktop"


def test_ingested_event_valid(event_payload):
    event = IngestedEvent.model_validate(event_payload(audioUrl="https://cdn/a.mp3"))

    assert event.project_id == "site-1"
    assert event.audio_url == "https://cdn/a.mp3"


@pytest.mark.parametrize(
    "missing", ["sessionId", "eventType", "projectId", "timestamp", "userContext"]
)
def test_ingested_event_requires_fields(event_payload, missing):
    """Every required field must be present on the server side."""
    payload = event_payload()
    del payload[missing]

    with pytest.raises(ValidationError):
        IngestedEvent.model_validate(payload)


def test_ingested_event_rejects_blank_strings(event_payload):
    with pytest.raises(ValidationError):
        IngestedEvent.model_validate(event_payload(segmentId="   "))


def test_ingested_event_rejects_implausible_timestamp(event_payload):
    """Timestamps before 2024 or far in the future are refused."""
    with pytest.raises(ValidationError):
        IngestedEvent.model_validate(event_payload(timestamp=MIN_EVENT_TIMESTAMP_MS - 1))

    far_future = int(time.time() * 1000) + 2 * 365 * 24 * 60 * 60 * 1000
    with pytest.raises(ValidationError):
        IngestedEvent.model_validate(event_payload(timestamp=far_future))


@pytest.mark.parametrize("timestamp", ["1718000000000", True, float("nan")])
def test_ingested_event_timestamp_is_not_coerced(event_payload, timestamp):
    with pytest.raises(ValidationError):
        IngestedEvent.model_validate(event_payload(timestamp=timestamp))


def test_ingested_event_accepts_fractional_milliseconds(event_payload):
    event = IngestedEvent.model_validate(event_payload(timestamp=1718000000000.5))

    assert event.timestamp == 1718000000000.5
