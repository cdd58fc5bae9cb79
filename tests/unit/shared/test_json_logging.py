import json
import logging
import sys

from shared.logging.json import CustomJsonFormatter, SensitiveDataFilter
from shared.logging.logger import bind

PATTERNS = ["password", "token", "secret", "cookie"]


def test_sensitive_filter_redacts_nested_values():
    data = {
        "user": "alice",
        "auth_token": "abc",
        "request": {"headers": {"Cookie": "vh_returning=true"}, "path": "/api"},
        "items": [{"secret_key": "x", "id": 1}, "plain"],
    }

    out = SensitiveDataFilter(PATTERNS).filter(data)

    assert out["user"] == "alice"
    assert out["auth_token"] == "[REDACTED]"
    assert out["request"]["headers"]["Cookie"] == "[REDACTED]"
    assert out["request"]["path"] == "/api"
    assert out["items"] == [{"secret_key": "[REDACTED]", "id": 1}, "plain"]


def test_formatter_emits_structured_json():
    """Extra fields become top-level keys next to the service metadata."""
    formatter = CustomJsonFormatter("ingestion", "testing", PATTERNS)
    record = logging.makeLogRecord(
        {
            "name": "ingestion.api.analytics",
            "levelname": "INFO",
            "msg": "event_stored",
            "project_id": "site-1",
            "api_token": "should-not-leak",
        }
    )

    data = json.loads(formatter.format(record))

    assert data["message"] == "event_stored"
    assert data["service"] == "ingestion"
    assert data["environment"] == "testing"
    assert data["project_id"] == "site-1"
    assert data["api_token"] == "[REDACTED]"
    assert "msg" not in data
    assert "args" not in data


def test_formatter_includes_exception():
    formatter = CustomJsonFormatter("widget", "testing", PATTERNS)
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.makeLogRecord(
            {"msg": "failed", "levelname": "ERROR", "exc_info": sys.exc_info()}
        )

    data = json.loads(formatter.format(record))

    assert data["exception"]["type"] == "ValueError"
    assert data["exception"]["message"] == "boom"


def test_formatter_envelope_fields():
    formatter = CustomJsonFormatter("widget", "development", PATTERNS)
    record = logging.makeLogRecord(
        {
            "name": "widget.delivery",
            "levelname": "WARNING",
            "msg": "batch %s",
            "args": ("failed",),
        }
    )

    data = json.loads(formatter.format(record))

    assert data["message"] == "batch failed"
    assert data["level"] == "WARNING"
    assert data["logger"] == "widget.delivery"


def test_bound_logger_merges_fields(caplog):
    log = bind(logging.getLogger("widget.bound"), site_id="site-1")

    with caplog.at_level(logging.INFO, logger="widget.bound"):
        log.info("widget_started", extra={"step": 1})
        log.bind(session_id="vh-1").info("session_bound")

    first, second = caplog.records
    assert first.site_id == "site-1"
    assert first.step == 1
    assert second.site_id == "site-1"
    assert second.session_id == "vh-1"
