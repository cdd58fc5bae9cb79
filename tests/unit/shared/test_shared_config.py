import pytest
from pydantic import ValidationError

from shared.config import BaseServiceConfig


def test_log_level_normalised(monkeypatch):
    monkeypatch.setenv("APP_LOG_LEVEL", " debug ")

    assert BaseServiceConfig().app_log_level == "DEBUG"


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setenv("APP_LOG_LEVEL", "chatty")

    with pytest.raises(ValidationError):
        BaseServiceConfig()


def test_redaction_defaults_cover_cookies():
    assert "cookie" in BaseServiceConfig().app_log_redaction_patterns
