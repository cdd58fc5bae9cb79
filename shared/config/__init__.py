"""Settings base classes shared by the ingestion API and the widget.

Both units read the same ``APP_*`` variables for logging; each adds its
own prefixed fields on top (``firestore_*``/``ingestion_*``, ``widget_*``/
``bot_filter_*``). A ``.env`` file in the working directory is honoured.
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseLoggingConfig(BaseSettings):
    """Log level, redaction and environment name."""

    app_log_level: str = "INFO"
    # Matched as substrings of structured log keys
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "key",
        "authorization",
        "cookie",
    ]
    app_environment: str = "production"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("app_log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


class BaseServiceConfig(BaseLoggingConfig):
    """Base for a deployable unit; subclasses override ``service_name``."""

    service_name: str = "unknown"


__all__ = ["BaseLoggingConfig", "BaseServiceConfig"]
