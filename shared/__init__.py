"""Shared utilities and components for the widget and the ingestion API."""

from .config import BaseLoggingConfig, BaseServiceConfig
from .constants import Collections, Environment, EventTypes

__all__ = [
    "Environment",
    "EventTypes",
    "Collections",
    "BaseServiceConfig",
    "BaseLoggingConfig",
]
