import logging

from shared.logging.logger import get_logger as shared_get_logger


def get_logger(name: str) -> logging.Logger:
    """Get preconfigured structured logger, namespaced under ``ingestion``."""
    return shared_get_logger(f"ingestion.{name}", auto_configure=False)
