from ingestion.core.config import settings
from ingestion.core.logger import get_logger
from shared.logging.json import configure_logging

logger = get_logger("startup")


def initialize_application():
    """Install JSON logging before the first request is served."""
    configure_logging(
        service=settings.service_name,
        level=settings.app_log_level,
        environment=settings.app_environment,
        redaction_patterns=settings.app_log_redaction_patterns,
    )
    logger.info(
        "application_initialized",
        extra={
            "firestore_project": settings.firestore_project_id,
            "service": settings.service_name,
        },
    )
