from google.cloud import firestore

from ingestion.core.config import settings
from ingestion.core.logger import get_logger

logger = get_logger("firestore.client")


def create_firestore_client() -> firestore.Client:
    """Build the Firestore client from settings (credentials come from ADC)."""
    client = firestore.Client(
        project=settings.firestore_project_id,
        database=settings.firestore_database,
    )
    logger.info(
        "firestore_client_created",
        extra={"project": client.project, "database": settings.firestore_database},
    )
    return client
