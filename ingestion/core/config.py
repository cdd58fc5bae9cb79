from shared.config import BaseServiceConfig


class Settings(BaseServiceConfig):
    # Firestore
    firestore_project_id: str | None = None  # None lets the client auto-detect
    firestore_database: str = "(default)"
    firestore_commit_retries: int = 3

    # Ingestion limits
    ingestion_max_batch_events: int = 500  # Firestore write batch limit
    ingestion_stats_max_events: int = 10_000
    ingestion_cors_origins: list[str] = ["*"]

    service_name: str = "ingestion"


settings = Settings()
