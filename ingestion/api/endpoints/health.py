from fastapi import APIRouter

from ingestion.core.config import settings

router = APIRouter()


@router.get("/healthz", include_in_schema=False)
async def healthz():
    """Liveness only; Firestore reachability is not checked here."""
    return {
        "status": "ok",
        "service": settings.service_name,
        "environment": settings.app_environment,
    }
