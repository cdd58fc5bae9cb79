from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator

from ingestion.api.dependencies import get_firestore_client
from ingestion.api.endpoints import health
from ingestion.api.router import api_router
from ingestion.core.config import settings
from ingestion.startup import initialize_application
from shared.constants import Environment


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_application()
    try:
        yield
    finally:
        # Only close a client some request actually created
        if get_firestore_client.cache_info().currsize:
            get_firestore_client().close()
            get_firestore_client.cache_clear()


show_docs = Environment.exposes_docs(settings.app_environment)

app = FastAPI(
    title="VoiceHero Analytics Ingestion API",
    version="0.3.0",
    lifespan=lifespan,
    docs_url="/docs" if show_docs else None,
    redoc_url="/redoc" if show_docs else None,
)

# The widget is embedded on arbitrary customer sites
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ingestion_cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.get("/metrics")
def metrics():
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


instrumentator = Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/docs", "/openapi.json", "/metrics", "/healthz"],
    inprogress_name="ingestion_inprogress",
    inprogress_labels=True,
)

instrumentator.instrument(app)

app.include_router(health.router)
app.include_router(api_router, prefix="/api")
