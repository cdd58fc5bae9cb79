from fastapi import APIRouter

from .endpoints import analytics, playback, stats

api_router = APIRouter()
api_router.include_router(analytics.router)
api_router.include_router(stats.router)
api_router.include_router(playback.router)
