# Router aggregator: every procedure is mounted under the single RPC prefix.

from fastapi import APIRouter

from app.api.endpoints import health, languages, translation_jobs

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(translation_jobs.router)
api_router.include_router(languages.router)
