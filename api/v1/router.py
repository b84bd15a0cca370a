# api/v1/router.py
from fastapi import APIRouter

from . import entries, progress, session, settings

api_router = APIRouter()

api_router.include_router(session.router, prefix="/session", tags=["Session"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(entries.router, prefix="/entries", tags=["Entries"])

# /progress and /simulation are both derived views
api_router.include_router(progress.router, tags=["Progress"])
