"""API router configuration."""

from fastapi import APIRouter

from src.modules.projects.interfaces.router import cache_router
from src.modules.projects.interfaces.router import router as projects_router

api_router = APIRouter()

# Projects (reads + release administration)
api_router.include_router(projects_router)

# Cache refresh webhook
api_router.include_router(cache_router)
