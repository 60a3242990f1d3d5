"""API v1 router aggregation."""

from fastapi import APIRouter

from filestore.api.v1.endpoints import files, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(files.router, prefix="/files", tags=["files"])
