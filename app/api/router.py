"""
Main API router that includes all endpoint routers.
"""
from fastapi import APIRouter

from app.api.v1.endpoints import uplinks


# Create main API router
api_router = APIRouter()

api_router.include_router(
    uplinks.router,
    tags=["Uplinks"]
)
