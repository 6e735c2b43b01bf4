"""API v1 Router"""
from fastapi import APIRouter

from geowhd.admin.api.v1 import offices, statistics

# Create main API router
api_router = APIRouter()

# Include sub-routers
api_router.include_router(offices.router)
api_router.include_router(statistics.router)
