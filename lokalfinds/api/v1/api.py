"""
API v1 router aggregation
Combines all v1 route handlers into a single router
Reference: https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
from fastapi import APIRouter

from lokalfinds.api.v1.routes import classifiers, health, images, stores
from lokalfinds.core.config import settings


# All v1 routes are prefixed with /api/v1
api_router = APIRouter(prefix=settings.API_V1_PREFIX)

api_router.include_router(health.router)
api_router.include_router(stores.router)
api_router.include_router(images.router)
api_router.include_router(classifiers.router)
