"""API router configuration."""

from fastapi import APIRouter

from result_portal.modules.portal.interfaces.router import router as portal_router

api_router = APIRouter()

# Portal
api_router.include_router(portal_router)
