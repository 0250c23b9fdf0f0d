"""
API v1 package.

Contains versioned API routes for the field-reporting service.
"""

from fastapi import APIRouter

from src.api.v1 import admin, auth, reports

router = APIRouter()
router.include_router(auth.router)
router.include_router(admin.router)
router.include_router(reports.router)

__all__ = ["router"]
