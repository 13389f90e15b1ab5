"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from modules.backend.api.v1.endpoints import auth, mockups, proposals

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(proposals.router, prefix="/proposals", tags=["proposals"])
router.include_router(mockups.router, prefix="/mockups", tags=["mockups"])
