"""
API routes for the syndication engine.
"""

from fastapi import APIRouter

from syndicator.api import calculations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
