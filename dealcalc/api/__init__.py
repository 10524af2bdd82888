"""
API routes for the deal calculator.
"""

from fastapi import APIRouter

from dealcalc.api import analyses, calculations

router = APIRouter()

# Include sub-routers
router.include_router(analyses.router, prefix="/analyses", tags=["analyses"])
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
