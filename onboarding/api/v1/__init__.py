"""
API v1 routes.
"""

from fastapi import APIRouter

from onboarding.api.v1 import auth

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
