"""API v1 router."""

from fastapi import APIRouter

from crashlogs.api.v1 import crashes, parsers

router = APIRouter()

router.include_router(crashes.router, prefix="/crashes", tags=["Crash Logs"])
router.include_router(parsers.router, prefix="/parsers", tags=["Parsers"])
