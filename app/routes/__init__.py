"""APIRouter registration for the survey response service."""

from __future__ import annotations

from fastapi import APIRouter

from app.routes.public import router as public_router
from app.routes.surveys import router as surveys_router

api_router = APIRouter()
# Public routes first: "/surveys/public/{link}" must not be captured by "/surveys/{survey_id}"
api_router.include_router(public_router, tags=["Public", "Responses"])
api_router.include_router(surveys_router, tags=["Surveys"])

__all__ = ["api_router"]
