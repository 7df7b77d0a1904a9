"""API routes."""

from fastapi import APIRouter

from app.api.routes import configurations, prompt_templates

api_router = APIRouter()

api_router.include_router(configurations.router, prefix="/configurations", tags=["configurations"])
api_router.include_router(prompt_templates.router, prefix="/prompt-templates", tags=["prompt-templates"])
