"""API schemas package."""

from app.api.schemas.configuration import (
    AIModelSectionResponse,
    ApplyTemplateRequest,
    ApplyTemplateResponse,
    AssemblePromptRequest,
    AssemblePromptResponse,
    DuplicateProfileRequest,
    ProfileResponse,
    SelectTemplateRequest,
    ValidateTemplateRequest,
    WidgetAppearanceResponse,
)

__all__ = [
    "AIModelSectionResponse",
    "ApplyTemplateRequest",
    "ApplyTemplateResponse",
    "AssemblePromptRequest",
    "AssemblePromptResponse",
    "DuplicateProfileRequest",
    "ProfileResponse",
    "SelectTemplateRequest",
    "ValidateTemplateRequest",
    "WidgetAppearanceResponse",
]
