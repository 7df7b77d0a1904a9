"""Configuration profile and prompt template request/response schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from app.domain.configuration.schemas import (
    AIModelConfig,
    KnowledgeBaseConfig,
    Profile,
    ResponseFormattingConfig,
    WidgetAppearance,
)


def mask_secret(value: Optional[str]) -> Optional[str]:
    """Show only the last four characters of a secret."""
    if not value:
        return value
    return "****" + value[-4:] if len(value) > 4 else "****"


class AIModelResponse(AIModelConfig):
    """AI model section with the API key masked."""

    @field_serializer("api_key")
    def _mask_api_key(self, value: Optional[str]) -> Optional[str]:
        return mask_secret(value)


class ProfileResponse(Profile):
    """Configuration profile as returned over HTTP."""

    ai_model: AIModelResponse = Field(default_factory=AIModelResponse)

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileResponse":
        return cls.model_validate(profile.model_dump())


class CamelRequest(BaseModel):
    """Request body accepting camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DuplicateProfileRequest(CamelRequest):
    """Request to copy an existing profile's sections into a new profile."""

    name: str
    description: Optional[str] = None


class WidgetAppearanceResponse(WidgetAppearance):
    """Widget section consumed by the widget renderer."""


class AIModelSectionResponse(BaseModel):
    """Model parameters consumed by the AI response generator."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    profile_id: str
    ai_model: AIModelResponse
    knowledge_base: KnowledgeBaseConfig
    response_formatting: ResponseFormattingConfig


class ApplyTemplateRequest(CamelRequest):
    """Variables for resolving a template."""

    variables: dict[str, str] = Field(default_factory=dict)


class ApplyTemplateResponse(CamelRequest):
    """Resolved template text."""

    template_id: str
    prompt: str


class SelectTemplateRequest(CamelRequest):
    """Intent label to route to a template."""

    intent: str


class ValidateTemplateRequest(CamelRequest):
    """Template text to check against the variable catalog."""

    template: str


class AssemblePromptRequest(CamelRequest):
    """Inputs for assembling a prompt for the AI response generator."""

    user_query: str
    intent: Optional[str] = None
    template_id: Optional[str] = None
    variables: dict[str, str] = Field(default_factory=dict)


class AssemblePromptResponse(CamelRequest):
    """Assembled prompt and the model parameters to call with."""

    prompt: str
    template_id: Optional[str]
    profile_id: str
    ai_model: AIModelResponse
    response_formatting: ResponseFormattingConfig
