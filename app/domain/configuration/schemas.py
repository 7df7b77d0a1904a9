"""Pydantic schemas for configuration profiles and their sections.

Field defaults double as the built-in section values a new profile starts
from. Python code uses snake_case; the JSON boundary uses camelCase aliases.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SECTION_NAMES = ("widget_appearance", "knowledge_base", "ai_model", "response_formatting")

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"

ModelType = Literal["gemini", "huggingface", "custom"]
WidgetPosition = Literal["bottom-right", "bottom-left", "top-right", "top-left"]
HeadingStyle = Literal["default", "numbered", "question", "minimal"]
ContentStyle = Literal["paragraphs", "bullets", "steps", "cards"]


class SectionModel(BaseModel):
    """Base for the four profile sections."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
        protected_namespaces=(),
    )


class WidgetAppearance(SectionModel):
    """Look of the embedded chat widget."""

    primary_color: str = Field("#4f46e5", pattern=HEX_COLOR_PATTERN)
    secondary_color: str = Field("#ffffff", pattern=HEX_COLOR_PATTERN)
    font_family: str = "Inter"
    position: WidgetPosition = "bottom-right"
    initial_message: str = "Hello! How can I help you today?"
    title: str = "AI Assistant"
    subtitle: str = "Ask me anything!"
    avatar_url: str = "https://api.dicebear.com/7.x/avataaars/svg?seed=aiassistant"
    logo_url: Optional[str] = None
    custom_css: Optional[str] = Field(None, alias="customCSS")


class KnowledgeBaseConfig(SectionModel):
    """How retrieved knowledge is injected into answers."""

    enable_knowledge_base: bool = True
    auto_inject_relevant_content: bool = True
    cite_sources: bool = True
    relevance_threshold: float = Field(75, ge=0, le=100)
    max_sources: int = Field(3, gt=0)


class AIModelConfig(SectionModel):
    """Model parameters handed to the AI response generator."""

    model_type: ModelType = "gemini"
    temperature: float = Field(0.7, ge=0, le=1)
    max_tokens: int = Field(1000, gt=0)
    top_p: float = Field(0.9, ge=0, le=1)
    api_key: Optional[str] = None
    model_version: Optional[str] = None


class ResponseFormattingConfig(SectionModel):
    """Structure applied to generated answers."""

    enable_formatting: bool = True
    include_title: bool = True
    include_intro: bool = True
    include_content_blocks: bool = True
    include_faq: bool = Field(False, alias="includeFAQ")
    include_actions: bool = True
    include_disclaimer: bool = False
    default_disclaimer: str = "This information is provided for general guidance only."
    heading_style: HeadingStyle = "default"
    content_style: ContentStyle = "paragraphs"
    max_length: int = Field(500, gt=0)


class Profile(BaseModel):
    """Immutable snapshot of a stored configuration profile."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    id: str
    name: str
    description: str = ""
    is_active: bool = False
    version: int = 1
    created_at: datetime
    updated_at: datetime
    widget_appearance: WidgetAppearance = Field(default_factory=WidgetAppearance)
    knowledge_base: KnowledgeBaseConfig = Field(default_factory=KnowledgeBaseConfig)
    ai_model: AIModelConfig = Field(default_factory=AIModelConfig)
    response_formatting: ResponseFormattingConfig = Field(default_factory=ResponseFormattingConfig)

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value):
        return "" if value is None else value


class ProfilePatch(BaseModel):
    """Partial profile: only the fields that were supplied are applied.

    Section values are validated against the full section model, so each
    supplied setting is type- and range-checked while ``exclude_unset``
    keeps the untouched ones out of the patch. Unknown keys, and the
    bookkeeping fields owned by the store, are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    name: Optional[str] = None
    description: Optional[str] = None
    widget_appearance: Optional[WidgetAppearance] = None
    knowledge_base: Optional[KnowledgeBaseConfig] = None
    ai_model: Optional[AIModelConfig] = None
    response_formatting: Optional[ResponseFormattingConfig] = None

    def changes(self) -> dict:
        """Return only the explicitly supplied fields, sections trimmed likewise."""
        return self.model_dump(exclude_unset=True)
