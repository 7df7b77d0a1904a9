"""Pydantic schemas for prompt templates and the variable catalog."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TemplateStatusValue = Literal["draft", "published", "archived"]


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases at the JSON boundary."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PromptTemplateData(CamelModel):
    """Snapshot of a stored prompt template."""

    id: str
    name: str
    category: str
    template: str
    description: Optional[str] = None
    version: str = "1.0.0"
    tags: list[str] = Field(default_factory=list)
    status: TemplateStatusValue = "draft"
    is_default: bool = False
    is_active: bool = True
    usage_count: int = 0
    created_by: Optional[str] = None
    created_at: datetime
    last_modified: datetime


class TemplateCreate(CamelModel):
    """Fields accepted when creating a template."""

    id: Optional[str] = Field(None, pattern=r"^[A-Za-z0-9_-]+$", max_length=64)
    name: str
    template: str
    category: str = "General"
    description: Optional[str] = None
    version: str = "1.0.0"
    tags: list[str] = Field(default_factory=list)
    status: TemplateStatusValue = "draft"
    is_default: bool = False
    is_active: bool = True
    created_by: Optional[str] = None


class TemplateUpdate(CamelModel):
    """Partial template update; unset fields are left alone."""

    name: Optional[str] = None
    template: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    tags: Optional[list[str]] = None
    status: Optional[TemplateStatusValue] = None
    is_active: Optional[bool] = None


class PromptVariableData(CamelModel):
    """Variable catalog entry."""

    name: str
    description: str
    default_value: Optional[str] = None


class TemplateValidation(CamelModel):
    """Advisory check of a template against the variable catalog."""

    placeholders: list[str]
    unknown_variables: list[str]

    @property
    def is_clean(self) -> bool:
        return not self.unknown_variables
