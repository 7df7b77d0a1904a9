"""Database models."""

from app.persistence.models.configuration_profile import ConfigurationProfile
from app.persistence.models.prompt import PromptTemplate, PromptVariable, TemplateStatus

__all__ = [
    "ConfigurationProfile",
    "PromptTemplate",
    "PromptVariable",
    "TemplateStatus",
]
