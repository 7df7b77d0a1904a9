"""Repository implementations."""

from app.persistence.repositories.base import BaseRepository
from app.persistence.repositories.configuration_profile_repository import (
    ConfigurationProfileRepository,
)
from app.persistence.repositories.prompt_repository import (
    PromptTemplateRepository,
    PromptVariableRepository,
)

__all__ = [
    "BaseRepository",
    "ConfigurationProfileRepository",
    "PromptTemplateRepository",
    "PromptVariableRepository",
]
