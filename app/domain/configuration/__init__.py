"""Configuration profile schemas, defaults and the merge resolver."""

from app.domain.configuration.merge import merge_profile, merge_section
from app.domain.configuration.schemas import (
    SECTION_NAMES,
    AIModelConfig,
    KnowledgeBaseConfig,
    Profile,
    ProfilePatch,
    ResponseFormattingConfig,
    WidgetAppearance,
)

__all__ = [
    "SECTION_NAMES",
    "AIModelConfig",
    "KnowledgeBaseConfig",
    "Profile",
    "ProfilePatch",
    "ResponseFormattingConfig",
    "WidgetAppearance",
    "merge_profile",
    "merge_section",
]
