"""Domain services."""

from app.domain.services.configuration_service import ActiveProfileCache, ConfigurationService
from app.domain.services.template_registry import TemplateRegistry

__all__ = ["ActiveProfileCache", "ConfigurationService", "TemplateRegistry"]
