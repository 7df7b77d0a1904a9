"""Assembles the request handed to the AI response generator."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from app.domain.configuration.schemas import AIModelConfig, ResponseFormattingConfig
from app.domain.services.configuration_service import ConfigurationService
from app.domain.services.template_registry import FALLBACK_VARIABLE, TemplateRegistry


@dataclass
class AssembledPrompt:
    """Resolved prompt plus the active profile sections the generator reads."""

    prompt: str
    template_id: Optional[str]
    profile_id: str
    ai_model: AIModelConfig
    response_formatting: ResponseFormattingConfig
    variables: dict[str, str] = field(default_factory=dict)


class PromptAssembler:
    """Combines a template from the registry with the active profile.

    The template is chosen in this order:
    1. An explicit ``template_id``
    2. The template mapped to ``intent``
    3. The default template
    """

    def __init__(self, configuration_service: ConfigurationService, registry: TemplateRegistry):
        self.configuration_service = configuration_service
        self.registry = registry

    async def assemble(
        self,
        user_query: str,
        intent: Optional[str] = None,
        template_id: Optional[str] = None,
        variables: Optional[dict[str, str]] = None,
    ) -> AssembledPrompt:
        """Build the prompt for one user query.

        Args:
            user_query: Raw text typed by the user
            intent: Detected intent label, if any
            template_id: Explicitly selected template, if any
            variables: Extra placeholder values (business_name, context, ...)

        Returns:
            AssembledPrompt with the resolved text and model parameters
        """
        values = dict(variables or {})
        values[FALLBACK_VARIABLE] = user_query
        values.setdefault("current_date", date.today().isoformat())

        if template_id is None:
            template_id = (await self.registry.select_for_intent(intent or "")).id

        prompt = await self.registry.apply(template_id, values)
        profile = await self.configuration_service.get_active()

        return AssembledPrompt(
            prompt=prompt,
            template_id=template_id,
            profile_id=profile.id,
            ai_model=profile.ai_model,
            response_formatting=profile.response_formatting,
            variables=values,
        )
