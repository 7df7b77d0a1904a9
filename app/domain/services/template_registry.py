"""Template registry: prompt templates, the variable catalog and prompt resolution."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.domain.configuration.timestamps import utcnow
from app.domain.prompts.defaults import INTENT_TEMPLATE_MAP
from app.domain.prompts.renderer import extract_placeholders, render_template
from app.domain.prompts.schemas import (
    PromptTemplateData,
    PromptVariableData,
    TemplateCreate,
    TemplateUpdate,
    TemplateValidation,
)
from app.persistence.repositories.prompt_repository import (
    PromptTemplateRepository,
    PromptVariableRepository,
)

logger = logging.getLogger(__name__)

FALLBACK_VARIABLE = "user_query"


class TemplateRegistry:
    """Service for prompt template lookup and resolution.

    At most one template carries ``is_default``; flagging a template as
    default clears the flag on the previous one. There is no list-order
    fallback: ``get_default`` raises when nothing is flagged.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize template registry."""
        self.session = session
        self.template_repo = PromptTemplateRepository(session)
        self.variable_repo = PromptVariableRepository(session)

    async def list(self, active_only: bool = False) -> list[PromptTemplateData]:
        """List templates in store order."""
        filters = {"is_active": True} if active_only else {}
        rows = await self.template_repo.list(**filters)
        return [PromptTemplateData.model_validate(row) for row in rows]

    async def get_by_id(self, template_id: str) -> PromptTemplateData:
        """Get a template by id.

        Raises:
            NotFoundError: If the id is unknown
        """
        row = await self.template_repo.get_by_id(template_id)
        if row is None:
            raise NotFoundError(f"Prompt template {template_id} not found")
        return PromptTemplateData.model_validate(row)

    async def get_default(self) -> PromptTemplateData:
        """Get the template flagged as default.

        Raises:
            NotFoundError: If no template is flagged
        """
        row = await self.template_repo.get_default()
        if row is None:
            raise NotFoundError("No default prompt template configured")
        return PromptTemplateData.model_validate(row)

    async def list_variables(self) -> list[PromptVariableData]:
        """List the variable catalog."""
        rows = await self.variable_repo.list()
        return [PromptVariableData.model_validate(row) for row in rows]

    async def render(self, template_id: str, variables: Mapping[str, str]) -> str:
        """Resolve a template against variable values.

        Raises:
            NotFoundError: If the id is unknown
        """
        template = await self.get_by_id(template_id)
        return render_template(template.template, variables)

    async def apply(self, template_id: str, variables: Mapping[str, str]) -> str:
        """Resolve a template, echoing the raw user query if the template is unknown."""
        try:
            return await self.render(template_id, variables)
        except NotFoundError:
            logger.warning(
                f"Prompt template {template_id} not found, falling back to raw query",
                extra={"template_id": template_id},
            )
            return variables.get(FALLBACK_VARIABLE) or ""

    async def select_for_intent(self, intent: str) -> PromptTemplateData:
        """Pick the template for a detected intent, or the default template."""
        template_id = INTENT_TEMPLATE_MAP.get((intent or "").strip().lower())
        if template_id is not None:
            row = await self.template_repo.get_by_id(template_id)
            if row is not None:
                return PromptTemplateData.model_validate(row)
        return await self.get_default()

    async def validate(self, template_text: str) -> TemplateValidation:
        """Report placeholders that are not in the variable catalog (advisory)."""
        placeholders = extract_placeholders(template_text)
        known = await self.variable_repo.names()
        return TemplateValidation(
            placeholders=placeholders,
            unknown_variables=[name for name in placeholders if name not in known],
        )

    async def create(self, data: TemplateCreate) -> PromptTemplateData:
        """Create a template.

        Raises:
            ValidationError: If the name or template text is blank, or the id is taken
        """
        if not data.name.strip():
            raise ValidationError("Template name is required")
        if not data.template.strip():
            raise ValidationError("Template text is required")

        template_id = data.id or f"template-{uuid.uuid4().hex[:12]}"
        if await self.template_repo.get_by_id(template_id) is not None:
            raise ValidationError(f"Prompt template {template_id} already exists")

        now = utcnow()
        values = data.model_dump(exclude={"id", "is_default"})
        row = await self.template_repo.create(
            id=template_id,
            is_default=False,
            created_at=now,
            last_modified=now,
            **values,
        )
        if data.is_default:
            row = await self.template_repo.set_default(row.id)

        logger.info(f"Created prompt template {template_id}", extra={"template_id": template_id})
        return PromptTemplateData.model_validate(row)

    async def update(self, template_id: str, data: TemplateUpdate) -> PromptTemplateData:
        """Apply a partial update to a template.

        Raises:
            NotFoundError: If the id is unknown
            ValidationError: If the name or template text is blanked
        """
        changes = data.model_dump(exclude_unset=True)
        for field in ("name", "template"):
            if field in changes and (changes[field] is None or not changes[field].strip()):
                raise ValidationError(f"Template {field} cannot be blank")
        # Only the description column is nullable
        changes = {k: v for k, v in changes.items() if v is not None or k == "description"}

        row = await self.template_repo.update(template_id, last_modified=utcnow(), **changes)
        if row is None:
            raise NotFoundError(f"Prompt template {template_id} not found")

        logger.info(f"Updated prompt template {template_id}", extra={"template_id": template_id})
        return PromptTemplateData.model_validate(row)

    async def set_default(self, template_id: str) -> PromptTemplateData:
        """Make a template the single default.

        Raises:
            NotFoundError: If the id is unknown
        """
        row = await self.template_repo.set_default(template_id)
        if row is None:
            raise NotFoundError(f"Prompt template {template_id} not found")
        return PromptTemplateData.model_validate(row)

    async def record_usage(self, template_id: str) -> None:
        """Count one resolution of a template; unknown ids are ignored."""
        await self.template_repo.increment_usage(template_id)
