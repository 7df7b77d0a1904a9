"""Prompt template repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.persistence.models.prompt import PromptTemplate, PromptVariable
from app.persistence.repositories.base import BaseRepository


class PromptTemplateRepository(BaseRepository[PromptTemplate]):
    """Repository for PromptTemplate entities."""

    order_by = (PromptTemplate.created_at, PromptTemplate.id)

    def __init__(self, session: AsyncSession):
        """Initialize prompt template repository."""
        super().__init__(PromptTemplate, session)

    async def get_default(self) -> PromptTemplate | None:
        """Get the template flagged as default."""
        stmt = (
            select(PromptTemplate)
            .where(PromptTemplate.is_default == True)  # noqa: E712
            .order_by(*self.order_by)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_default(self, template_id: str) -> PromptTemplate | None:
        """Flag one template as default and clear the flag everywhere else."""
        template = await self.get_by_id(template_id)
        if template is None:
            return None

        others = await self.list(is_default=True)
        for other in others:
            if other.id != template_id:
                other.is_default = False
        template.is_default = True

        await self.session.commit()
        await self.session.refresh(template)
        return template

    async def increment_usage(self, template_id: str) -> PromptTemplate | None:
        """Bump the usage counter of a template."""
        template = await self.get_by_id(template_id)
        if template is None:
            return None
        template.usage_count = (template.usage_count or 0) + 1
        await self.session.commit()
        return template


class PromptVariableRepository(BaseRepository[PromptVariable]):
    """Repository for the variable catalog."""

    order_by = (PromptVariable.position, PromptVariable.name)

    def __init__(self, session: AsyncSession):
        """Initialize prompt variable repository."""
        super().__init__(PromptVariable, session)

    async def get_by_id(self, name: str) -> PromptVariable | None:
        """Get a variable by name."""
        stmt = select(PromptVariable).where(PromptVariable.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def names(self) -> set[str]:
        """All catalog variable names."""
        result = await self.session.execute(select(PromptVariable.name))
        return set(result.scalars().all())
