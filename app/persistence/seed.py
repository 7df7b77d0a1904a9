"""Seed the built-in profiles, templates and variables."""

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.configuration.defaults import SEED_PROFILES, default_sections
from app.domain.configuration.merge import merge_section
from app.domain.configuration.schemas import SECTION_NAMES, Profile
from app.domain.configuration.timestamps import utcnow
from app.domain.prompts.defaults import DEFAULT_TEMPLATES, DEFAULT_VARIABLES
from app.persistence.models.prompt import PromptTemplate, PromptVariable
from app.persistence.repositories.configuration_profile_repository import (
    ConfigurationProfileRepository,
    profile_to_columns,
)
from app.persistence.repositories.prompt_repository import (
    PromptTemplateRepository,
    PromptVariableRepository,
)

logger = logging.getLogger(__name__)


async def seed_profiles(session: AsyncSession) -> int:
    """Insert the built-in profiles into an empty profile store.

    Returns:
        Number of profiles inserted
    """
    repo = ConfigurationProfileRepository(session)
    if await repo.count() > 0:
        return 0

    now = utcnow()
    for position, seed in enumerate(SEED_PROFILES):
        # Distinct creation stamps keep the seed order as store order
        stamp = now + timedelta(microseconds=position)
        sections = default_sections()
        for name in SECTION_NAMES:
            if name in seed:
                sections[name] = merge_section(sections[name], seed[name])
        profile = Profile(
            id=seed["id"],
            name=seed["name"],
            description=seed.get("description", ""),
            is_active=seed.get("is_active", False),
            created_at=stamp,
            updated_at=stamp,
            **sections,
        )
        session.add(repo.model(**profile_to_columns(profile)))

    await session.commit()
    return len(SEED_PROFILES)


async def seed_templates(session: AsyncSession) -> int:
    """Insert missing built-in templates and catalog variables.

    Returns:
        Number of rows inserted
    """
    template_repo = PromptTemplateRepository(session)
    variable_repo = PromptVariableRepository(session)
    has_default = await template_repo.get_default() is not None
    now = utcnow()
    inserted = 0

    for seed in DEFAULT_TEMPLATES:
        if await template_repo.get_by_id(seed["id"]) is not None:
            continue
        values = {key: value for key, value in seed.items() if key != "age"}
        if has_default:
            values["is_default"] = False
        created_at = now - seed["age"]
        session.add(PromptTemplate(created_at=created_at, last_modified=now, **values))
        inserted += 1

    for position, seed in enumerate(DEFAULT_VARIABLES):
        if await variable_repo.get_by_id(seed["name"]) is not None:
            continue
        session.add(PromptVariable(position=position, **seed))
        inserted += 1

    await session.commit()
    return inserted


async def seed_defaults(session: AsyncSession) -> None:
    """Seed everything the console needs to start."""
    profiles = await seed_profiles(session)
    templates = await seed_templates(session)
    if profiles or templates:
        logger.info(
            "Seeded default data",
            extra={"profiles_inserted": profiles, "template_rows_inserted": templates},
        )
