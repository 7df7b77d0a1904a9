"""Configuration manager: profile lifecycle, activation and the active-profile cache."""

import logging
import time
import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.domain.configuration.defaults import default_sections
from app.domain.configuration.merge import coerce_patch, merge_profile
from app.domain.configuration.schemas import SECTION_NAMES, Profile, ProfilePatch
from app.domain.configuration.timestamps import next_update_stamp, utcnow
from app.persistence.models.configuration_profile import ConfigurationProfile
from app.persistence.repositories.configuration_profile_repository import (
    ConfigurationProfileRepository,
)
from app.settings import settings

logger = logging.getLogger(__name__)

# camelCase section names accepted alongside the snake_case ones
SECTION_ALIASES = {
    "widgetAppearance": "widget_appearance",
    "knowledgeBase": "knowledge_base",
    "aiModel": "ai_model",
    "responseFormatting": "response_formatting",
}


class ActiveProfileCache:
    """Single-entry cache of the active profile, owned by one manager.

    Holds an immutable ``Profile`` snapshot. ``ttl_seconds`` of 0 or None
    keeps the entry until it is replaced or invalidated.
    """

    def __init__(self, ttl_seconds: int | None = None) -> None:
        self.ttl_seconds = ttl_seconds
        self._profile: Profile | None = None
        self._stored_at = 0.0

    def get(self) -> Profile | None:
        """Get the cached profile if present and not expired."""
        if self._profile is None:
            return None
        if self.ttl_seconds and time.monotonic() - self._stored_at >= self.ttl_seconds:
            self.invalidate()
            return None
        return self._profile

    def set(self, profile: Profile) -> None:
        """Cache a profile snapshot."""
        self._profile = profile
        self._stored_at = time.monotonic()

    def invalidate(self) -> None:
        """Drop the cached profile."""
        self._profile = None

    @property
    def profile_id(self) -> str | None:
        """Id of the cached profile, or None when empty."""
        return self._profile.id if self._profile is not None else None


def to_profile(row: ConfigurationProfile) -> Profile:
    """Snapshot a stored row."""
    return Profile.model_validate(row)


def normalize_section_name(section: str) -> str:
    """Map a snake_case or camelCase section name to its attribute name."""
    name = SECTION_ALIASES.get(section, section)
    if name not in SECTION_NAMES:
        raise ValidationError(f"Unknown configuration section: {section}")
    return name


class ConfigurationService:
    """Public operations on configuration profiles.

    Keeps exactly one profile active, protects the reserved profile from
    deletion and keeps its cache in step with the store: the cache is only
    written after the store commit for the same call has succeeded.
    """

    def __init__(
        self,
        session: AsyncSession,
        cache: ActiveProfileCache | None = None,
        reserved_profile_id: str | None = None,
    ) -> None:
        """Initialize configuration service."""
        self.session = session
        self.profile_repo = ConfigurationProfileRepository(session)
        self.cache = cache if cache is not None else ActiveProfileCache()
        self.reserved_profile_id = reserved_profile_id or settings.reserved_profile_id

    async def get_active(self) -> Profile:
        """Get the active profile, reading through the store on a cache miss.

        Raises:
            NotFoundError: If the store holds no active profile
        """
        cached = self.cache.get()
        if cached is not None:
            return cached

        row = await self.profile_repo.get_active()
        if row is None:
            raise NotFoundError("No active configuration profile")

        profile = to_profile(row)
        self.cache.set(profile)
        return profile

    async def list_all(self) -> list[Profile]:
        """List every profile straight from the store."""
        return [to_profile(row) for row in await self.profile_repo.list_profiles()]

    async def get(self, profile_id: str) -> Profile:
        """Get a profile by id.

        Raises:
            NotFoundError: If the id is unknown
        """
        row = await self.profile_repo.get(profile_id)
        if row is None:
            raise NotFoundError(f"Configuration profile {profile_id} not found")
        return to_profile(row)

    async def create(
        self,
        partial: ProfilePatch | Mapping[str, Any],
        source_id: str | None = None,
    ) -> Profile:
        """Create an inactive profile from default (or ``source_id``) sections.

        Args:
            partial: Name plus any fields to override
            source_id: Existing profile whose sections are cloned instead of
                the built-in defaults

        Raises:
            ValidationError: If the name is missing or blank
            NotFoundError: If ``source_id`` is unknown
        """
        patch = coerce_patch(partial)
        if patch.name is None or not patch.name.strip():
            raise ValidationError("Configuration name is required")

        if source_id is not None:
            source = await self.get(source_id)
            sections = {name: getattr(source, name).model_dump() for name in SECTION_NAMES}
        else:
            sections = default_sections()

        now = utcnow()
        base = Profile(
            id=f"config-{uuid.uuid4().hex[:12]}",
            name=patch.name,
            description="",
            is_active=False,
            version=1,
            created_at=now,
            updated_at=now,
            **sections,
        )
        profile = merge_profile(base, patch)

        # The first profile of an empty store has to carry the active flag
        if await self.profile_repo.count() == 0:
            profile = profile.model_copy(update={"is_active": True})

        created = to_profile(await self.profile_repo.insert(profile))
        if created.is_active:
            self.cache.set(created)

        logger.info(
            f"Created configuration profile {created.id}",
            extra={"profile_id": created.id, "source_id": source_id},
        )
        return created

    async def update(
        self,
        profile_id: str,
        patch: ProfilePatch | Mapping[str, Any],
        expected_version: int | None = None,
    ) -> Profile:
        """Apply a partial update to a profile.

        Args:
            profile_id: Profile to update
            patch: Fields to change; sections are merged field by field
            expected_version: When given, the update is refused unless the
                stored version still matches

        Raises:
            NotFoundError: If the id is unknown
            ValidationError: If the name is blanked or a section value is invalid
            ConflictError: If ``expected_version`` is stale, or another writer
                changed the profile before this update was stored
        """
        patch = coerce_patch(patch)
        row = await self.profile_repo.get(profile_id)
        if row is None:
            raise NotFoundError(f"Configuration profile {profile_id} not found")

        if expected_version is not None and row.version != expected_version:
            raise ConflictError(
                f"Configuration profile {profile_id} was modified (version {row.version}, expected {expected_version})",
                current_version=row.version,
            )

        changes = patch.changes()
        if "name" in changes and (changes["name"] is None or not changes["name"].strip()):
            raise ValidationError("Configuration name cannot be blank")

        current = to_profile(row)
        merged = merge_profile(current, patch).model_copy(
            update={"updated_at": next_update_stamp(current.updated_at)}
        )

        stored = await self.profile_repo.replace(profile_id, merged)
        if stored is None:
            raise NotFoundError(f"Configuration profile {profile_id} not found")

        updated = to_profile(stored)
        if self.cache.profile_id == profile_id:
            self.cache.set(updated)

        logger.info(
            f"Updated configuration profile {profile_id}",
            extra={"profile_id": profile_id, "fields": sorted(changes), "version": updated.version},
        )
        return updated

    async def update_section(
        self,
        section: str,
        values: Mapping[str, Any],
        profile_id: str | None = None,
        expected_version: int | None = None,
    ) -> Profile:
        """Partially update one section of a profile (the active one by default)."""
        section_name = normalize_section_name(section)
        if profile_id is None:
            profile_id = (await self.get_active()).id
        return await self.update(profile_id, {section_name: dict(values)}, expected_version)

    async def activate(self, profile_id: str) -> bool:
        """Make ``profile_id`` the only active profile.

        Returns:
            False if the id is unknown, True otherwise

        Raises:
            ConflictError: If a profile whose flag changes was written concurrently
        """
        row = await self.profile_repo.activate_exclusive(profile_id, utcnow())
        if row is None:
            logger.info(f"Cannot activate unknown configuration profile {profile_id}")
            return False

        self.cache.set(to_profile(row))
        logger.info(f"Activated configuration profile {profile_id}", extra={"profile_id": profile_id})
        return True

    async def ensure_deletable(self, profile_id: str) -> None:
        """Raise if ``delete`` would refuse this id.

        Raises:
            ForbiddenError: For the reserved profile
            NotFoundError: If the id is unknown
        """
        if profile_id == self.reserved_profile_id:
            raise ForbiddenError(f"Configuration profile {profile_id} cannot be deleted")
        if await self.profile_repo.get(profile_id) is None:
            raise NotFoundError(f"Configuration profile {profile_id} not found")

    async def delete(self, profile_id: str) -> bool:
        """Delete a profile, re-activating the reserved profile if needed.

        Returns:
            False (and nothing changes) for unknown ids and the reserved id
        """
        if profile_id == self.reserved_profile_id:
            return False

        row = await self.profile_repo.get(profile_id)
        if row is None:
            return False

        if row.is_active and await self.profile_repo.get(self.reserved_profile_id) is None:
            logger.warning(
                f"Reserved profile {self.reserved_profile_id} missing; activating first remaining profile",
                extra={"profile_id": profile_id},
            )

        removed = await self.profile_repo.remove(
            profile_id,
            reassign_to=self.reserved_profile_id,
            stamp=utcnow(),
        )
        self.cache.invalidate()

        logger.info(f"Deleted configuration profile {profile_id}", extra={"profile_id": profile_id})
        return removed
