"""Configuration profile repository (the profile store)."""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConflictError
from app.domain.configuration.schemas import SECTION_NAMES, Profile
from app.domain.configuration.timestamps import next_update_stamp
from app.persistence.models.configuration_profile import ConfigurationProfile
from app.persistence.repositories.base import BaseRepository


def profile_to_columns(profile: Profile) -> dict:
    """Flatten a profile snapshot into column values."""
    data = profile.model_dump()
    columns = {
        "id": data["id"],
        "name": data["name"],
        "description": data["description"],
        "is_active": data["is_active"],
        "version": data["version"],
        "created_at": data["created_at"],
        "updated_at": data["updated_at"],
    }
    for section in SECTION_NAMES:
        columns[section] = data[section]
    return columns


class ConfigurationProfileRepository(BaseRepository[ConfigurationProfile]):
    """Pure data access for configuration profiles.

    Callers hand in fully formed ``Profile`` snapshots; no merging happens
    here. Store order is creation order.
    """

    order_by = (ConfigurationProfile.created_at, ConfigurationProfile.id)

    def __init__(self, session: AsyncSession):
        """Initialize configuration profile repository."""
        super().__init__(ConfigurationProfile, session)

    async def list_profiles(self) -> list[ConfigurationProfile]:
        """List all profiles in store order."""
        return await self.list()

    async def get(self, profile_id: str) -> ConfigurationProfile | None:
        """Get a profile by id."""
        return await self.get_by_id(profile_id)

    async def count(self) -> int:
        """Count stored profiles."""
        result = await self.session.execute(select(func.count()).select_from(ConfigurationProfile))
        return int(result.scalar_one())

    async def get_active(self) -> ConfigurationProfile | None:
        """Get the active profile (first in store order if the flag is ever duplicated)."""
        stmt = (
            select(ConfigurationProfile)
            .where(ConfigurationProfile.is_active == True)  # noqa: E712
            .order_by(*self.order_by)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert(self, profile: Profile) -> ConfigurationProfile:
        """Insert a new profile row."""
        return await self.create(**profile_to_columns(profile))

    async def replace(self, profile_id: str, profile: Profile) -> ConfigurationProfile | None:
        """Overwrite every column of an existing profile except its id and creation time.

        The UPDATE only matches the version this session loaded, so a write
        computed from a row that changed in the meantime raises ``ConflictError``.
        """
        instance = await self.get_by_id(profile_id)
        if instance is None:
            return None

        columns = profile_to_columns(profile)
        for key in ("id", "created_at", "version"):
            columns.pop(key)
        for key, value in columns.items():
            setattr(instance, key, value)

        await self._commit(profile_id)
        await self.session.refresh(instance)
        return instance

    async def activate_exclusive(self, profile_id: str, stamp: datetime) -> ConfigurationProfile | None:
        """Set ``is_active`` on one profile and clear it on all others in one commit.

        Only rows whose flag actually changes get a new ``updated_at`` and
        version, so activating the active profile is a no-op.
        """
        profiles = await self.list()
        target = next((p for p in profiles if p.id == profile_id), None)
        if target is None:
            return None

        for profile in profiles:
            should_be_active = profile.id == profile_id
            if profile.is_active != should_be_active:
                profile.is_active = should_be_active
                profile.updated_at = next_update_stamp(profile.updated_at, stamp)

        await self._commit(profile_id)
        await self.session.refresh(target)
        return target

    async def remove(
        self,
        profile_id: str,
        reassign_to: str | None = None,
        stamp: datetime | None = None,
    ) -> bool:
        """Delete a profile.

        When the deleted profile was active, ``reassign_to`` (or, if that row
        is missing, the first remaining profile) is activated in the same
        commit.
        """
        instance = await self.get_by_id(profile_id)
        if instance is None:
            return False

        was_active = instance.is_active
        await self.session.delete(instance)

        if was_active:
            successor = await self._find_successor(profile_id, reassign_to)
            if successor is not None:
                successor.is_active = True
                successor.updated_at = next_update_stamp(successor.updated_at, stamp)

        await self._commit(profile_id)
        return True

    async def _commit(self, profile_id: str) -> None:
        try:
            await self.session.commit()
        except StaleDataError as e:
            await self.session.rollback()
            result = await self.session.execute(
                select(ConfigurationProfile.version).where(ConfigurationProfile.id == profile_id)
            )
            current_version = result.scalar_one_or_none()
            raise ConflictError(
                f"Configuration profile {profile_id} was modified concurrently",
                current_version=current_version,
            ) from e

    async def _find_successor(self, removed_id: str, preferred_id: str | None) -> ConfigurationProfile | None:
        if preferred_id is not None and preferred_id != removed_id:
            preferred = await self.get_by_id(preferred_id)
            if preferred is not None:
                return preferred
        stmt = (
            select(ConfigurationProfile)
            .where(ConfigurationProfile.id != removed_id)
            .order_by(*self.order_by)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
