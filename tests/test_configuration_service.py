"""Tests for the configuration manager."""

from datetime import datetime, timedelta

import pytest

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.domain.configuration.defaults import default_sections
from app.domain.configuration.schemas import Profile
from app.domain.services.configuration_service import ActiveProfileCache, ConfigurationService
from app.persistence.repositories.configuration_profile_repository import (
    ConfigurationProfileRepository,
)


async def insert_profile(session, profile_id: str, is_active: bool = False, offset: int = 0) -> Profile:
    """Insert a profile with default sections directly into the store."""
    stamp = datetime(2025, 1, 1) + timedelta(seconds=offset)
    profile = Profile(
        id=profile_id,
        name=profile_id.title(),
        is_active=is_active,
        created_at=stamp,
        updated_at=stamp,
        **default_sections(),
    )
    await ConfigurationProfileRepository(session).insert(profile)
    return profile


def active_ids(profiles: list[Profile]) -> list[str]:
    return [p.id for p in profiles if p.is_active]


@pytest.fixture
async def default_only(db_session):
    """Store holding only the active reserved profile."""
    await insert_profile(db_session, "default", is_active=True)
    return db_session


class TestGetActive:
    """Test cases for reading the active profile."""

    @pytest.mark.asyncio
    async def test_returns_seeded_default(self, seeded_session):
        service = ConfigurationService(seeded_session)
        profile = await service.get_active()
        assert profile.id == "default"
        assert profile.is_active is True

    @pytest.mark.asyncio
    async def test_populates_cache(self, seeded_session):
        cache = ActiveProfileCache()
        service = ConfigurationService(seeded_session, cache=cache)
        assert cache.get() is None

        profile = await service.get_active()
        assert cache.get() == profile

    @pytest.mark.asyncio
    async def test_empty_store_raises(self, db_session):
        service = ConfigurationService(db_session)
        with pytest.raises(NotFoundError):
            await service.get_active()

    @pytest.mark.asyncio
    async def test_managers_do_not_share_cache(self, seeded_session):
        first = ConfigurationService(seeded_session)
        second = ConfigurationService(seeded_session)
        await first.get_active()
        assert first.cache.get() is not None
        assert second.cache.get() is None


class TestListAndGet:
    """Test cases for listing and reading profiles."""

    @pytest.mark.asyncio
    async def test_list_all_in_store_order(self, seeded_session):
        service = ConfigurationService(seeded_session)
        profiles = await service.list_all()
        assert [p.id for p in profiles] == ["default", "customer-support", "sales-assistant"]
        assert active_ids(profiles) == ["default"]

    @pytest.mark.asyncio
    async def test_seeded_sections_override_defaults(self, seeded_session):
        service = ConfigurationService(seeded_session)
        sales = await service.get("sales-assistant")
        assert sales.widget_appearance.primary_color == "#10b981"
        assert sales.ai_model.temperature == 0.8
        # Fields not named by the seed keep their defaults
        assert sales.ai_model.top_p == 0.9

    @pytest.mark.asyncio
    async def test_get_unknown_raises(self, seeded_session):
        service = ConfigurationService(seeded_session)
        with pytest.raises(NotFoundError):
            await service.get("missing")


class TestCreate:
    """Test cases for creating profiles."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_blank_name_rejected(self, default_only, name):
        service = ConfigurationService(default_only)
        with pytest.raises(ValidationError):
            await service.create({"name": name})

    @pytest.mark.asyncio
    async def test_new_profile_is_inactive_with_defaults(self, default_only):
        service = ConfigurationService(default_only)
        created = await service.create({"name": "Sales", "aiModel": {"maxTokens": 250}})

        assert created.id.startswith("config-")
        assert created.is_active is False
        assert created.version == 1
        assert created.ai_model.max_tokens == 250
        assert created.ai_model.temperature == 0.7
        assert created.widget_appearance.title == "AI Assistant"
        assert active_ids(await service.list_all()) == ["default"]

    @pytest.mark.asyncio
    async def test_first_profile_in_empty_store_is_active(self, db_session):
        service = ConfigurationService(db_session)
        created = await service.create({"name": "First"})
        assert created.is_active is True
        assert (await service.get_active()).id == created.id

    @pytest.mark.asyncio
    async def test_create_from_source_copies_sections(self, seeded_session):
        service = ConfigurationService(seeded_session)
        copy = await service.create({"name": "Sales copy"}, source_id="sales-assistant")
        source = await service.get("sales-assistant")

        assert copy.id != source.id
        assert copy.is_active is False
        assert copy.widget_appearance == source.widget_appearance
        assert copy.ai_model == source.ai_model

    @pytest.mark.asyncio
    async def test_create_from_unknown_source_raises(self, seeded_session):
        service = ConfigurationService(seeded_session)
        with pytest.raises(NotFoundError):
            await service.create({"name": "Copy"}, source_id="missing")


class TestUpdate:
    """Test cases for partial updates."""

    @pytest.mark.asyncio
    async def test_unknown_id_raises(self, seeded_session):
        service = ConfigurationService(seeded_session)
        with pytest.raises(NotFoundError):
            await service.update("missing", {"name": "X"})

    @pytest.mark.asyncio
    async def test_merge_preserves_untouched_fields(self, seeded_session):
        service = ConfigurationService(seeded_session)
        before = await service.get("customer-support")

        after = await service.update("customer-support", {"aiModel": {"temperature": 0.3}})

        assert after.ai_model.temperature == 0.3
        assert after.ai_model.model_dump(exclude={"temperature"}) == before.ai_model.model_dump(
            exclude={"temperature"}
        )
        for section in ("widget_appearance", "knowledge_base", "response_formatting"):
            assert getattr(after, section) == getattr(before, section)
        assert after.name == before.name
        assert after.created_at == before.created_at

    @pytest.mark.asyncio
    async def test_updated_at_and_version_increase(self, seeded_session):
        service = ConfigurationService(seeded_session)
        first = await service.update("default", {"description": "one"})
        second = await service.update("default", {"description": "two"})

        assert second.updated_at > first.updated_at
        assert second.version == first.version + 1

    @pytest.mark.asyncio
    async def test_update_of_active_profile_refreshes_cache(self, seeded_session):
        service = ConfigurationService(seeded_session)
        await service.get_active()

        await service.update("default", {"widgetAppearance": {"title": "Helper"}})

        assert service.cache.get().widget_appearance.title == "Helper"
        assert (await service.get_active()).widget_appearance.title == "Helper"

    @pytest.mark.asyncio
    async def test_update_of_inactive_profile_leaves_cache(self, seeded_session):
        service = ConfigurationService(seeded_session)
        cached = await service.get_active()

        await service.update("sales-assistant", {"name": "Sales 2"})

        assert service.cache.get() == cached

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, seeded_session):
        service = ConfigurationService(seeded_session)
        with pytest.raises(ValidationError):
            await service.update("default", {"name": "  "})

    @pytest.mark.asyncio
    async def test_stale_version_is_rejected(self, seeded_session):
        service = ConfigurationService(seeded_session)
        current = await service.get("sales-assistant")
        await service.update("sales-assistant", {"description": "edited"}, expected_version=current.version)

        with pytest.raises(ConflictError) as exc_info:
            await service.update("sales-assistant", {"description": "late"}, expected_version=current.version)

        assert exc_info.value.current_version == current.version + 1
        assert (await service.get("sales-assistant")).description == "edited"

    @pytest.mark.asyncio
    async def test_bookkeeping_and_unknown_keys_rejected(self, seeded_session):
        service = ConfigurationService(seeded_session)
        for patch in ({"isActive": True}, {"version": 9}, {"aiModels": {"temperature": 0.1}}):
            with pytest.raises(ValidationError):
                await service.update("sales-assistant", patch)

        assert (await service.get("sales-assistant")).is_active is False

    @pytest.mark.asyncio
    async def test_update_section_targets_active_profile(self, seeded_session):
        service = ConfigurationService(seeded_session)
        updated = await service.update_section("knowledgeBase", {"maxSources": 5})
        assert updated.id == "default"
        assert updated.knowledge_base.max_sources == 5
        assert updated.knowledge_base.cite_sources is True

    @pytest.mark.asyncio
    async def test_update_section_unknown_section(self, seeded_session):
        service = ConfigurationService(seeded_session)
        with pytest.raises(ValidationError):
            await service.update_section("layout", {"x": 1})


class TestActivate:
    """Test cases for activation."""

    @pytest.mark.asyncio
    async def test_unknown_id_returns_false(self, seeded_session):
        service = ConfigurationService(seeded_session)
        before = [p.model_dump() for p in await service.list_all()]

        assert await service.activate("missing") is False
        assert [p.model_dump() for p in await service.list_all()] == before

    @pytest.mark.asyncio
    async def test_exactly_one_active(self, seeded_session):
        service = ConfigurationService(seeded_session)
        assert await service.activate("sales-assistant") is True

        assert active_ids(await service.list_all()) == ["sales-assistant"]
        assert (await service.get_active()).id == "sales-assistant"
        assert service.cache.profile_id == "sales-assistant"

    @pytest.mark.asyncio
    async def test_activating_active_profile_changes_nothing(self, seeded_session):
        service = ConfigurationService(seeded_session)
        before = [p.model_dump() for p in await service.list_all()]

        assert await service.activate("default") is True
        assert [p.model_dump() for p in await service.list_all()] == before


class TestDelete:
    """Test cases for deletion and reassignment."""

    @pytest.mark.asyncio
    async def test_default_cannot_be_deleted(self, seeded_session):
        service = ConfigurationService(seeded_session)
        before = [p.model_dump() for p in await service.list_all()]

        assert await service.delete("default") is False
        assert [p.model_dump() for p in await service.list_all()] == before

    @pytest.mark.asyncio
    async def test_unknown_id_returns_false(self, seeded_session):
        service = ConfigurationService(seeded_session)
        assert await service.delete("missing") is False

    @pytest.mark.asyncio
    async def test_deleting_active_profile_reactivates_default(self, seeded_session):
        service = ConfigurationService(seeded_session)
        await service.activate("customer-support")

        assert await service.delete("customer-support") is True

        profiles = await service.list_all()
        assert "customer-support" not in [p.id for p in profiles]
        assert active_ids(profiles) == ["default"]
        assert (await service.get_active()).id == "default"

    @pytest.mark.asyncio
    async def test_deleting_inactive_profile_keeps_active(self, seeded_session):
        service = ConfigurationService(seeded_session)
        await service.get_active()

        assert await service.delete("sales-assistant") is True

        assert service.cache.get() is None
        assert active_ids(await service.list_all()) == ["default"]

    @pytest.mark.asyncio
    async def test_missing_default_falls_back_to_first_remaining(self, db_session):
        await insert_profile(db_session, "alpha", is_active=True, offset=0)
        await insert_profile(db_session, "beta", offset=1)
        await insert_profile(db_session, "gamma", offset=2)
        service = ConfigurationService(db_session)

        assert await service.delete("alpha") is True
        assert active_ids(await service.list_all()) == ["beta"]

    @pytest.mark.asyncio
    async def test_ensure_deletable(self, seeded_session):
        service = ConfigurationService(seeded_session)
        with pytest.raises(ForbiddenError):
            await service.ensure_deletable("default")
        with pytest.raises(NotFoundError):
            await service.ensure_deletable("missing")
        await service.ensure_deletable("sales-assistant")

    @pytest.mark.asyncio
    async def test_reserved_id_is_configurable(self, db_session):
        await insert_profile(db_session, "home", is_active=True, offset=0)
        await insert_profile(db_session, "other", offset=1)
        service = ConfigurationService(db_session, reserved_profile_id="home")

        assert await service.delete("home") is False
        await service.activate("other")
        assert await service.delete("other") is True
        assert active_ids(await service.list_all()) == ["home"]


class TestConcurrentWriters:
    """Two sessions writing the same profiles from stale reads."""

    @pytest.mark.asyncio
    async def test_stale_update_without_expected_version_conflicts(self, session_factory):
        async with session_factory() as session_a, session_factory() as session_b:
            writer_a = ConfigurationService(session_a)
            writer_b = ConfigurationService(session_b)
            seen_by_b = await writer_b.get("default")

            stored = await writer_a.update("default", {"description": "from a"})

            with pytest.raises(ConflictError) as exc_info:
                await writer_b.update("default", {"name": "From B"})

            assert stored.version == seen_by_b.version + 1
            assert exc_info.value.current_version == stored.version

        async with session_factory() as session:
            final = await ConfigurationService(session).get("default")
            assert final.description == "from a"
            assert final.name == stored.name
            assert final.version == stored.version

    @pytest.mark.asyncio
    async def test_stale_activation_conflicts(self, session_factory):
        async with session_factory() as session_a, session_factory() as session_b:
            writer_a = ConfigurationService(session_a)
            writer_b = ConfigurationService(session_b)
            await writer_b.list_all()

            assert await writer_a.activate("sales-assistant") is True

            with pytest.raises(ConflictError):
                await writer_b.activate("customer-support")

        async with session_factory() as session:
            profiles = await ConfigurationService(session).list_all()
            assert active_ids(profiles) == ["sales-assistant"]

    @pytest.mark.asyncio
    async def test_stale_delete_conflicts(self, session_factory):
        async with session_factory() as session_a, session_factory() as session_b:
            writer_a = ConfigurationService(session_a)
            writer_b = ConfigurationService(session_b)
            await writer_b.get("sales-assistant")

            await writer_a.update("sales-assistant", {"description": "kept"})

            with pytest.raises(ConflictError):
                await writer_b.delete("sales-assistant")

        async with session_factory() as session:
            kept = await ConfigurationService(session).get("sales-assistant")
            assert kept.description == "kept"

    @pytest.mark.asyncio
    async def test_fresh_read_after_conflict_succeeds(self, session_factory):
        async with session_factory() as session_a, session_factory() as session_b:
            writer_a = ConfigurationService(session_a)
            writer_b = ConfigurationService(session_b)
            await writer_b.get("default")
            await writer_a.update("default", {"description": "from a"})

            with pytest.raises(ConflictError):
                await writer_b.update("default", {"description": "from b"})

            retried = await writer_b.update("default", {"description": "from b"})
            assert retried.description == "from b"


class TestLifecycle:
    """End-to-end profile lifecycle."""

    @pytest.mark.asyncio
    async def test_sales_profile_scenario(self, default_only):
        service = ConfigurationService(default_only)

        sales = await service.create({"name": "Sales"})
        profiles = await service.list_all()
        assert sales.id in [p.id for p in profiles]
        assert sales.is_active is False
        assert active_ids(profiles) == ["default"]

        assert await service.activate(sales.id) is True
        assert active_ids(await service.list_all()) == [sales.id]

        assert await service.delete(sales.id) is True
        profiles = await service.list_all()
        assert [p.id for p in profiles] == ["default"]
        assert active_ids(profiles) == ["default"]

    @pytest.mark.asyncio
    async def test_single_active_after_every_call(self, default_only):
        service = ConfigurationService(default_only)

        a = await service.create({"name": "A"})
        assert len(active_ids(await service.list_all())) == 1
        b = await service.create({"name": "B"})
        assert len(active_ids(await service.list_all())) == 1
        await service.activate(a.id)
        assert len(active_ids(await service.list_all())) == 1
        await service.update(a.id, {"description": "edited"})
        assert len(active_ids(await service.list_all())) == 1
        await service.activate(b.id)
        assert len(active_ids(await service.list_all())) == 1
        await service.delete(b.id)
        assert active_ids(await service.list_all()) == ["default"]
        await service.delete(a.id)
        assert active_ids(await service.list_all()) == ["default"]


class TestActiveProfileCache:
    """Test cases for the active profile cache."""

    def test_ttl_expiry(self, monkeypatch):
        clock = [100.0]
        monkeypatch.setattr(
            "app.domain.services.configuration_service.time.monotonic", lambda: clock[0]
        )
        stamp = datetime(2025, 1, 1)
        profile = Profile(id="p", name="P", created_at=stamp, updated_at=stamp)

        cache = ActiveProfileCache(ttl_seconds=10)
        cache.set(profile)
        clock[0] = 105.0
        assert cache.get() == profile
        clock[0] = 111.0
        assert cache.get() is None
        assert cache.profile_id is None

    def test_no_ttl_keeps_entry(self):
        stamp = datetime(2025, 1, 1)
        profile = Profile(id="p", name="P", created_at=stamp, updated_at=stamp)
        cache = ActiveProfileCache()
        cache.set(profile)
        assert cache.get() == profile
        cache.invalidate()
        assert cache.get() is None
