"""Tests for the prompt template registry and placeholder rendering."""

import logging

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.domain.prompts.renderer import extract_placeholders, render_template
from app.domain.prompts.schemas import TemplateCreate, TemplateUpdate
from app.domain.services.template_registry import TemplateRegistry


class TestRenderTemplate:
    """Test cases for placeholder substitution."""

    def test_substitutes_known_variable(self):
        assert render_template("Answer: {{user_query}}.", {"user_query": "reset password"}) == (
            "Answer: reset password."
        )

    def test_unknown_placeholder_becomes_empty(self):
        assert render_template("Hi {{user_name}}!", {}) == "Hi !"

    def test_repeated_placeholders_are_all_replaced(self):
        assert render_template("{{a}}-{{a}}-{{b}}", {"a": "x", "b": "y"}) == "x-x-y"

    def test_values_are_not_rescanned(self):
        rendered = render_template(
            "{{first}} {{second}}",
            {"first": "{{second}}", "second": "done"},
        )
        assert rendered == "{{second}} done"

    def test_non_word_braces_are_left_alone(self):
        assert render_template("{{ spaced }} {{a-b}}", {"spaced": "x"}) == "{{ spaced }} {{a-b}}"

    def test_extract_placeholders_in_first_use_order(self):
        assert extract_placeholders("{{b}} {{a}} {{b}}") == ["b", "a"]


class TestTemplateLookup:
    """Test cases for listing and reading templates."""

    @pytest.mark.asyncio
    async def test_lists_seeded_templates(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        templates = await registry.list()
        assert {t.id for t in templates} == {"general", "technical", "product", "complaint", "onboarding"}

    @pytest.mark.asyncio
    async def test_active_only_filter(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        await registry.update("onboarding", TemplateUpdate(is_active=False))
        active = await registry.list(active_only=True)
        assert "onboarding" not in [t.id for t in active]

    @pytest.mark.asyncio
    async def test_get_unknown_raises(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        with pytest.raises(NotFoundError):
            await registry.get_by_id("missing")

    @pytest.mark.asyncio
    async def test_variable_catalog(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        variables = await registry.list_variables()
        assert [v.name for v in variables] == [
            "user_query",
            "business_name",
            "context",
            "current_date",
            "user_name",
        ]


class TestDefaultTemplate:
    """Test cases for the single default template rule."""

    @pytest.mark.asyncio
    async def test_seeded_default(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        assert (await registry.get_default()).id == "general"

    @pytest.mark.asyncio
    async def test_no_flagged_template_raises(self, db_session):
        registry = TemplateRegistry(db_session)
        await registry.create(TemplateCreate(name="Only", template="{{user_query}}"))
        with pytest.raises(NotFoundError):
            await registry.get_default()

    @pytest.mark.asyncio
    async def test_set_default_clears_previous(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        await registry.set_default("technical")

        templates = await registry.list()
        assert [t.id for t in templates if t.is_default] == ["technical"]
        assert (await registry.get_default()).id == "technical"

    @pytest.mark.asyncio
    async def test_set_default_unknown_raises(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        with pytest.raises(NotFoundError):
            await registry.set_default("missing")

    @pytest.mark.asyncio
    async def test_create_as_default(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        created = await registry.create(
            TemplateCreate(id="faq", name="FAQ", template="FAQ: {{user_query}}", is_default=True)
        )
        assert created.is_default is True
        assert (await registry.get_default()).id == "faq"
        assert (await registry.get_by_id("general")).is_default is False


class TestApply:
    """Test cases for resolving templates."""

    @pytest.mark.asyncio
    async def test_apply_substitutes(self, db_session):
        registry = TemplateRegistry(db_session)
        template = await registry.create(TemplateCreate(name="T", template="Answer: {{user_query}}."))
        assert await registry.apply(template.id, {"user_query": "reset password"}) == (
            "Answer: reset password."
        )

    @pytest.mark.asyncio
    async def test_apply_strips_missing_variables(self, db_session):
        registry = TemplateRegistry(db_session)
        template = await registry.create(
            TemplateCreate(name="T", template="{{user_query}} for {{unknown_var}}")
        )
        assert await registry.apply(template.id, {"user_query": "help"}) == "help for "

    @pytest.mark.asyncio
    async def test_unknown_template_echoes_query(self, seeded_session, caplog):
        registry = TemplateRegistry(seeded_session)
        with caplog.at_level(logging.WARNING):
            result = await registry.apply("nonexistent-id", {"user_query": "hi"})
        assert result == "hi"
        assert "nonexistent-id" in caplog.text

    @pytest.mark.asyncio
    async def test_unknown_template_without_query(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        assert await registry.apply("nonexistent-id", {}) == ""

    @pytest.mark.asyncio
    async def test_render_unknown_raises(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        with pytest.raises(NotFoundError):
            await registry.render("nonexistent-id", {"user_query": "hi"})

    @pytest.mark.asyncio
    async def test_record_usage(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        before = await registry.get_by_id("general")
        await registry.record_usage("general")
        await registry.record_usage("missing")
        after = await registry.get_by_id("general")
        assert after.usage_count == before.usage_count + 1
        assert after.last_modified == before.last_modified


class TestSelectForIntent:
    """Test cases for intent routing."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "intent,expected",
        [
            ("technical support", "technical"),
            ("  Product Information ", "product"),
            ("complaint", "complaint"),
            ("general inquiry", "general"),
        ],
    )
    async def test_known_intents(self, seeded_session, intent, expected):
        registry = TemplateRegistry(seeded_session)
        assert (await registry.select_for_intent(intent)).id == expected

    @pytest.mark.asyncio
    async def test_unknown_intent_uses_default(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        assert (await registry.select_for_intent("billing")).id == "general"

    @pytest.mark.asyncio
    async def test_mapped_template_missing_uses_default(self, db_session):
        registry = TemplateRegistry(db_session)
        await registry.create(
            TemplateCreate(id="fallback", name="Fallback", template="{{user_query}}", is_default=True)
        )
        assert (await registry.select_for_intent("technical support")).id == "fallback"


class TestTemplateEditing:
    """Test cases for creating, updating and validating templates."""

    @pytest.mark.asyncio
    async def test_blank_fields_rejected(self, db_session):
        registry = TemplateRegistry(db_session)
        with pytest.raises(ValidationError):
            await registry.create(TemplateCreate(name=" ", template="x"))
        with pytest.raises(ValidationError):
            await registry.create(TemplateCreate(name="x", template=""))

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        with pytest.raises(ValidationError):
            await registry.create(TemplateCreate(id="general", name="Again", template="x"))

    @pytest.mark.asyncio
    async def test_update_changes_only_supplied_fields(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        before = await registry.get_by_id("complaint")

        updated = await registry.update("complaint", TemplateUpdate(template="Sorry: {{user_query}}"))

        assert updated.template == "Sorry: {{user_query}}"
        assert updated.name == before.name
        assert updated.category == before.category
        assert updated.last_modified > before.last_modified

    @pytest.mark.asyncio
    async def test_update_unknown_raises(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        with pytest.raises(NotFoundError):
            await registry.update("missing", TemplateUpdate(name="X"))

    @pytest.mark.asyncio
    async def test_update_blank_name_rejected(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        with pytest.raises(ValidationError):
            await registry.update("general", TemplateUpdate(name=""))

    @pytest.mark.asyncio
    async def test_validate_reports_unknown_variables(self, seeded_session):
        registry = TemplateRegistry(seeded_session)
        result = await registry.validate("Hi {{user_name}}, about {{order_id}}: {{user_query}}")
        assert result.placeholders == ["user_name", "order_id", "user_query"]
        assert result.unknown_variables == ["order_id"]
        assert result.is_clean is False
