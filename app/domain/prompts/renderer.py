"""Placeholder substitution for prompt templates."""

import re
from collections.abc import Mapping

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


def extract_placeholders(template: str) -> list[str]:
    """List the distinct placeholder names in a template, in order of first use."""
    seen: dict[str, None] = {}
    for match in PLACEHOLDER_PATTERN.finditer(template):
        seen.setdefault(match.group(1), None)
    return list(seen)


def render_template(template: str, variables: Mapping[str, str]) -> str:
    """Resolve every ``{{name}}`` placeholder in a single pass.

    Known names are replaced with their value, unknown names with the empty
    string. Substituted values are not scanned again, so a value containing
    ``{{...}}`` comes through literally.
    """

    def _replace(match: re.Match) -> str:
        value = variables.get(match.group(1))
        return "" if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(_replace, template)
