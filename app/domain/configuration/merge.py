"""Merge resolver: apply a partial update to a configuration profile."""

import copy
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError
from app.domain.configuration.schemas import SECTION_NAMES, Profile, ProfilePatch


def coerce_patch(patch: ProfilePatch | Mapping[str, Any]) -> ProfilePatch:
    """Validate a mapping (snake_case or camelCase keys) into a ProfilePatch."""
    if isinstance(patch, ProfilePatch):
        return patch
    try:
        return ProfilePatch.model_validate(dict(patch))
    except PydanticValidationError as e:
        raise ValidationError(str(e)) from e


def merge_section(base_section: Mapping[str, Any], patch_section: Mapping[str, Any]) -> dict[str, Any]:
    """Shallow field-by-field merge: patch values win, absent fields are kept.

    Lists and nested objects in the patch replace the base value outright.
    """
    merged = dict(base_section)
    for key, value in patch_section.items():
        merged[key] = copy.deepcopy(value)
    return merged


def merge_profile(base: Profile, patch: ProfilePatch | Mapping[str, Any]) -> Profile:
    """Compute a new profile from ``base`` and a partial update.

    Sections present in the patch are merged with ``merge_section``; any
    other supplied top-level field replaces the base value. Neither input is
    mutated.

    Raises:
        ValidationError: If the patch or the merged result is invalid
    """
    changes = coerce_patch(patch).changes()
    merged = base.model_dump()

    for key, value in changes.items():
        if key not in merged:
            continue
        if key in SECTION_NAMES:
            if value is None:
                continue
            merged[key] = merge_section(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)

    try:
        return Profile.model_validate(merged)
    except PydanticValidationError as e:
        raise ValidationError(str(e)) from e
