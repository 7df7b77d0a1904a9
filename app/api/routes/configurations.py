"""Configuration profile endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from app.api.deps import get_configuration_service, get_expected_version, http_error
from app.api.schemas.configuration import (
    AIModelSectionResponse,
    DuplicateProfileRequest,
    ProfileResponse,
    WidgetAppearanceResponse,
)
from app.core.errors import ConfigurationServiceError
from app.domain.configuration.schemas import ProfilePatch
from app.domain.services.configuration_service import ConfigurationService

router = APIRouter()

Service = Annotated[ConfigurationService, Depends(get_configuration_service)]
ExpectedVersion = Annotated[int | None, Depends(get_expected_version)]


def _with_etag(response: Response, profile: ProfileResponse) -> ProfileResponse:
    response.headers["ETag"] = f'"{profile.version}"'
    return profile


@router.get("", response_model=list[ProfileResponse])
async def list_configurations(service: Service) -> list[ProfileResponse]:
    """List every configuration profile."""
    return [ProfileResponse.from_profile(p) for p in await service.list_all()]


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_configuration(
    payload: ProfilePatch,
    service: Service,
) -> ProfileResponse:
    """Create an inactive profile from default section values."""
    try:
        profile = await service.create(payload)
    except ConfigurationServiceError as e:
        raise http_error(e) from e
    return ProfileResponse.from_profile(profile)


@router.get("/active", response_model=ProfileResponse)
async def get_active_configuration(service: Service, response: Response) -> ProfileResponse:
    """Get the profile currently in effect."""
    try:
        profile = await service.get_active()
    except ConfigurationServiceError as e:
        raise http_error(e) from e
    return _with_etag(response, ProfileResponse.from_profile(profile))


@router.get("/active/ai-model", response_model=AIModelSectionResponse)
async def get_active_ai_model(service: Service) -> AIModelSectionResponse:
    """Model, knowledge-base and formatting settings for the AI response generator."""
    try:
        profile = await service.get_active()
    except ConfigurationServiceError as e:
        raise http_error(e) from e
    return AIModelSectionResponse.model_validate(
        {
            "profile_id": profile.id,
            "ai_model": profile.ai_model.model_dump(),
            "knowledge_base": profile.knowledge_base.model_dump(),
            "response_formatting": profile.response_formatting.model_dump(),
        }
    )


@router.get("/active/widget", response_model=WidgetAppearanceResponse)
async def get_active_widget(service: Service) -> WidgetAppearanceResponse:
    """Widget appearance for the widget renderer bootstrap."""
    try:
        profile = await service.get_active()
    except ConfigurationServiceError as e:
        raise http_error(e) from e
    return WidgetAppearanceResponse.model_validate(profile.widget_appearance.model_dump())


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_configuration(profile_id: str, service: Service, response: Response) -> ProfileResponse:
    """Get one profile."""
    try:
        profile = await service.get(profile_id)
    except ConfigurationServiceError as e:
        raise http_error(e) from e
    return _with_etag(response, ProfileResponse.from_profile(profile))


@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_configuration(
    profile_id: str,
    payload: ProfilePatch,
    service: Service,
    expected_version: ExpectedVersion,
    response: Response,
) -> ProfileResponse:
    """Partially update a profile; sections are merged field by field."""
    try:
        profile = await service.update(profile_id, payload, expected_version=expected_version)
    except ConfigurationServiceError as e:
        raise http_error(e) from e
    return _with_etag(response, ProfileResponse.from_profile(profile))


@router.patch("/{profile_id}/sections/{section}", response_model=ProfileResponse)
async def update_configuration_section(
    profile_id: str,
    section: str,
    values: Annotated[dict[str, Any], Body()],
    service: Service,
    expected_version: ExpectedVersion,
    response: Response,
) -> ProfileResponse:
    """Partially update a single section (``active`` targets the active profile)."""
    target = None if profile_id == "active" else profile_id
    try:
        profile = await service.update_section(
            section, values, profile_id=target, expected_version=expected_version
        )
    except ConfigurationServiceError as e:
        raise http_error(e) from e
    return _with_etag(response, ProfileResponse.from_profile(profile))


@router.post(
    "/{profile_id}/duplicate",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_configuration(
    profile_id: str,
    payload: DuplicateProfileRequest,
    service: Service,
) -> ProfileResponse:
    """Create an inactive copy of an existing profile's sections."""
    partial: dict[str, Any] = {"name": payload.name}
    if payload.description is not None:
        partial["description"] = payload.description
    try:
        profile = await service.create(partial, source_id=profile_id)
    except ConfigurationServiceError as e:
        raise http_error(e) from e
    return ProfileResponse.from_profile(profile)


@router.post("/{profile_id}/activate", response_model=ProfileResponse)
async def activate_configuration(profile_id: str, service: Service) -> ProfileResponse:
    """Make a profile the single active profile."""
    try:
        activated = await service.activate(profile_id)
    except ConfigurationServiceError as e:
        raise http_error(e) from e

    if not activated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration profile {profile_id} not found",
        )
    return ProfileResponse.from_profile(await service.get_active())


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_configuration(profile_id: str, service: Service) -> Response:
    """Delete a profile; the reserved default profile is refused."""
    try:
        await service.ensure_deletable(profile_id)
        deleted = await service.delete(profile_id)
    except ConfigurationServiceError as e:
        raise http_error(e) from e

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration profile {profile_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
