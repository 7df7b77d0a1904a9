"""FastAPI dependencies for services and error translation."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import (
    ConfigurationServiceError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from app.domain.prompts.assembler import PromptAssembler
from app.domain.services.configuration_service import ActiveProfileCache, ConfigurationService
from app.domain.services.template_registry import TemplateRegistry
from app.persistence.database import get_db
from app.settings import settings

_ERROR_STATUS = {
    ValidationError: 422,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
}


def http_error(error: ConfigurationServiceError) -> HTTPException:
    """Translate a domain error into an HTTPException."""
    status_code = _ERROR_STATUS.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = None
    if isinstance(error, ConflictError) and error.current_version is not None:
        headers = {"ETag": f'"{error.current_version}"'}
    return HTTPException(status_code=status_code, detail=str(error), headers=headers)


def get_active_profile_cache(request: Request) -> ActiveProfileCache:
    """Get the app-wide active profile cache, creating it on first use."""
    cache = getattr(request.app.state, "active_profile_cache", None)
    if cache is None:
        cache = ActiveProfileCache(ttl_seconds=settings.active_profile_cache_ttl_seconds)
        request.app.state.active_profile_cache = cache
    return cache


async def get_configuration_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[ActiveProfileCache, Depends(get_active_profile_cache)],
) -> ConfigurationService:
    """Configuration manager bound to the request session and the app cache."""
    return ConfigurationService(db, cache=cache)


async def get_template_registry(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TemplateRegistry:
    """Template registry bound to the request session."""
    return TemplateRegistry(db)


async def get_prompt_assembler(
    configuration_service: Annotated[ConfigurationService, Depends(get_configuration_service)],
    registry: Annotated[TemplateRegistry, Depends(get_template_registry)],
) -> PromptAssembler:
    """Prompt assembler over the request's services."""
    return PromptAssembler(configuration_service, registry)


def get_expected_version(
    if_match: Annotated[str | None, Header()] = None,
) -> int | None:
    """Parse an ``If-Match`` header carrying a profile version.

    Raises:
        HTTPException: If the header is not a version number
    """
    if if_match is None:
        return None
    value = if_match.strip()
    if value.startswith("W/"):
        value = value[2:]
    value = value.strip('"')
    try:
        return int(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="If-Match must carry a profile version number",
        )
