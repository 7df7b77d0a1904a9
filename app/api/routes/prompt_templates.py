"""Prompt template endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import get_prompt_assembler, get_template_registry, http_error
from app.api.schemas.configuration import (
    ApplyTemplateRequest,
    ApplyTemplateResponse,
    AssemblePromptRequest,
    AssemblePromptResponse,
    SelectTemplateRequest,
    ValidateTemplateRequest,
)
from app.core.errors import ConfigurationServiceError
from app.domain.prompts.assembler import PromptAssembler
from app.domain.prompts.schemas import (
    PromptTemplateData,
    PromptVariableData,
    TemplateCreate,
    TemplateUpdate,
    TemplateValidation,
)
from app.domain.services.template_registry import TemplateRegistry

router = APIRouter()

Registry = Annotated[TemplateRegistry, Depends(get_template_registry)]


@router.get("", response_model=list[PromptTemplateData])
async def list_templates(registry: Registry, active_only: bool = False) -> list[PromptTemplateData]:
    """List prompt templates."""
    return await registry.list(active_only=active_only)


@router.post("", response_model=PromptTemplateData, status_code=status.HTTP_201_CREATED)
async def create_template(payload: TemplateCreate, registry: Registry) -> PromptTemplateData:
    """Create a prompt template."""
    try:
        return await registry.create(payload)
    except ConfigurationServiceError as e:
        raise http_error(e) from e


@router.get("/default", response_model=PromptTemplateData)
async def get_default_template(registry: Registry) -> PromptTemplateData:
    """Get the default template."""
    try:
        return await registry.get_default()
    except ConfigurationServiceError as e:
        raise http_error(e) from e


@router.get("/variables", response_model=list[PromptVariableData])
async def list_variables(registry: Registry) -> list[PromptVariableData]:
    """List the variables templates may reference."""
    return await registry.list_variables()


@router.post("/validate", response_model=TemplateValidation)
async def validate_template(payload: ValidateTemplateRequest, registry: Registry) -> TemplateValidation:
    """Check template text against the variable catalog."""
    return await registry.validate(payload.template)


@router.post("/select", response_model=PromptTemplateData)
async def select_template(payload: SelectTemplateRequest, registry: Registry) -> PromptTemplateData:
    """Pick the template for a detected intent."""
    try:
        return await registry.select_for_intent(payload.intent)
    except ConfigurationServiceError as e:
        raise http_error(e) from e


@router.post("/assemble", response_model=AssemblePromptResponse)
async def assemble_prompt(
    payload: AssemblePromptRequest,
    registry: Registry,
    assembler: Annotated[PromptAssembler, Depends(get_prompt_assembler)],
) -> AssemblePromptResponse:
    """Assemble the prompt and model parameters for one user query."""
    try:
        assembled = await assembler.assemble(
            payload.user_query,
            intent=payload.intent,
            template_id=payload.template_id,
            variables=payload.variables,
        )
    except ConfigurationServiceError as e:
        raise http_error(e) from e

    if assembled.template_id is not None:
        await registry.record_usage(assembled.template_id)

    return AssemblePromptResponse.model_validate(
        {
            "prompt": assembled.prompt,
            "template_id": assembled.template_id,
            "profile_id": assembled.profile_id,
            "ai_model": assembled.ai_model.model_dump(),
            "response_formatting": assembled.response_formatting.model_dump(),
        }
    )


@router.get("/{template_id}", response_model=PromptTemplateData)
async def get_template(template_id: str, registry: Registry) -> PromptTemplateData:
    """Get one template."""
    try:
        return await registry.get_by_id(template_id)
    except ConfigurationServiceError as e:
        raise http_error(e) from e


@router.patch("/{template_id}", response_model=PromptTemplateData)
async def update_template(
    template_id: str,
    payload: TemplateUpdate,
    registry: Registry,
) -> PromptTemplateData:
    """Partially update a template."""
    try:
        return await registry.update(template_id, payload)
    except ConfigurationServiceError as e:
        raise http_error(e) from e


@router.post("/{template_id}/default", response_model=PromptTemplateData)
async def set_default_template(template_id: str, registry: Registry) -> PromptTemplateData:
    """Make a template the default."""
    try:
        return await registry.set_default(template_id)
    except ConfigurationServiceError as e:
        raise http_error(e) from e


@router.post("/{template_id}/apply", response_model=ApplyTemplateResponse)
async def apply_template(
    template_id: str,
    payload: ApplyTemplateRequest,
    registry: Registry,
) -> ApplyTemplateResponse:
    """Resolve a template; unknown ids echo the ``user_query`` variable."""
    prompt = await registry.apply(template_id, payload.variables)
    await registry.record_usage(template_id)
    return ApplyTemplateResponse(template_id=template_id, prompt=prompt)
