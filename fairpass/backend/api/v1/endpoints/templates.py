"""
Message Templates API Endpoints.
"""

from fastapi import APIRouter

from fairpass.backend.core.dependencies import DbSession, SuperAdmin
from fairpass.backend.schemas.base import ApiResponse
from fairpass.backend.schemas.messaging import TemplatePreview, TemplateResponse, TemplateUpdate
from fairpass.backend.services.messaging import MessagingService

router = APIRouter()


@router.get("", response_model=ApiResponse[list[TemplateResponse]], summary="List templates")
async def list_templates(db: DbSession, admin: SuperAdmin) -> ApiResponse[list[TemplateResponse]]:
    templates = await MessagingService(db).list_templates()
    return ApiResponse(data=[TemplateResponse.model_validate(t) for t in templates])


@router.post(
    "/seed",
    response_model=ApiResponse[list[TemplateResponse]],
    summary="Seed default templates",
    description="Create or refresh the default confirmation templates.",
)
async def seed_templates(db: DbSession, admin: SuperAdmin) -> ApiResponse[list[TemplateResponse]]:
    templates = await MessagingService(db).seed_default_templates()
    return ApiResponse(data=[TemplateResponse.model_validate(t) for t in templates])


@router.get("/{template_id}", response_model=ApiResponse[TemplateResponse], summary="Get a template")
async def get_template(template_id: str, db: DbSession, admin: SuperAdmin) -> ApiResponse[TemplateResponse]:
    template = await MessagingService(db).get_template(template_id)
    return ApiResponse(data=TemplateResponse.model_validate(template))


@router.get(
    "/{template_id}/preview",
    response_model=ApiResponse[TemplatePreview],
    summary="Preview a template",
    description="Render the template with sample registration values.",
)
async def preview_template(
    template_id: str,
    db: DbSession,
    admin: SuperAdmin,
) -> ApiResponse[TemplatePreview]:
    return ApiResponse(data=await MessagingService(db).preview_template(template_id))


@router.patch(
    "/{template_id}",
    response_model=ApiResponse[TemplateResponse],
    summary="Update a template",
)
async def update_template(
    template_id: str,
    data: TemplateUpdate,
    db: DbSession,
    admin: SuperAdmin,
) -> ApiResponse[TemplateResponse]:
    template = await MessagingService(db).update_template(template_id, data)
    return ApiResponse(data=TemplateResponse.model_validate(template))
