"""Checklist template catalog endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....infrastructure.services import ServiceFactory, get_service_factory
from ..schemas.checklist_schemas import (
    ChecklistTemplateListResponse,
    ChecklistTemplateRequest,
    ChecklistTemplateResponse,
    build_template
)

router = APIRouter()


@router.get("/", response_model=ChecklistTemplateListResponse)
async def list_checklists(
    include_inactive: bool = Query(False, description="Also list deactivated templates"),
    factory: ServiceFactory = Depends(get_service_factory)
) -> ChecklistTemplateListResponse:
    """List checklist templates available for new inspections."""
    async with factory.get_checklist_service() as checklist_service:
        templates = await checklist_service.list_templates(include_inactive=include_inactive)

    return ChecklistTemplateListResponse(
        checklists=[ChecklistTemplateResponse.from_entity(template) for template in templates],
        total=len(templates)
    )


@router.get("/{checklist_id}", response_model=ChecklistTemplateResponse)
async def get_checklist(
    checklist_id: str,
    factory: ServiceFactory = Depends(get_service_factory)
) -> ChecklistTemplateResponse:
    """Get a checklist template with its sections and items."""
    async with factory.get_checklist_service() as checklist_service:
        template = await checklist_service.get_template(checklist_id)

    return ChecklistTemplateResponse.from_entity(template)


@router.post("/", response_model=ChecklistTemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_checklist(
    request: ChecklistTemplateRequest,
    factory: ServiceFactory = Depends(get_service_factory)
) -> ChecklistTemplateResponse:
    """
    Create a checklist template.

    Sections without a name are called "New Section N". Items default to a
    required, non-critical yes/no check.
    """
    template = build_template(request)

    async with factory.get_checklist_service() as checklist_service:
        saved = await checklist_service.save_template(template)

    return ChecklistTemplateResponse.from_entity(saved)


@router.put("/{checklist_id}", response_model=ChecklistTemplateResponse)
async def update_checklist(
    checklist_id: str,
    request: ChecklistTemplateRequest,
    factory: ServiceFactory = Depends(get_service_factory)
) -> ChecklistTemplateResponse:
    """
    Replace a checklist template.

    Inspections already bound to the template keep the item descriptions
    and critical flags they were created with.
    """
    async with factory.get_checklist_service() as checklist_service:
        current = await checklist_service.get_template(checklist_id)
        template = build_template(request, template_id=current.id, created_at=current.created_at)
        saved = await checklist_service.save_template(template)

    return ChecklistTemplateResponse.from_entity(saved)


@router.delete("/{checklist_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_checklist(
    checklist_id: str,
    factory: ServiceFactory = Depends(get_service_factory)
) -> None:
    """Delete a checklist template."""
    async with factory.get_checklist_service() as checklist_service:
        deleted = await checklist_service.delete_template(checklist_id)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Checklist template with ID {checklist_id} not found"
        )
