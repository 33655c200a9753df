"""Inspection form endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....application.services.inspection_form import InspectionForm
from ....application.services.report_service import ReportService
from ....domain.value_objects.save_result import SaveResult
from ....infrastructure.services import ServiceFactory, get_service_factory
from ..config import get_settings
from ..schemas.inspection_schemas import (
    AddPhotoRequest,
    ChangeTemplateRequest,
    CreateInspectionRequest,
    InspectionListResponse,
    InspectionResponse,
    ItemCommentsRequest,
    RecordValueRequest,
    SetVerdictRequest,
    UpdateInspectionRequest
)

router = APIRouter()


def raise_for_save_result(result: SaveResult) -> None:
    """Map an unsuccessful save to an HTTP error.

    Must be called inside the service scope so a failed save is rolled back.
    """
    if result.success:
        return
    if result.validation_errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": "Inspection cannot be saved",
                "errors": result.validation_errors,
                "type": "incomplete_inspection"
            }
        )
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={
            "message": result.error_message,
            "retryable": result.retryable,
            "type": "save_failed"
        }
    )


def form_response(form: InspectionForm, result: SaveResult) -> InspectionResponse:
    raise_for_save_result(result)
    return InspectionResponse.from_entity(form.inspection)


@router.post("/", response_model=InspectionResponse, status_code=status.HTTP_201_CREATED)
async def create_inspection(
    request: CreateInspectionRequest,
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionResponse:
    """
    Start and save an inspection of an order.

    The inspection is bound to the requested checklist (or the first active
    one). Once saved, the checklist can no longer be changed.
    """
    async with factory.get_inspection_service() as inspection_service:
        form = await inspection_service.open_new_form(
            order_id=request.order_id,
            inspector=request.inspector,
            template_id=request.checklist_id,
            item_id=request.item_id
        )
        if request.comments:
            form.update_comments(request.comments)

        result = await inspection_service.save(form)
        return form_response(form, result)


@router.get("/", response_model=InspectionListResponse)
async def list_inspections(
    order_id: Optional[str] = Query(None, description="Only inspections of this order"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionListResponse:
    """List inspections, most recent first."""
    async with factory.get_inspection_service() as inspection_service:
        inspections = await inspection_service.list_inspections(order_id=order_id, limit=limit)

    return InspectionListResponse(
        inspections=[InspectionResponse.from_entity(inspection) for inspection in inspections],
        total=len(inspections)
    )


@router.get("/{inspection_id}", response_model=InspectionResponse)
async def get_inspection(
    inspection_id: UUID,
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionResponse:
    """Get inspection details by ID."""
    async with factory.get_inspection_service() as inspection_service:
        inspection = await inspection_service.get_inspection(inspection_id)

    if not inspection:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Inspection with ID {inspection_id} not found"
        )

    return InspectionResponse.from_entity(inspection)


@router.put("/{inspection_id}/items/{section_id}/{item_id}/value", response_model=InspectionResponse)
async def record_item_value(
    inspection_id: UUID,
    section_id: str,
    item_id: str,
    request: RecordValueRequest,
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionResponse:
    """Record a measurement; the item and the inspection status are re-evaluated."""
    async with factory.get_inspection_service() as inspection_service:
        form, result = await inspection_service.record_value(inspection_id, section_id, item_id, request.value)
        return form_response(form, result)


@router.put("/{inspection_id}/items/{section_id}/{item_id}/verdict", response_model=InspectionResponse)
async def set_item_verdict(
    inspection_id: UUID,
    section_id: str,
    item_id: str,
    request: SetVerdictRequest,
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionResponse:
    """Approve, reject or send an item to rework by hand."""
    async with factory.get_inspection_service() as inspection_service:
        form, result = await inspection_service.set_verdict(inspection_id, section_id, item_id, request.verdict)
        return form_response(form, result)


@router.put("/{inspection_id}/items/{section_id}/{item_id}/comments", response_model=InspectionResponse)
async def update_item_comments(
    inspection_id: UUID,
    section_id: str,
    item_id: str,
    request: ItemCommentsRequest,
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionResponse:
    async with factory.get_inspection_service() as inspection_service:
        form, result = await inspection_service.update_item_comments(
            inspection_id, section_id, item_id, request.comments
        )
        return form_response(form, result)


@router.post(
    "/{inspection_id}/items/{section_id}/{item_id}/photos",
    response_model=InspectionResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_item_photo(
    inspection_id: UUID,
    section_id: str,
    item_id: str,
    request: AddPhotoRequest,
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionResponse:
    """Attach a photo reference to an item."""
    async with factory.get_inspection_service() as inspection_service:
        form, result = await inspection_service.add_photo(inspection_id, section_id, item_id, request.photo_ref)
        return form_response(form, result)


@router.delete("/{inspection_id}/items/{section_id}/{item_id}/photos/{index}", response_model=InspectionResponse)
async def remove_item_photo(
    inspection_id: UUID,
    section_id: str,
    item_id: str,
    index: int,
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionResponse:
    async with factory.get_inspection_service() as inspection_service:
        form, result = await inspection_service.remove_photo(inspection_id, section_id, item_id, index)
        return form_response(form, result)


@router.put("/{inspection_id}/template", status_code=status.HTTP_204_NO_CONTENT)
async def change_inspection_template(
    inspection_id: UUID,
    request: ChangeTemplateRequest,
    factory: ServiceFactory = Depends(get_service_factory)
) -> None:
    """
    Change the checklist of an inspection.

    Saved inspections are locked to their checklist, so this is refused.
    """
    async with factory.get_inspection_service() as inspection_service:
        changed = await inspection_service.change_template(inspection_id, request.checklist_id)

    if not changed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Checklist template cannot be changed after the inspection is saved"
        )


@router.put("/{inspection_id}", response_model=InspectionResponse)
async def update_inspection(
    inspection_id: UUID,
    request: UpdateInspectionRequest,
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionResponse:
    """Update inspector name and general comments."""
    async with factory.get_inspection_service() as inspection_service:
        form, result = await inspection_service.update_details(
            inspection_id,
            inspector=request.inspector,
            comments=request.comments
        )
        return form_response(form, result)


@router.delete("/{inspection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inspection(
    inspection_id: UUID,
    factory: ServiceFactory = Depends(get_service_factory)
) -> None:
    """Delete an inspection."""
    async with factory.get_inspection_service() as inspection_service:
        deleted = await inspection_service.delete_inspection(inspection_id)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Inspection with ID {inspection_id} not found"
        )


@router.get("/{inspection_id}/report")
async def get_inspection_report(
    inspection_id: UUID,
    order_label: Optional[str] = Query(None, description="Order number or customer shown on the report"),
    factory: ServiceFactory = Depends(get_service_factory)
) -> dict:
    """Report data for rendering the inspection document."""
    async with factory.get_inspection_service() as inspection_service:
        inspection = await inspection_service.get_inspection(inspection_id)

    if not inspection:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Inspection with ID {inspection_id} not found"
        )

    report = ReportService(title=get_settings().report_title).build_report(inspection, order_label=order_label)
    return report.to_dict()
