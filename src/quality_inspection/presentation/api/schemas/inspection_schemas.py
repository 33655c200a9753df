"""Pydantic schemas for inspection API requests and responses."""

from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from ....domain.entities.inspection_result import InspectionResult
from ....domain.value_objects.inspection_metrics import InspectionMetrics
from ....domain.value_objects.inspection_status import InspectionStatus
from ....domain.value_objects.item_types import ItemVerdict, VerdictSource

RecordedValueField = Union[bool, int, float, str]


class CreateInspectionRequest(BaseModel):
    """Request model for starting an inspection of an order."""
    order_id: str = Field(..., min_length=1, max_length=64, description="Order being inspected")
    inspector: str = Field("", max_length=200, description="Inspector name, required to save")
    checklist_id: Optional[str] = Field(None, description="Checklist template; first active one when omitted")
    item_id: Optional[str] = Field(None, max_length=64, description="Order item the inspection is scoped to")
    comments: Optional[str] = Field(None, description="General comments")


class RecordValueRequest(BaseModel):
    """Request model for recording a measurement."""
    value: RecordedValueField


class SetVerdictRequest(BaseModel):
    """Request model for setting an item verdict by hand."""
    verdict: ItemVerdict


class ItemCommentsRequest(BaseModel):
    comments: str = ""


class AddPhotoRequest(BaseModel):
    """Request model for attaching a photo reference to an item."""
    photo_ref: str = Field(..., min_length=1, description="Opaque reference to a stored photo")


class ChangeTemplateRequest(BaseModel):
    checklist_id: str = Field(..., min_length=1)


class UpdateInspectionRequest(BaseModel):
    """Request model for updating inspector and general comments."""
    inspector: Optional[str] = Field(None, max_length=200)
    comments: Optional[str] = None


class InspectionItemResponse(BaseModel):
    """Response model for one result item."""
    id: str
    description: str
    result: RecordedValueField
    passed: bool
    critical_item: bool
    comments: str
    photos: List[str]
    verdict_source: VerdictSource
    verdict: Optional[ItemVerdict]


class InspectionSectionResponse(BaseModel):
    id: str
    name: str
    items: List[InspectionItemResponse]


class InspectionSummaryResponse(BaseModel):
    """Item counts behind the derived status."""
    total_items: int
    passed_items: int
    failed_items: int
    critical_items: int
    failed_critical_items: int
    pass_rate: float
    passed_percentage: int
    failed_percentage: int


class InspectionResponse(BaseModel):
    """Response model for inspection details."""
    id: Optional[UUID]
    order_id: str
    item_id: Optional[str]
    checklist_id: str
    checklist_name: str
    inspector: str
    inspection_date: datetime
    status: InspectionStatus
    status_label: str
    comments: str
    template_locked: bool
    sections: List[InspectionSectionResponse]
    summary: InspectionSummaryResponse
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @classmethod
    def from_entity(cls, inspection: InspectionResult) -> "InspectionResponse":
        summary = inspection.summarize()
        return cls(
            id=inspection.id,
            order_id=inspection.order_id,
            item_id=inspection.item_id,
            checklist_id=inspection.checklist_id,
            checklist_name=inspection.checklist_name,
            inspector=inspection.inspector,
            inspection_date=inspection.inspection_date,
            status=inspection.status,
            status_label=inspection.status.get_label(),
            comments=inspection.comments,
            template_locked=inspection.is_persisted(),
            sections=[
                InspectionSectionResponse(
                    id=section.id,
                    name=section.name,
                    items=[
                        InspectionItemResponse(
                            id=item.id,
                            description=item.description,
                            result=item.result,
                            passed=item.passed,
                            critical_item=item.critical_item,
                            comments=item.comments,
                            photos=list(item.photos),
                            verdict_source=item.verdict_source,
                            verdict=item.verdict
                        )
                        for item in section.items
                    ]
                )
                for section in inspection.sections
            ],
            summary=InspectionSummaryResponse(
                total_items=summary.total_items,
                passed_items=summary.passed_items,
                failed_items=summary.failed_items,
                critical_items=summary.critical_items,
                failed_critical_items=summary.failed_critical_items,
                pass_rate=summary.pass_rate,
                passed_percentage=summary.passed_percentage,
                failed_percentage=summary.failed_percentage
            ),
            created_at=inspection.created_at,
            updated_at=inspection.updated_at
        )


class InspectionListResponse(BaseModel):
    """Response model for inspection list."""
    inspections: List[InspectionResponse]
    total: int


class InspectionMetricsResponse(BaseModel):
    """Response model for quality metrics."""
    total_inspections: int
    passed_inspections: int
    partial_inspections: int
    failed_inspections: int
    pass_rate_percentage: int

    @classmethod
    def from_metrics(cls, metrics: InspectionMetrics) -> "InspectionMetricsResponse":
        return cls(
            total_inspections=metrics.total_inspections,
            passed_inspections=metrics.passed_inspections,
            partial_inspections=metrics.partial_inspections,
            failed_inspections=metrics.failed_inspections,
            pass_rate_percentage=metrics.pass_rate_percentage
        )
