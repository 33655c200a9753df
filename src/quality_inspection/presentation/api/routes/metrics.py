"""Quality metrics endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ....infrastructure.services import ServiceFactory, get_service_factory
from ..schemas.inspection_schemas import InspectionMetricsResponse

router = APIRouter()


@router.get("/inspections", response_model=InspectionMetricsResponse)
async def get_inspection_metrics(
    order_id: Optional[str] = Query(None, description="Only inspections of this order"),
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionMetricsResponse:
    """Passed, partially passed and failed inspection counts."""
    async with factory.get_metrics_service() as metrics_service:
        metrics = await metrics_service.get_inspection_metrics(order_id)

    return InspectionMetricsResponse.from_metrics(metrics)


@router.get("/checklists/{checklist_id}", response_model=InspectionMetricsResponse)
async def get_checklist_metrics(
    checklist_id: str,
    factory: ServiceFactory = Depends(get_service_factory)
) -> InspectionMetricsResponse:
    """Status counts of the inspections recorded against one checklist."""
    async with factory.get_metrics_service() as metrics_service:
        metrics = await metrics_service.get_checklist_metrics(checklist_id)

    return InspectionMetricsResponse.from_metrics(metrics)
