"""Quality metrics over recorded inspections."""

from typing import Iterable, Optional, TYPE_CHECKING

from src.quality_inspection.domain.entities.inspection_result import InspectionResult
from src.quality_inspection.domain.value_objects.inspection_metrics import InspectionMetrics
from src.quality_inspection.domain.value_objects.inspection_status import InspectionStatus

if TYPE_CHECKING:
    from src.quality_inspection.application.ports.repositories import InspectionResultRepository


def calculate_inspection_metrics(inspections: Iterable[InspectionResult]) -> InspectionMetrics:
    """Count inspections per status."""
    counts = {status: 0 for status in InspectionStatus}
    for inspection in inspections:
        counts[inspection.status] += 1

    return InspectionMetrics(
        total_inspections=sum(counts.values()),
        passed_inspections=counts[InspectionStatus.PASSED],
        partial_inspections=counts[InspectionStatus.PARTIAL],
        failed_inspections=counts[InspectionStatus.FAILED],
    )


class QualityMetricsService:
    """Service computing inspection metrics for dashboards."""

    def __init__(self, inspection_repository: "InspectionResultRepository"):
        self._inspection_repository = inspection_repository

    async def get_inspection_metrics(self, order_id: Optional[str] = None) -> InspectionMetrics:
        counts = await self._inspection_repository.count_by_status(order_id)
        passed = counts.get(InspectionStatus.PASSED.value, 0)
        partial = counts.get(InspectionStatus.PARTIAL.value, 0)
        failed = counts.get(InspectionStatus.FAILED.value, 0)

        return InspectionMetrics(
            total_inspections=passed + partial + failed,
            passed_inspections=passed,
            partial_inspections=partial,
            failed_inspections=failed,
        )

    async def get_checklist_metrics(self, checklist_id: str) -> InspectionMetrics:
        """Metrics of every inspection recorded against one checklist template."""
        inspections = await self._inspection_repository.find_by_checklist(checklist_id)
        return calculate_inspection_metrics(inspections)
