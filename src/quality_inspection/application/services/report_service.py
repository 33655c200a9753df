"""Inspection report structure handed to the document renderer."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.quality_inspection.domain.entities.inspection_result import InspectionResult, InspectionResultItem
from src.quality_inspection.domain.value_objects.item_types import ItemVerdict

CRITICAL_MARKER = "[CRITICAL]"


@dataclass(frozen=True)
class ReportItemLine:
    """One table row of a report section."""

    number: str
    description: str
    result: str
    verdict: str
    passed: bool
    critical: bool
    comments: str
    photo_count: int
    manual_verdict: bool


@dataclass(frozen=True)
class ReportSection:
    number: str
    name: str
    items: List[ReportItemLine] = field(default_factory=list)


@dataclass(frozen=True)
class InspectionReport:
    """Human-readable rendering of a finished inspection."""

    title: str
    order_id: str
    order_label: Optional[str]
    item_id: Optional[str]
    inspector: str
    inspection_date: datetime
    checklist_name: str
    status: str
    status_label: str
    comments: str
    sections: List[ReportSection]
    total_items: int
    passed_items: int
    failed_items: int
    passed_percentage: int
    failed_percentage: int
    critical_items: int
    failed_critical_items: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["inspection_date"] = self.inspection_date.isoformat()
        return data


class ReportService:
    """Builds report structures; the status is read, never recomputed."""

    def __init__(self, title: str = "INSPECTION REPORT"):
        self._title = title

    def build_report(self, inspection: InspectionResult, order_label: Optional[str] = None) -> InspectionReport:
        summary = inspection.summarize()
        sections = [
            ReportSection(
                number=f"{section_index}.",
                name=section.name,
                items=[
                    self._item_line(f"{section_index}.{item_index}", item)
                    for item_index, item in enumerate(section.items, start=1)
                ],
            )
            for section_index, section in enumerate(inspection.sections, start=1)
        ]

        return InspectionReport(
            title=self._title,
            order_id=inspection.order_id,
            order_label=order_label,
            item_id=inspection.item_id,
            inspector=inspection.inspector,
            inspection_date=inspection.inspection_date,
            checklist_name=inspection.checklist_name,
            status=inspection.status.value,
            status_label=inspection.status.get_label(),
            comments=inspection.comments,
            sections=sections,
            total_items=summary.total_items,
            passed_items=summary.passed_items,
            failed_items=summary.failed_items,
            passed_percentage=summary.passed_percentage,
            failed_percentage=summary.failed_percentage,
            critical_items=summary.critical_items,
            failed_critical_items=summary.failed_critical_items,
        )

    def _item_line(self, number: str, item: InspectionResultItem) -> ReportItemLine:
        description = item.description
        if item.critical_item:
            description = f"{description} {CRITICAL_MARKER}"

        return ReportItemLine(
            number=number,
            description=description,
            result=format_result(item.result),
            verdict=verdict_label(item),
            passed=item.passed,
            critical=item.critical_item,
            comments=item.comments or "-",
            photo_count=len(item.photos),
            manual_verdict=item.is_manually_judged,
        )


def format_result(result: Any) -> str:
    if isinstance(result, bool):
        return "Yes" if result else "No"
    if result is None:
        return ""
    return str(result)


def verdict_label(item: InspectionResultItem) -> str:
    """Rework is only distinguishable through the manual verdict provenance."""
    if item.is_manually_judged and item.verdict == ItemVerdict.REWORK:
        return ItemVerdict.REWORK.get_label()
    return ItemVerdict.APPROVED.get_label() if item.passed else ItemVerdict.REJECTED.get_label()
