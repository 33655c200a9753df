"""In-memory repository implementations for testing and development."""

import copy
from collections import Counter
from typing import Dict, List, Optional
from uuid import UUID

from src.quality_inspection.application.ports.repositories import (
    ChecklistTemplateRepository,
    InspectionResultRepository
)
from src.quality_inspection.domain.entities.checklist_template import ChecklistTemplate
from src.quality_inspection.domain.entities.inspection_result import InspectionResult


class InMemoryChecklistTemplateRepository(ChecklistTemplateRepository):
    """In-memory implementation of the checklist template catalog."""

    def __init__(self, templates: Optional[List[ChecklistTemplate]] = None):
        self._templates: Dict[str, ChecklistTemplate] = {}
        for template in templates or []:
            self._templates[template.id] = copy.deepcopy(template)

    async def save(self, template: ChecklistTemplate) -> ChecklistTemplate:
        """Save a checklist template."""
        self._templates[template.id] = copy.deepcopy(template)
        return template

    async def find_by_id(self, template_id: str) -> Optional[ChecklistTemplate]:
        """Find checklist template by ID."""
        template = self._templates.get(template_id)
        return copy.deepcopy(template) if template else None

    async def find_all(self) -> List[ChecklistTemplate]:
        """Find all checklist templates."""
        templates = sorted(self._templates.values(), key=lambda t: t.name.lower())
        return [copy.deepcopy(template) for template in templates]

    async def find_active(self) -> List[ChecklistTemplate]:
        """Find active checklist templates."""
        return [template for template in await self.find_all() if template.is_active]

    async def delete(self, template_id: str) -> bool:
        """Delete a checklist template."""
        if template_id in self._templates:
            del self._templates[template_id]
            return True
        return False


class InMemoryInspectionResultRepository(InspectionResultRepository):
    """In-memory implementation of inspection result repository.

    Stored snapshots are copies, so later edits to a form never leak into
    the repository without a save.
    """

    def __init__(self):
        self._inspections: Dict[UUID, InspectionResult] = {}

    async def save(self, inspection: InspectionResult) -> InspectionResult:
        """Save an inspection snapshot."""
        if inspection.id is None:
            raise ValueError("Inspection must have an ID to be saved")
        self._inspections[inspection.id] = inspection.copy()
        return inspection

    async def find_by_id(self, inspection_id: UUID) -> Optional[InspectionResult]:
        """Find inspection by ID."""
        inspection = self._inspections.get(inspection_id)
        return inspection.copy() if inspection else None

    async def find_by_order(self, order_id: str) -> List[InspectionResult]:
        """Find all inspections of an order."""
        return self._sorted(i for i in self._inspections.values() if i.order_id == order_id)

    async def find_by_checklist(self, checklist_id: str) -> List[InspectionResult]:
        """Find all inspections bound to a checklist template."""
        return self._sorted(i for i in self._inspections.values() if i.checklist_id == checklist_id)

    async def find_all(self, limit: Optional[int] = None) -> List[InspectionResult]:
        """Find inspections, most recent first."""
        inspections = self._sorted(self._inspections.values())
        return inspections[:limit] if limit else inspections

    async def delete(self, inspection_id: UUID) -> bool:
        """Delete an inspection."""
        if inspection_id in self._inspections:
            del self._inspections[inspection_id]
            return True
        return False

    async def exists(self, inspection_id: UUID) -> bool:
        """Check if inspection exists."""
        return inspection_id in self._inspections

    async def count_by_status(self, order_id: Optional[str] = None) -> Dict[str, int]:
        """Count inspections per status value."""
        return dict(Counter(
            inspection.status.value
            for inspection in self._inspections.values()
            if order_id is None or inspection.order_id == order_id
        ))

    @staticmethod
    def _sorted(inspections) -> List[InspectionResult]:
        ordered = sorted(inspections, key=lambda i: i.inspection_date, reverse=True)
        return [inspection.copy() for inspection in ordered]
