"""In-memory inspection form binding a result to its checklist template."""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from src.quality_inspection.domain.entities.checklist_template import ChecklistTemplate, ChecklistTemplateItem
from src.quality_inspection.domain.entities.inspection_result import (
    InspectionResult,
    InspectionResultItem,
    RecordedValue
)
from src.quality_inspection.domain.value_objects.inspection_status import InspectionStatus
from src.quality_inspection.domain.value_objects.item_types import ItemVerdict
from src.quality_inspection.infrastructure.logging import (
    get_logger,
    log_business_rule_violation,
    log_inspection_event
)


class InspectionForm:
    """One open inspection form.

    Owns the in-memory ``InspectionResult`` exclusively. Every edit runs to
    completion, status included, before the next one is accepted.
    """

    def __init__(self, inspection: InspectionResult, templates: Iterable[ChecklistTemplate]):
        """Initialize the form over an existing or freshly bound inspection."""
        self._inspection = inspection
        self._templates: Dict[str, ChecklistTemplate] = {template.id: template for template in templates}
        self._logger = get_logger(__name__)

    @classmethod
    def open_new(
        cls,
        templates: List[ChecklistTemplate],
        order_id: str,
        inspector: str = "",
        template_id: Optional[str] = None,
        item_id: Optional[str] = None,
        inspection_date: Optional[datetime] = None
    ) -> "InspectionForm":
        """Open a form for a new inspection.

        Binds to ``template_id`` or, when omitted, to the first template of
        the catalog.

        Raises:
            ValueError: If the catalog is empty or the template is unknown
        """
        if not templates:
            raise ValueError("No checklist templates available")

        if template_id is None:
            template = templates[0]
        else:
            template = next((t for t in templates if t.id == template_id), None)
            if template is None:
                raise ValueError(f"Checklist template {template_id} not found")

        inspection = InspectionResult.from_template(
            template,
            order_id=order_id,
            inspector=inspector,
            item_id=item_id,
            inspection_date=inspection_date,
        )
        return cls(inspection, templates)

    @property
    def inspection(self) -> InspectionResult:
        return self._inspection

    @property
    def status(self) -> InspectionStatus:
        return self._inspection.status

    @property
    def template(self) -> Optional[ChecklistTemplate]:
        """Template the inspection is bound to, if still in the catalog."""
        return self._templates.get(self._inspection.checklist_id)

    @property
    def available_templates(self) -> List[ChecklistTemplate]:
        return list(self._templates.values())

    @property
    def template_selection_locked(self) -> bool:
        """The template selector is disabled once the inspection is saved."""
        return self._inspection.is_persisted()

    def select_template(self, template_id: str) -> bool:
        """Rebind a new inspection to another template.

        Returns ``False`` without touching the sections when the inspection is
        already persisted.

        Raises:
            ValueError: If the template is not in the catalog
        """
        if self.template_selection_locked:
            log_business_rule_violation(
                self._logger,
                "rebind_persisted_inspection",
                f"Template change refused for persisted inspection {self._inspection.id}",
                inspection_id=str(self._inspection.id),
                checklist_id=self._inspection.checklist_id,
                requested_checklist_id=template_id
            )
            return False

        template = self._templates.get(template_id)
        if template is None:
            raise ValueError(f"Checklist template {template_id} not found")

        self._inspection.rebind(template)
        log_inspection_event(
            self._logger,
            "template_selected",
            None,
            checklist_id=template.id,
            item_count=len(self._inspection.all_items()),
            status=self._inspection.status.value
        )
        return True

    def record_value(self, section_id: str, item_id: str, value: RecordedValue) -> InspectionResultItem:
        """Store a measurement and re-evaluate the item and the inspection."""
        item = self._inspection.record_value(section_id, item_id, value, self._template_item(section_id, item_id))
        log_inspection_event(
            self._logger,
            "value_recorded",
            self._inspection_ref(),
            section_id=section_id,
            item_id=item_id,
            passed=item.passed,
            status=self._inspection.status.value
        )
        return item

    def set_verdict(self, section_id: str, item_id: str, verdict: ItemVerdict) -> InspectionResultItem:
        """Override an item's verdict by hand."""
        item = self._inspection.set_verdict(section_id, item_id, verdict, self._template_item(section_id, item_id))
        log_inspection_event(
            self._logger,
            "verdict_set",
            self._inspection_ref(),
            section_id=section_id,
            item_id=item_id,
            verdict=verdict.value,
            status=self._inspection.status.value
        )
        return item

    def update_item_comments(self, section_id: str, item_id: str, comments: str) -> None:
        self._inspection.update_item_comments(section_id, item_id, comments)

    def add_photo(self, section_id: str, item_id: str, photo_ref: str) -> int:
        return self._inspection.add_item_photo(section_id, item_id, photo_ref)

    def remove_photo(self, section_id: str, item_id: str, index: int) -> str:
        return self._inspection.remove_item_photo(section_id, item_id, index)

    def update_comments(self, comments: str) -> None:
        self._inspection.update_comments(comments)

    def update_inspector(self, inspector: str) -> None:
        self._inspection.update_inspector(inspector)

    def validate_for_save(self) -> List[str]:
        """Return the problems that block saving; empty when the form can be saved."""
        errors = []
        if not self._inspection.inspector:
            errors.append("Inspector name is required")
        if not self._inspection.checklist_id:
            errors.append("A checklist template must be selected")
        return errors

    def _template_item(self, section_id: str, item_id: str) -> Optional[ChecklistTemplateItem]:
        template = self.template
        if template is None:
            return None
        return template.get_item(section_id, item_id)

    def _inspection_ref(self) -> Optional[str]:
        return str(self._inspection.id) if self._inspection.id else None
