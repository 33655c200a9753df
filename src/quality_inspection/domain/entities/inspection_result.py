"""Inspection result entity recording measurements against a checklist."""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional, Union
from uuid import UUID

from ..services.item_evaluator import evaluate
from ..services.status_derivation import derive_status, summarize_items
from ..value_objects.inspection_status import InspectionStatus
from ..value_objects.inspection_summary import InspectionSummary
from ..value_objects.item_types import ChecklistItemType, ItemVerdict, VerdictSource
from .checklist_template import ChecklistTemplate, ChecklistTemplateItem

RecordedValue = Union[bool, int, float, str]


@dataclass
class InspectionResultItem:
    """Recorded value and verdict for one template item.

    ``description`` and ``critical_item`` are copies taken when the result was
    bound to its template; later template edits do not reach them.
    """

    id: str
    description: str
    result: RecordedValue = False
    passed: bool = False
    critical_item: bool = False
    comments: str = ""
    photos: List[str] = field(default_factory=list)
    verdict_source: VerdictSource = VerdictSource.AUTOMATIC
    verdict: Optional[ItemVerdict] = None

    @classmethod
    def from_template_item(cls, template_item: ChecklistTemplateItem) -> "InspectionResultItem":
        return cls(
            id=template_item.id,
            description=template_item.description,
            result=template_item.default_result(),
            passed=False,
            critical_item=template_item.critical_item,
        )

    @property
    def is_manually_judged(self) -> bool:
        return self.verdict_source == VerdictSource.MANUAL


@dataclass
class InspectionResultSection:
    """Result items of one template section, in template order."""

    id: str
    name: str
    items: List[InspectionResultItem] = field(default_factory=list)

    def get_item(self, item_id: str) -> Optional[InspectionResultItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


class InspectionResult:
    """Inspection of one order against one checklist template.

    The status is never assigned from outside: every mutation re-derives it
    from the complete item set.
    """

    def __init__(
        self,
        order_id: str,
        checklist_id: str,
        checklist_name: str,
        inspector: str = "",
        inspection_id: Optional[UUID] = None,
        item_id: Optional[str] = None,
        inspection_date: Optional[datetime] = None,
        sections: Optional[List[InspectionResultSection]] = None,
        comments: str = "",
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        """Initialize inspection result."""
        if not order_id or not str(order_id).strip():
            raise ValueError("Order ID cannot be empty")
        if inspection_id is not None and not isinstance(inspection_id, UUID):
            raise ValueError("Inspection ID must be a UUID")

        self._id = inspection_id
        self._order_id = str(order_id).strip()
        self._item_id = item_id or None
        self._checklist_id = checklist_id
        self._checklist_name = checklist_name
        self._inspector = (inspector or "").strip()
        self._inspection_date = inspection_date or datetime.utcnow()
        self._sections: List[InspectionResultSection] = list(sections or [])
        self._comments = comments or ""
        self._created_at = created_at or datetime.utcnow()
        self._updated_at = updated_at or datetime.utcnow()
        self._status = derive_status(self.all_items())

    @classmethod
    def from_template(
        cls,
        template: ChecklistTemplate,
        order_id: str,
        inspector: str = "",
        item_id: Optional[str] = None,
        inspection_date: Optional[datetime] = None
    ) -> "InspectionResult":
        """Create a new, unsaved inspection bound to ``template``."""
        return cls(
            order_id=order_id,
            checklist_id=template.id,
            checklist_name=template.name,
            inspector=inspector,
            item_id=item_id,
            inspection_date=inspection_date,
            sections=build_sections(template),
        )

    @property
    def id(self) -> Optional[UUID]:
        """Get inspection ID (``None`` until persisted)."""
        return self._id

    @property
    def order_id(self) -> str:
        return self._order_id

    @property
    def item_id(self) -> Optional[str]:
        return self._item_id

    @property
    def checklist_id(self) -> str:
        return self._checklist_id

    @property
    def checklist_name(self) -> str:
        return self._checklist_name

    @property
    def inspector(self) -> str:
        return self._inspector

    @property
    def inspection_date(self) -> datetime:
        return self._inspection_date

    @property
    def status(self) -> InspectionStatus:
        return self._status

    @property
    def sections(self) -> List[InspectionResultSection]:
        """Get sections (list copy; items are the live ones)."""
        return self._sections.copy()

    @property
    def comments(self) -> str:
        return self._comments

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def is_persisted(self) -> bool:
        return self._id is not None

    def all_items(self) -> List[InspectionResultItem]:
        """Pool items across sections; section order has no effect on status."""
        return [item for section in self._sections for item in section.items]

    def get_section(self, section_id: str) -> Optional[InspectionResultSection]:
        for section in self._sections:
            if section.id == section_id:
                return section
        return None

    def get_item(self, section_id: str, item_id: str) -> InspectionResultItem:
        section = self.get_section(section_id)
        item = section.get_item(item_id) if section else None
        if item is None:
            raise ValueError(f"Item {item_id} not found in section {section_id}")
        return item

    def rebind(self, template: ChecklistTemplate) -> bool:
        """Rebuild sections from another template.

        Refused once the inspection is persisted. Values entered for the
        previous template are discarded, never merged by id.
        """
        if self.is_persisted():
            return False

        self._checklist_id = template.id
        self._checklist_name = template.name
        self._sections = build_sections(template)
        self._refresh()
        return True

    def record_value(
        self,
        section_id: str,
        item_id: str,
        value: RecordedValue,
        template_item: Optional[ChecklistTemplateItem]
    ) -> InspectionResultItem:
        """Store a measurement and evaluate it against its template item.

        Without a template item (e.g. it was removed from the template) the
        value is stored and the item fails.
        """
        item = self.get_item(section_id, item_id)
        item.result = value
        item.passed = evaluate(template_item, value) if template_item is not None else False
        item.verdict_source = VerdictSource.AUTOMATIC
        item.verdict = None
        self._refresh()
        return item

    def set_verdict(
        self,
        section_id: str,
        item_id: str,
        verdict: ItemVerdict,
        template_item: Optional[ChecklistTemplateItem] = None
    ) -> InspectionResultItem:
        """Set an item's verdict directly, bypassing its comparison rule.

        For yes/no items the recorded answer follows the verdict; for other
        types the recorded value is left as is even if it now disagrees.
        """
        if not isinstance(verdict, ItemVerdict):
            raise ValueError("Verdict must be an ItemVerdict enum")

        item = self.get_item(section_id, item_id)
        item.passed = verdict.passed
        if template_item is not None and template_item.type == ChecklistItemType.BOOLEAN:
            item.result = verdict.passed
        item.verdict_source = VerdictSource.MANUAL
        item.verdict = verdict
        self._refresh()
        return item

    def update_item_comments(self, section_id: str, item_id: str, comments: str) -> None:
        item = self.get_item(section_id, item_id)
        item.comments = comments or ""
        self._touch()

    def add_item_photo(self, section_id: str, item_id: str, photo_ref: str) -> int:
        """Attach an opaque photo reference and return its index."""
        if not photo_ref or not photo_ref.strip():
            raise ValueError("Photo reference cannot be empty")
        item = self.get_item(section_id, item_id)
        item.photos.append(photo_ref)
        self._touch()
        return len(item.photos) - 1

    def remove_item_photo(self, section_id: str, item_id: str, index: int) -> str:
        item = self.get_item(section_id, item_id)
        if not 0 <= index < len(item.photos):
            raise ValueError(f"Photo {index} not found on item {item_id}")
        removed = item.photos.pop(index)
        self._touch()
        return removed

    def update_comments(self, comments: str) -> None:
        self._comments = comments or ""
        self._touch()

    def update_inspector(self, inspector: str) -> None:
        self._inspector = (inspector or "").strip()
        self._touch()

    def update_inspection_date(self, inspection_date: datetime) -> None:
        self._inspection_date = inspection_date
        self._touch()

    def mark_persisted(self, inspection_id: UUID) -> None:
        """Record the id assigned on first save; it never changes afterwards."""
        if self._id is not None and self._id != inspection_id:
            raise ValueError("Inspection is already persisted with a different ID")
        self._id = inspection_id

    def summarize(self) -> InspectionSummary:
        return summarize_items(self.all_items())

    def copy(self) -> "InspectionResult":
        """Independent deep copy, used as the snapshot handed to persistence."""
        return copy.deepcopy(self)

    def _refresh(self) -> None:
        self._status = derive_status(self.all_items())
        self._touch()

    def _touch(self) -> None:
        self._updated_at = datetime.utcnow()

    def __eq__(self, other: object) -> bool:
        """Persisted inspections compare by ID, unsaved ones by identity."""
        if not isinstance(other, InspectionResult):
            return False
        if self._id is None or other._id is None:
            return self is other
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id) if self._id is not None else id(self)

    def __repr__(self) -> str:
        return (
            f"InspectionResult(id={self._id}, order_id={self._order_id!r}, "
            f"checklist_id={self._checklist_id!r}, status={self._status.value}, "
            f"items={len(self.all_items())})"
        )


def build_sections(template: ChecklistTemplate) -> List[InspectionResultSection]:
    """Map every template item to a fresh result item with a default value."""
    return [
        InspectionResultSection(
            id=section.id,
            name=section.name,
            items=[InspectionResultItem.from_template_item(item) for item in section.items],
        )
        for section in template.sections
    ]
