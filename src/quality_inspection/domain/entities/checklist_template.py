"""Checklist template entity and its sections and items."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Tuple, Union
from uuid import uuid4

from ..value_objects.criteria import BooleanCriterion, Criterion, NumericCriterion, TextCriterion
from ..value_objects.item_types import ChecklistItemType

ExpectedValue = Union[bool, int, float, str, None]


@dataclass(frozen=True)
class ChecklistTemplateItem:
    """Immutable definition of a single verification item."""

    id: str
    description: str
    type: ChecklistItemType = ChecklistItemType.BOOLEAN
    expected_value: ExpectedValue = None
    tolerance: Optional[float] = None
    unit: Optional[str] = None
    critical_item: bool = False
    required: bool = True

    def __post_init__(self) -> None:
        """Validate item definition."""
        if not self.id or not str(self.id).strip():
            raise ValueError("Item ID cannot be empty")
        if not isinstance(self.type, ChecklistItemType):
            raise ValueError("Item type must be a ChecklistItemType enum")
        if self.type == ChecklistItemType.NUMERIC and self.tolerance is not None and self.tolerance < 0:
            raise ValueError("Tolerance cannot be negative")
        if self.type == ChecklistItemType.NUMERIC and self.expected_value is not None:
            if isinstance(self.expected_value, bool) or not isinstance(self.expected_value, (int, float)):
                raise ValueError("Expected value of a numeric item must be a number")

    @property
    def criterion(self) -> Criterion:
        """Comparison rule for this item; tolerance only applies to numeric items."""
        if self.type == ChecklistItemType.BOOLEAN:
            return BooleanCriterion()
        if self.type == ChecklistItemType.NUMERIC:
            return NumericCriterion(expected=self.expected_value, tolerance=self.tolerance or 0)
        if self.type == ChecklistItemType.TEXT:
            expected = None if self.expected_value is None else str(self.expected_value)
            return TextCriterion(expected=expected)
        raise TypeError(f"Unsupported checklist item type: {self.type}")

    def default_result(self) -> Union[bool, float, str]:
        """Initial recorded value for a freshly bound result item."""
        return self.criterion.default_result()


@dataclass(frozen=True)
class ChecklistTemplateSection:
    """Immutable ordered group of template items."""

    id: str
    name: str
    items: Tuple[ChecklistTemplateItem, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Normalize items to a tuple."""
        if not self.id or not str(self.id).strip():
            raise ValueError("Section ID cannot be empty")
        object.__setattr__(self, "items", tuple(self.items))

    def get_item(self, item_id: str) -> Optional[ChecklistTemplateItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


class ChecklistTemplate:
    """Reusable inspection checklist definition."""

    def __init__(
        self,
        name: str,
        template_id: Optional[str] = None,
        description: str = "",
        sections: Optional[List[ChecklistTemplateSection]] = None,
        is_active: bool = True,
        applicable_to_stages: Optional[List[str]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        """Initialize checklist template."""
        self._id = template_id or str(uuid4())
        self._name = (name or "").strip()
        self._description = (description or "").strip()
        self._sections: List[ChecklistTemplateSection] = list(sections or [])
        self._is_active = is_active
        self._applicable_to_stages = list(applicable_to_stages or [])
        self._created_at = created_at or datetime.utcnow()
        self._updated_at = updated_at or datetime.utcnow()

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def sections(self) -> List[ChecklistTemplateSection]:
        """Get sections (a copy, sections themselves are immutable)."""
        return self._sections.copy()

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def applicable_to_stages(self) -> List[str]:
        return self._applicable_to_stages.copy()

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def get_section(self, section_id: str) -> Optional[ChecklistTemplateSection]:
        for section in self._sections:
            if section.id == section_id:
                return section
        return None

    def get_item(self, section_id: str, item_id: str) -> Optional[ChecklistTemplateItem]:
        """Look up an item by section and item id."""
        section = self.get_section(section_id)
        if section is None:
            return None
        return section.get_item(item_id)

    def all_items(self) -> List[ChecklistTemplateItem]:
        return [item for section in self._sections for item in section.items]

    def rename(self, name: str) -> None:
        self._name = (name or "").strip()
        self._touch()

    def update_description(self, description: str) -> None:
        self._description = (description or "").strip()
        self._touch()

    def set_applicable_stages(self, stages: List[str]) -> None:
        self._applicable_to_stages = [stage.strip() for stage in stages if stage and stage.strip()]
        self._touch()

    def activate(self) -> None:
        self._is_active = True
        self._touch()

    def deactivate(self) -> None:
        self._is_active = False
        self._touch()

    def add_section(self, name: Optional[str] = None, section_id: Optional[str] = None) -> str:
        """Append a new empty section and return its id.

        Sections created without a name get "New Section N", N being the
        position of the new section.
        """
        section_id = section_id or str(uuid4())
        if self.get_section(section_id) is not None:
            raise ValueError(f"Section {section_id} already exists")

        section_name = (name or "").strip() or f"New Section {len(self._sections) + 1}"
        self._sections.append(ChecklistTemplateSection(id=section_id, name=section_name))
        self._touch()
        return section_id

    def remove_section(self, section_id: str) -> None:
        self._require_section(section_id)
        self._sections = [section for section in self._sections if section.id != section_id]
        self._touch()

    def rename_section(self, section_id: str, name: str) -> None:
        section = self._require_section(section_id)
        self._replace_section(replace(section, name=name))

    def add_item(
        self,
        section_id: str,
        description: str = "",
        item_type: ChecklistItemType = ChecklistItemType.BOOLEAN,
        expected_value: ExpectedValue = None,
        tolerance: Optional[float] = None,
        unit: Optional[str] = None,
        critical_item: bool = False,
        required: bool = True,
        item_id: Optional[str] = None
    ) -> str:
        """Append an item to a section and return its id.

        New items default to a required, non-critical yes/no check.
        """
        section = self._require_section(section_id)
        item_id = item_id or str(uuid4())
        if section.get_item(item_id) is not None:
            raise ValueError(f"Item {item_id} already exists in section {section_id}")

        item = ChecklistTemplateItem(
            id=item_id,
            description=description,
            type=item_type,
            expected_value=expected_value,
            tolerance=tolerance,
            unit=unit,
            critical_item=critical_item,
            required=required,
        )
        self._replace_section(replace(section, items=section.items + (item,)))
        return item_id

    def remove_item(self, section_id: str, item_id: str) -> None:
        section = self._require_section(section_id)
        if section.get_item(item_id) is None:
            raise ValueError(f"Item {item_id} not found in section {section_id}")
        items = tuple(item for item in section.items if item.id != item_id)
        self._replace_section(replace(section, items=items))

    def update_item(self, section_id: str, item_id: str, **changes) -> ChecklistTemplateItem:
        """Change fields of an item; unknown field names raise ``TypeError``."""
        section = self._require_section(section_id)
        current = section.get_item(item_id)
        if current is None:
            raise ValueError(f"Item {item_id} not found in section {section_id}")
        if "id" in changes:
            raise ValueError("Item ID cannot be changed")

        updated = replace(current, **changes)
        items = tuple(updated if item.id == item_id else item for item in section.items)
        self._replace_section(replace(section, items=items))
        return updated

    def validate(self) -> List[str]:
        """Return a list of problems that block saving the template."""
        errors = []
        if not self._name:
            errors.append("Checklist name cannot be empty")

        section_ids = [section.id for section in self._sections]
        if len(section_ids) != len(set(section_ids)):
            errors.append("Duplicate section IDs found in checklist")

        for section in self._sections:
            if not section.name.strip():
                errors.append(f"Section {section.id} must have a name")
            item_ids = [item.id for item in section.items]
            if len(item_ids) != len(set(item_ids)):
                errors.append(f"Duplicate item IDs found in section {section.name or section.id}")
            for item in section.items:
                if not item.description.strip():
                    errors.append(f"Item {item.id} in section {section.name or section.id} must have a description")

        return errors

    def _require_section(self, section_id: str) -> ChecklistTemplateSection:
        section = self.get_section(section_id)
        if section is None:
            raise ValueError(f"Section {section_id} not found in checklist {self._id}")
        return section

    def _replace_section(self, updated: ChecklistTemplateSection) -> None:
        self._sections = [updated if section.id == updated.id else section for section in self._sections]
        self._touch()

    def _touch(self) -> None:
        self._updated_at = datetime.utcnow()

    def __eq__(self, other: object) -> bool:
        """Check equality based on template ID."""
        if not isinstance(other, ChecklistTemplate):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"ChecklistTemplate(id={self._id!r}, name={self._name!r}, "
            f"sections={len(self._sections)}, items={len(self.all_items())}, active={self._is_active})"
        )
