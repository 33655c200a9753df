"""Shared fixtures for checklist and inspection tests."""

import pytest

from src.quality_inspection.domain.entities.checklist_template import (
    ChecklistTemplate,
    ChecklistTemplateItem,
    ChecklistTemplateSection
)
from src.quality_inspection.domain.value_objects.item_types import ChecklistItemType


def numeric_item(item_id: str, expected: float = 100, tolerance: float = 2, critical: bool = False) -> ChecklistTemplateItem:
    return ChecklistTemplateItem(
        id=item_id,
        description=f"Measure {item_id}",
        type=ChecklistItemType.NUMERIC,
        expected_value=expected,
        tolerance=tolerance,
        unit="mm",
        critical_item=critical
    )


def boolean_item(item_id: str, critical: bool = False) -> ChecklistTemplateItem:
    return ChecklistTemplateItem(id=item_id, description=f"Check {item_id}", critical_item=critical)


def text_item(item_id: str, expected=None) -> ChecklistTemplateItem:
    return ChecklistTemplateItem(
        id=item_id,
        description=f"Describe {item_id}",
        type=ChecklistItemType.TEXT,
        expected_value=expected
    )


@pytest.fixture
def two_section_template() -> ChecklistTemplate:
    """Two sections of three items: numeric 100 +/- 2 and yes/no checks."""
    return ChecklistTemplate(
        name="Final Inspection",
        template_id="final-inspection",
        sections=[
            ChecklistTemplateSection(
                id="dimensions",
                name="Dimensions",
                items=(numeric_item("length"), numeric_item("width"), boolean_item("flatness"))
            ),
            ChecklistTemplateSection(
                id="assembly",
                name="Assembly",
                items=(numeric_item("height"), numeric_item("depth"), boolean_item("fasteners"))
            )
        ]
    )


@pytest.fixture
def critical_template() -> ChecklistTemplate:
    """Three yes/no items, the first one critical."""
    return ChecklistTemplate(
        name="Safety Check",
        template_id="safety-check",
        sections=[
            ChecklistTemplateSection(
                id="safety",
                name="Safety",
                items=(boolean_item("guard", critical=True), boolean_item("label"), boolean_item("manual"))
            )
        ]
    )


@pytest.fixture
def text_template() -> ChecklistTemplate:
    return ChecklistTemplate(
        name="Paint Check",
        template_id="paint-check",
        sections=[
            ChecklistTemplateSection(
                id="finish",
                name="Finish",
                items=(text_item("color", expected="OK"), text_item("remarks"))
            )
        ]
    )
