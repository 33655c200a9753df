"""JSON-compatible conversion of templates and inspection sections."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from src.quality_inspection.domain.entities.checklist_template import (
    ChecklistTemplate,
    ChecklistTemplateItem,
    ChecklistTemplateSection
)
from src.quality_inspection.domain.entities.inspection_result import (
    InspectionResultItem,
    InspectionResultSection
)
from src.quality_inspection.domain.value_objects.item_types import ChecklistItemType, ItemVerdict, VerdictSource


def template_item_to_dict(item: ChecklistTemplateItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "description": item.description,
        "type": item.type.value,
        "expected_value": item.expected_value,
        "tolerance": item.tolerance,
        "unit": item.unit,
        "critical_item": item.critical_item,
        "required": item.required,
    }


def template_item_from_dict(data: Dict[str, Any]) -> ChecklistTemplateItem:
    return ChecklistTemplateItem(
        id=data["id"],
        description=data.get("description", ""),
        type=ChecklistItemType(data.get("type", ChecklistItemType.BOOLEAN.value)),
        expected_value=data.get("expected_value"),
        tolerance=data.get("tolerance"),
        unit=data.get("unit"),
        critical_item=bool(data.get("critical_item", False)),
        required=bool(data.get("required", True)),
    )


def template_sections_to_list(sections: List[ChecklistTemplateSection]) -> List[Dict[str, Any]]:
    return [
        {
            "id": section.id,
            "name": section.name,
            "items": [template_item_to_dict(item) for item in section.items],
        }
        for section in sections
    ]


def template_sections_from_list(data: Optional[List[Dict[str, Any]]]) -> List[ChecklistTemplateSection]:
    return [
        ChecklistTemplateSection(
            id=section["id"],
            name=section.get("name", ""),
            items=tuple(template_item_from_dict(item) for item in section.get("items", [])),
        )
        for section in data or []
    ]


def template_to_dict(template: ChecklistTemplate) -> Dict[str, Any]:
    return {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "is_active": template.is_active,
        "applicable_to_stages": template.applicable_to_stages,
        "sections": template_sections_to_list(template.sections),
        "created_at": template.created_at.isoformat(),
        "updated_at": template.updated_at.isoformat(),
    }


def template_from_dict(data: Dict[str, Any]) -> ChecklistTemplate:
    """Build a template from the catalog's JSON format (timestamps optional)."""
    return ChecklistTemplate(
        name=data["name"],
        template_id=data.get("id"),
        description=data.get("description", ""),
        sections=template_sections_from_list(data.get("sections")),
        is_active=data.get("is_active", True),
        applicable_to_stages=data.get("applicable_to_stages"),
        created_at=_parse_datetime(data.get("created_at")),
        updated_at=_parse_datetime(data.get("updated_at")),
    )


def result_sections_to_list(sections: List[InspectionResultSection]) -> List[Dict[str, Any]]:
    return [
        {
            "id": section.id,
            "name": section.name,
            "items": [
                {
                    "id": item.id,
                    "description": item.description,
                    "result": item.result,
                    "passed": item.passed,
                    "critical_item": item.critical_item,
                    "comments": item.comments,
                    "photos": list(item.photos),
                    "verdict_source": item.verdict_source.value,
                    "verdict": item.verdict.value if item.verdict else None,
                }
                for item in section.items
            ],
        }
        for section in sections
    ]


def result_sections_from_list(data: Optional[List[Dict[str, Any]]]) -> List[InspectionResultSection]:
    sections = []
    for section in data or []:
        items = []
        for item in section.get("items", []):
            verdict = item.get("verdict")
            items.append(InspectionResultItem(
                id=item["id"],
                description=item.get("description", ""),
                result=item.get("result", False),
                passed=bool(item.get("passed", False)),
                critical_item=bool(item.get("critical_item", False)),
                comments=item.get("comments") or "",
                photos=list(item.get("photos") or []),
                verdict_source=VerdictSource(item.get("verdict_source", VerdictSource.AUTOMATIC.value)),
                verdict=ItemVerdict(verdict) if verdict else None,
            ))
        sections.append(InspectionResultSection(id=section["id"], name=section.get("name", ""), items=items))
    return sections


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)
