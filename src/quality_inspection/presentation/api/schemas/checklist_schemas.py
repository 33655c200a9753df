"""Pydantic schemas for checklist template API requests and responses."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from ....domain.entities.checklist_template import ChecklistTemplate
from ....domain.value_objects.item_types import ChecklistItemType


class ChecklistItemSchema(BaseModel):
    """Checklist item as sent and returned by the API."""
    id: Optional[str] = Field(None, max_length=64, description="Item ID; generated when omitted")
    description: str = Field(..., description="What the inspector verifies")
    type: ChecklistItemType = ChecklistItemType.BOOLEAN
    expected_value: Optional[Union[bool, int, float, str]] = None
    tolerance: Optional[float] = Field(None, description="Allowed deviation for numeric items")
    unit: Optional[str] = Field(None, max_length=20)
    critical_item: bool = False
    required: bool = True


class ChecklistSectionSchema(BaseModel):
    """Checklist section with its ordered items."""
    id: Optional[str] = Field(None, max_length=64, description="Section ID; generated when omitted")
    name: Optional[str] = Field(None, description="Section name; defaults to 'New Section N'")
    items: List[ChecklistItemSchema] = Field(default_factory=list)


class ChecklistTemplateRequest(BaseModel):
    """Request model for creating or replacing a checklist template."""
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    is_active: bool = True
    applicable_to_stages: List[str] = Field(default_factory=list)
    sections: List[ChecklistSectionSchema] = Field(default_factory=list)


class ChecklistTemplateResponse(BaseModel):
    """Response model for checklist template details."""
    id: str
    name: str
    description: str
    is_active: bool
    applicable_to_stages: List[str]
    sections: List[ChecklistSectionSchema]
    item_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @classmethod
    def from_entity(cls, template: ChecklistTemplate) -> "ChecklistTemplateResponse":
        return cls(
            id=template.id,
            name=template.name,
            description=template.description,
            is_active=template.is_active,
            applicable_to_stages=template.applicable_to_stages,
            sections=[
                ChecklistSectionSchema(
                    id=section.id,
                    name=section.name,
                    items=[
                        ChecklistItemSchema(
                            id=item.id,
                            description=item.description,
                            type=item.type,
                            expected_value=item.expected_value,
                            tolerance=item.tolerance,
                            unit=item.unit,
                            critical_item=item.critical_item,
                            required=item.required
                        )
                        for item in section.items
                    ]
                )
                for section in template.sections
            ],
            item_count=len(template.all_items()),
            created_at=template.created_at,
            updated_at=template.updated_at
        )


class ChecklistTemplateListResponse(BaseModel):
    """Response model for checklist template list."""
    checklists: List[ChecklistTemplateResponse]
    total: int


def build_template(
    request: ChecklistTemplateRequest,
    template_id: Optional[str] = None,
    created_at: Optional[datetime] = None
) -> ChecklistTemplate:
    """Build a template entity from a request through the authoring operations."""
    template = ChecklistTemplate(
        name=request.name,
        template_id=template_id,
        description=request.description,
        is_active=request.is_active,
        applicable_to_stages=request.applicable_to_stages,
        created_at=created_at
    )
    for section in request.sections:
        section_id = template.add_section(name=section.name, section_id=section.id)
        for item in section.items:
            template.add_item(
                section_id,
                description=item.description,
                item_type=item.type,
                expected_value=item.expected_value,
                tolerance=item.tolerance,
                unit=item.unit,
                critical_item=item.critical_item,
                required=item.required,
                item_id=item.id
            )
    return template
