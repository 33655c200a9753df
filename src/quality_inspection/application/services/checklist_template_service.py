"""Checklist template catalog service."""

import logging
from typing import List, TYPE_CHECKING

from src.quality_inspection.domain.entities.checklist_template import ChecklistTemplate
from src.quality_inspection.infrastructure.logging import (
    get_logger,
    log_business_rule_violation,
    log_with_extra
)

if TYPE_CHECKING:
    from src.quality_inspection.application.ports.repositories import ChecklistTemplateRepository


class ChecklistTemplateService:
    """Service for maintaining the checklist template catalog."""

    def __init__(self, template_repository: "ChecklistTemplateRepository"):
        self._template_repository = template_repository
        self._logger = get_logger(__name__)

    async def list_templates(self, include_inactive: bool = False) -> List[ChecklistTemplate]:
        if include_inactive:
            return await self._template_repository.find_all()
        return await self._template_repository.find_active()

    async def get_template(self, template_id: str) -> ChecklistTemplate:
        """Get a template by ID.

        Raises:
            LookupError: If the template does not exist
        """
        template = await self._template_repository.find_by_id(template_id)
        if template is None:
            raise LookupError(f"Checklist template with ID {template_id} not found")
        return template

    async def save_template(self, template: ChecklistTemplate) -> ChecklistTemplate:
        """Validate and store a template.

        Existing inspections keep the copies taken when they were bound, so
        editing a template never changes them.

        Raises:
            ValueError: If the template is invalid
        """
        errors = template.validate()
        if errors:
            log_business_rule_violation(
                self._logger,
                "invalid_checklist_template",
                f"Checklist {template.id} rejected: {'; '.join(errors)}",
                checklist_id=template.id,
                validation_errors=errors
            )
            raise ValueError("; ".join(errors))

        saved = await self._template_repository.save(template)
        log_with_extra(
            self._logger,
            logging.INFO,
            f"Checklist template {saved.id} saved",
            checklist_id=saved.id,
            section_count=len(saved.sections),
            item_count=len(saved.all_items()),
            is_active=saved.is_active
        )
        return saved

    async def set_active(self, template_id: str, active: bool) -> ChecklistTemplate:
        template = await self.get_template(template_id)
        if active:
            template.activate()
        else:
            template.deactivate()
        return await self._template_repository.save(template)

    async def delete_template(self, template_id: str) -> bool:
        deleted = await self._template_repository.delete(template_id)
        if deleted:
            self._logger.info(f"Checklist template {template_id} deleted")
        return deleted
