"""SQLAlchemy repository implementations."""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, func, delete, desc
from sqlalchemy.ext.asyncio import AsyncSession

from src.quality_inspection.infrastructure.logging import (
    get_logger,
    log_database_operation
)

from src.quality_inspection.application.ports.repositories import (
    ChecklistTemplateRepository,
    InspectionResultRepository
)
from src.quality_inspection.domain.entities.checklist_template import ChecklistTemplate
from src.quality_inspection.domain.entities.inspection_result import InspectionResult
from src.quality_inspection.infrastructure.database.models import ChecklistTemplateModel, InspectionResultModel
from src.quality_inspection.infrastructure.serialization import (
    result_sections_from_list,
    result_sections_to_list,
    template_sections_from_list,
    template_sections_to_list
)


class SQLAlchemyChecklistTemplateRepository(ChecklistTemplateRepository):
    """SQLAlchemy implementation of the checklist template catalog."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._logger = get_logger(__name__)

    async def save(self, template: ChecklistTemplate) -> ChecklistTemplate:
        """Save a checklist template to the database."""
        stmt = select(ChecklistTemplateModel).where(ChecklistTemplateModel.id == template.id)
        result = await self._session.execute(stmt)
        existing_template = result.scalar_one_or_none()

        if existing_template:
            log_database_operation(self._logger, "UPDATE", "checklist_templates", checklist_id=template.id)
            self._update_model_from_entity(existing_template, template)
        else:
            log_database_operation(self._logger, "INSERT", "checklist_templates", checklist_id=template.id)
            template_model = ChecklistTemplateModel(id=template.id, created_at=template.created_at)
            self._update_model_from_entity(template_model, template)
            self._session.add(template_model)

        await self._session.flush()
        return template

    async def find_by_id(self, template_id: str) -> Optional[ChecklistTemplate]:
        """Find checklist template by ID."""
        log_database_operation(self._logger, "SELECT", "checklist_templates", checklist_id=template_id)
        stmt = select(ChecklistTemplateModel).where(ChecklistTemplateModel.id == template_id)
        result = await self._session.execute(stmt)
        template_model = result.scalar_one_or_none()

        if not template_model:
            return None

        return self._model_to_entity(template_model)

    async def find_all(self) -> List[ChecklistTemplate]:
        """Find all checklist templates ordered by name."""
        stmt = select(ChecklistTemplateModel).order_by(ChecklistTemplateModel.name)
        result = await self._session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def find_active(self) -> List[ChecklistTemplate]:
        """Find active checklist templates ordered by name."""
        stmt = select(ChecklistTemplateModel).where(
            ChecklistTemplateModel.is_active.is_(True)
        ).order_by(ChecklistTemplateModel.name)
        result = await self._session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def delete(self, template_id: str) -> bool:
        """Delete a checklist template."""
        log_database_operation(self._logger, "DELETE", "checklist_templates", checklist_id=template_id)
        stmt = delete(ChecklistTemplateModel).where(ChecklistTemplateModel.id == template_id)
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    def _model_to_entity(self, model: ChecklistTemplateModel) -> ChecklistTemplate:
        """Convert database model to domain entity."""
        return ChecklistTemplate(
            name=model.name,
            template_id=model.id,
            description=model.description or "",
            sections=template_sections_from_list(model.sections),
            is_active=model.is_active,
            applicable_to_stages=model.applicable_to_stages,
            created_at=model.created_at,
            updated_at=model.updated_at
        )

    def _update_model_from_entity(self, model: ChecklistTemplateModel, template: ChecklistTemplate) -> None:
        """Update database model fields from domain entity."""
        model.name = template.name
        model.description = template.description
        model.is_active = template.is_active
        model.applicable_to_stages = template.applicable_to_stages
        model.sections = template_sections_to_list(template.sections)
        model.updated_at = template.updated_at


class SQLAlchemyInspectionResultRepository(InspectionResultRepository):
    """SQLAlchemy implementation of inspection result repository."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._logger = get_logger(__name__)

    async def save(self, inspection: InspectionResult) -> InspectionResult:
        """Save an inspection snapshot to the database."""
        if inspection.id is None:
            raise ValueError("Inspection must have an ID to be saved")

        stmt = select(InspectionResultModel).where(InspectionResultModel.id == inspection.id)
        result = await self._session.execute(stmt)
        existing_inspection = result.scalar_one_or_none()

        if existing_inspection:
            log_database_operation(self._logger, "UPDATE", "inspection_results",
                                   inspection_id=str(inspection.id),
                                   order_id=inspection.order_id)
            self._update_model_from_entity(existing_inspection, inspection)
            existing_inspection.updated_at = datetime.utcnow()
        else:
            log_database_operation(self._logger, "INSERT", "inspection_results",
                                   inspection_id=str(inspection.id),
                                   order_id=inspection.order_id)
            inspection_model = InspectionResultModel(
                id=inspection.id,
                checklist_id=inspection.checklist_id,
                checklist_name=inspection.checklist_name,
                created_at=inspection.created_at
            )
            self._update_model_from_entity(inspection_model, inspection)
            inspection_model.updated_at = inspection.updated_at
            self._session.add(inspection_model)

        await self._session.flush()
        return inspection

    async def find_by_id(self, inspection_id: UUID) -> Optional[InspectionResult]:
        """Find inspection by ID."""
        log_database_operation(self._logger, "SELECT", "inspection_results",
                               inspection_id=str(inspection_id))
        stmt = select(InspectionResultModel).where(InspectionResultModel.id == inspection_id)
        result = await self._session.execute(stmt)
        inspection_model = result.scalar_one_or_none()

        if not inspection_model:
            return None

        return self._model_to_entity(inspection_model)

    async def find_by_order(self, order_id: str) -> List[InspectionResult]:
        """Find all inspections of an order (ordered by inspection_date DESC)."""
        stmt = select(InspectionResultModel).where(
            InspectionResultModel.order_id == order_id
        ).order_by(desc(InspectionResultModel.inspection_date))

        result = await self._session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def find_by_checklist(self, checklist_id: str) -> List[InspectionResult]:
        """Find all inspections bound to a checklist template."""
        stmt = select(InspectionResultModel).where(
            InspectionResultModel.checklist_id == checklist_id
        ).order_by(desc(InspectionResultModel.inspection_date))

        result = await self._session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def find_all(self, limit: Optional[int] = None) -> List[InspectionResult]:
        """Find inspections, most recent first, optionally limited by count."""
        stmt = select(InspectionResultModel).order_by(desc(InspectionResultModel.inspection_date))

        if limit:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def delete(self, inspection_id: UUID) -> bool:
        """Delete an inspection by ID."""
        log_database_operation(self._logger, "DELETE", "inspection_results",
                               inspection_id=str(inspection_id))
        stmt = delete(InspectionResultModel).where(InspectionResultModel.id == inspection_id)
        result = await self._session.execute(stmt)

        return result.rowcount > 0

    async def exists(self, inspection_id: UUID) -> bool:
        """Check if an inspection exists."""
        stmt = select(func.count(InspectionResultModel.id)).where(
            InspectionResultModel.id == inspection_id
        )
        result = await self._session.execute(stmt)
        count = result.scalar()

        return count > 0

    async def count_by_status(self, order_id: Optional[str] = None) -> Dict[str, int]:
        """Count inspections per status value."""
        stmt = select(InspectionResultModel.status, func.count(InspectionResultModel.id)).group_by(
            InspectionResultModel.status
        )
        if order_id is not None:
            stmt = stmt.where(InspectionResultModel.order_id == order_id)

        result = await self._session.execute(stmt)
        return {status.value: count for status, count in result.all()}

    def _model_to_entity(self, model: InspectionResultModel) -> InspectionResult:
        """Convert database model to domain entity; the status is re-derived from the items."""
        return InspectionResult(
            order_id=model.order_id,
            checklist_id=model.checklist_id,
            checklist_name=model.checklist_name,
            inspector=model.inspector,
            inspection_id=model.id,
            item_id=model.item_id,
            inspection_date=model.inspection_date,
            sections=result_sections_from_list(model.sections),
            comments=model.comments or "",
            created_at=model.created_at,
            updated_at=model.updated_at
        )

    def _update_model_from_entity(self, model: InspectionResultModel, inspection: InspectionResult) -> None:
        """Update database model fields from domain entity.

        The template binding (checklist_id/checklist_name) is never rewritten.
        """
        model.order_id = inspection.order_id
        model.item_id = inspection.item_id
        model.inspector = inspection.inspector
        model.inspection_date = inspection.inspection_date
        model.status = inspection.status
        model.comments = inspection.comments
        model.sections = result_sections_to_list(inspection.sections)
