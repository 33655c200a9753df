"""Inspection service coordinating forms with the template catalog and persistence."""

import logging
from typing import Callable, List, Optional, Tuple, TYPE_CHECKING, TypeVar
from uuid import UUID, uuid4

from src.quality_inspection.application.services.inspection_form import InspectionForm
from src.quality_inspection.domain.entities.inspection_result import InspectionResult, RecordedValue
from src.quality_inspection.domain.value_objects.item_types import ItemVerdict
from src.quality_inspection.domain.value_objects.save_result import SaveResult
from src.quality_inspection.infrastructure.logging import (
    get_logger,
    log_business_rule_violation,
    log_with_extra
)

if TYPE_CHECKING:
    from src.quality_inspection.application.ports.repositories import (
        ChecklistTemplateRepository,
        InspectionResultRepository
    )

T = TypeVar("T")


class InspectionService:
    """Service for opening, editing and saving inspection forms."""

    def __init__(
        self,
        inspection_repository: "InspectionResultRepository",
        template_repository: "ChecklistTemplateRepository"
    ):
        """Initialize inspection service with repository dependencies."""
        self._inspection_repository = inspection_repository
        self._template_repository = template_repository
        self._logger = get_logger(__name__)

    async def open_new_form(
        self,
        order_id: str,
        inspector: str = "",
        template_id: Optional[str] = None,
        item_id: Optional[str] = None
    ) -> InspectionForm:
        """Open a form for a new inspection of an order.

        Args:
            order_id: Order being inspected
            inspector: Inspector name (may still be blank, it is checked on save)
            template_id: Checklist template to bind; first active one when omitted
            item_id: Optional order item the inspection is scoped to

        Returns:
            Unsaved inspection form

        Raises:
            ValueError: If no active template exists or the template is unknown
        """
        templates = await self._template_repository.find_active()
        if template_id is not None and all(t.id != template_id for t in templates):
            # inactive templates can still be chosen explicitly
            requested = await self._template_repository.find_by_id(template_id)
            if requested is not None:
                templates = templates + [requested]

        form = InspectionForm.open_new(
            templates,
            order_id=order_id,
            inspector=inspector,
            template_id=template_id,
            item_id=item_id,
        )

        log_with_extra(
            self._logger,
            logging.INFO,
            f"Inspection form opened for order {order_id}",
            order_id=order_id,
            checklist_id=form.inspection.checklist_id,
            item_count=len(form.inspection.all_items())
        )
        return form

    async def open_form(self, inspection_id: UUID) -> InspectionForm:
        """Open a form over a persisted inspection.

        Raises:
            LookupError: If the inspection does not exist
        """
        inspection = await self._inspection_repository.find_by_id(inspection_id)
        if inspection is None:
            self._logger.warning(f"Inspection {inspection_id} not found")
            raise LookupError(f"Inspection with ID {inspection_id} not found")

        templates = await self._template_repository.find_active()
        if all(t.id != inspection.checklist_id for t in templates):
            bound = await self._template_repository.find_by_id(inspection.checklist_id)
            if bound is not None:
                templates = templates + [bound]
            else:
                self._logger.warning(
                    f"Checklist {inspection.checklist_id} of inspection {inspection_id} no longer exists"
                )

        return InspectionForm(inspection, templates)

    async def save(self, form: InspectionForm) -> SaveResult:
        """Persist a snapshot of the form's inspection.

        Validation failures block the save. Persistence failures are reported
        as retryable and leave the form exactly as it was.
        """
        errors = form.validate_for_save()
        if errors:
            log_business_rule_violation(
                self._logger,
                "incomplete_inspection",
                f"Save blocked: {'; '.join(errors)}",
                inspection_id=str(form.inspection.id) if form.inspection.id else "new",
                validation_errors=errors
            )
            return SaveResult.invalid(errors)

        snapshot = form.inspection.copy()
        is_new = not snapshot.is_persisted()
        if is_new:
            snapshot.mark_persisted(uuid4())

        try:
            saved = await self._inspection_repository.save(snapshot)
        except Exception as exc:
            self._logger.exception(f"Failed to save inspection {snapshot.id}")
            return SaveResult.failed(f"Inspection could not be saved, try saving again ({type(exc).__name__})")

        if is_new:
            form.inspection.mark_persisted(saved.id)

        log_with_extra(
            self._logger,
            logging.INFO,
            f"Inspection {saved.id} saved",
            inspection_id=str(saved.id),
            order_id=saved.order_id,
            checklist_id=saved.checklist_id,
            status=saved.status.value,
            created=is_new
        )
        return SaveResult.saved(saved.id)

    async def record_value(
        self,
        inspection_id: UUID,
        section_id: str,
        item_id: str,
        value: RecordedValue
    ) -> Tuple[InspectionForm, SaveResult]:
        """Record a measurement on a persisted inspection and save it."""
        return await self._edit_and_save(
            inspection_id, lambda form: form.record_value(section_id, item_id, value)
        )

    async def set_verdict(
        self,
        inspection_id: UUID,
        section_id: str,
        item_id: str,
        verdict: ItemVerdict
    ) -> Tuple[InspectionForm, SaveResult]:
        """Override an item verdict on a persisted inspection and save it."""
        return await self._edit_and_save(
            inspection_id, lambda form: form.set_verdict(section_id, item_id, verdict)
        )

    async def update_item_comments(
        self,
        inspection_id: UUID,
        section_id: str,
        item_id: str,
        comments: str
    ) -> Tuple[InspectionForm, SaveResult]:
        return await self._edit_and_save(
            inspection_id, lambda form: form.update_item_comments(section_id, item_id, comments)
        )

    async def add_photo(
        self,
        inspection_id: UUID,
        section_id: str,
        item_id: str,
        photo_ref: str
    ) -> Tuple[InspectionForm, SaveResult]:
        return await self._edit_and_save(
            inspection_id, lambda form: form.add_photo(section_id, item_id, photo_ref)
        )

    async def remove_photo(
        self,
        inspection_id: UUID,
        section_id: str,
        item_id: str,
        index: int
    ) -> Tuple[InspectionForm, SaveResult]:
        return await self._edit_and_save(
            inspection_id, lambda form: form.remove_photo(section_id, item_id, index)
        )

    async def update_details(
        self,
        inspection_id: UUID,
        inspector: Optional[str] = None,
        comments: Optional[str] = None
    ) -> Tuple[InspectionForm, SaveResult]:
        """Update inspector and/or general comments of a persisted inspection."""
        def apply(form: InspectionForm) -> None:
            if inspector is not None:
                form.update_inspector(inspector)
            if comments is not None:
                form.update_comments(comments)

        return await self._edit_and_save(inspection_id, apply)

    async def change_template(self, inspection_id: UUID, template_id: str) -> bool:
        """Attempt to rebind a persisted inspection; always refused."""
        form = await self.open_form(inspection_id)
        return form.select_template(template_id)

    async def get_inspection(self, inspection_id: UUID) -> Optional[InspectionResult]:
        return await self._inspection_repository.find_by_id(inspection_id)

    async def list_inspections(
        self,
        order_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[InspectionResult]:
        """List inspections, most recent first, optionally for one order."""
        if order_id is not None:
            inspections = await self._inspection_repository.find_by_order(order_id)
            return inspections[:limit] if limit else inspections
        return await self._inspection_repository.find_all(limit)

    async def delete_inspection(self, inspection_id: UUID) -> bool:
        deleted = await self._inspection_repository.delete(inspection_id)
        if deleted:
            self._logger.info(f"Inspection {inspection_id} deleted")
        return deleted

    async def _edit_and_save(
        self,
        inspection_id: UUID,
        edit: Callable[[InspectionForm], T]
    ) -> Tuple[InspectionForm, SaveResult]:
        form = await self.open_form(inspection_id)
        edit(form)
        result = await self.save(form)
        return form, result
