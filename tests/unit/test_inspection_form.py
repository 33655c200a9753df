"""Unit tests for the inspection form template binding."""

import pytest
from uuid import uuid4

from src.quality_inspection.application.services.inspection_form import InspectionForm
from src.quality_inspection.domain.value_objects.inspection_status import InspectionStatus
from src.quality_inspection.domain.value_objects.item_types import ItemVerdict


class TestOpenNew:
    """Test cases for opening a new form."""

    def test_binds_first_template_by_default(self, two_section_template, critical_template):
        """Test the default template selection."""
        form = InspectionForm.open_new([two_section_template, critical_template], order_id="ORD-1")

        assert form.inspection.checklist_id == "final-inspection"
        assert form.template == two_section_template
        assert form.template_selection_locked is False
        assert form.status == InspectionStatus.FAILED

    def test_binds_requested_template(self, two_section_template, critical_template):
        form = InspectionForm.open_new(
            [two_section_template, critical_template], order_id="ORD-1", template_id="safety-check"
        )

        assert form.inspection.checklist_id == "safety-check"
        assert len(form.available_templates) == 2

    def test_empty_catalog_rejected(self):
        with pytest.raises(ValueError, match="No checklist templates"):
            InspectionForm.open_new([], order_id="ORD-1")

    def test_unknown_template_rejected(self, two_section_template):
        with pytest.raises(ValueError, match="not found"):
            InspectionForm.open_new([two_section_template], order_id="ORD-1", template_id="missing")


class TestSelectTemplate:
    """Test cases for template selection and the persisted lock."""

    def test_select_template_before_save(self, two_section_template, critical_template):
        """Test rebinding an unsaved inspection."""
        form = InspectionForm.open_new([two_section_template, critical_template], order_id="ORD-1")
        form.record_value("dimensions", "length", 100)

        assert form.select_template("safety-check") is True
        assert form.inspection.checklist_id == "safety-check"
        assert [item.id for item in form.inspection.all_items()] == ["guard", "label", "manual"]

    def test_select_template_refused_after_save(self, two_section_template, critical_template):
        """Test that a persisted inspection keeps its template and items."""
        form = InspectionForm.open_new([two_section_template, critical_template], order_id="ORD-1")
        form.record_value("dimensions", "length", 100)
        form.inspection.mark_persisted(uuid4())

        assert form.template_selection_locked is True
        assert form.select_template("safety-check") is False
        assert form.inspection.checklist_id == "final-inspection"
        assert form.inspection.get_item("dimensions", "length").passed is True

    def test_select_unknown_template(self, two_section_template):
        form = InspectionForm.open_new([two_section_template], order_id="ORD-1")

        with pytest.raises(ValueError, match="not found"):
            form.select_template("missing")


class TestFormEdits:
    """Test cases for edits made through the form."""

    def test_record_value_uses_bound_template(self, two_section_template):
        """Test evaluation against the template in the catalog."""
        form = InspectionForm.open_new([two_section_template], order_id="ORD-1")

        assert form.record_value("dimensions", "length", 102).passed is True
        assert form.record_value("dimensions", "width", 103).passed is False

    def test_record_value_without_template_in_catalog(self, two_section_template):
        """Test that items fail when the bound template is gone."""
        form = InspectionForm.open_new([two_section_template], order_id="ORD-1")
        detached = InspectionForm(form.inspection, [])

        assert detached.template is None
        assert detached.record_value("dimensions", "length", 100).passed is False

    def test_set_verdict(self, critical_template):
        """Test manual verdicts through the form."""
        form = InspectionForm.open_new([critical_template], order_id="ORD-1")
        for item_id in ["guard", "label", "manual"]:
            form.set_verdict("safety", item_id, ItemVerdict.APPROVED)

        assert form.status == InspectionStatus.PASSED
        assert form.inspection.get_item("safety", "guard").result is True

        # 2 of 3 is below the pass rate threshold
        form.set_verdict("safety", "manual", ItemVerdict.REWORK)
        assert form.status == InspectionStatus.FAILED
        assert form.inspection.get_item("safety", "manual").result is False

    def test_annotations(self, critical_template):
        form = InspectionForm.open_new([critical_template], order_id="ORD-1")

        form.update_item_comments("safety", "guard", "Check again")
        index = form.add_photo("safety", "guard", "photo-1")
        form.update_comments("Night shift")
        form.update_inspector("Ana")

        assert index == 0
        assert form.remove_photo("safety", "guard", index) == "photo-1"
        assert form.inspection.comments == "Night shift"
        assert form.inspection.inspector == "Ana"


class TestValidateForSave:
    """Test cases for save validation."""

    def test_inspector_required(self, critical_template):
        form = InspectionForm.open_new([critical_template], order_id="ORD-1", inspector="  ")

        assert form.validate_for_save() == ["Inspector name is required"]

    def test_valid_form(self, critical_template):
        form = InspectionForm.open_new([critical_template], order_id="ORD-1", inspector="Ana")

        assert form.validate_for_save() == []
