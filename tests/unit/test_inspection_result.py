"""Unit tests for the InspectionResult domain entity."""

import pytest
from datetime import datetime
from uuid import uuid4

from src.quality_inspection.domain.entities.checklist_template import ChecklistTemplate
from src.quality_inspection.domain.entities.inspection_result import (
    InspectionResult,
    InspectionResultItem,
    InspectionResultSection,
    build_sections
)
from src.quality_inspection.domain.value_objects.inspection_status import InspectionStatus
from src.quality_inspection.domain.value_objects.item_types import ChecklistItemType, ItemVerdict, VerdictSource


def record_all(inspection, template, values):
    """Record values in template order and return the passed flags."""
    flags = []
    for (section, item), value in zip(
        [(section, item) for section in template.sections for item in section.items], values
    ):
        recorded = inspection.record_value(section.id, item.id, value, item)
        flags.append(recorded.passed)
    return flags


class TestInspectionResultCreation:
    """Test cases for creating inspection results."""

    def test_from_template(self, two_section_template):
        """Test binding a new inspection to a template."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1", inspector="Ana")

        assert inspection.id is None
        assert inspection.is_persisted() is False
        assert inspection.checklist_id == "final-inspection"
        assert inspection.checklist_name == "Final Inspection"
        assert [section.id for section in inspection.sections] == ["dimensions", "assembly"]
        assert len(inspection.all_items()) == 6
        assert isinstance(inspection.inspection_date, datetime)

    def test_items_start_with_defaults_and_not_passed(self, two_section_template):
        """Test that freshly bound items hold default values and fail."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")

        length = inspection.get_item("dimensions", "length")
        flatness = inspection.get_item("dimensions", "flatness")

        assert length.result == 100
        assert flatness.result is False
        assert all(item.passed is False for item in inspection.all_items())
        assert inspection.status == InspectionStatus.FAILED

    def test_empty_template_passes(self):
        """Test that a template without items yields a passed inspection."""
        inspection = InspectionResult.from_template(ChecklistTemplate(name="Empty"), order_id="ORD-1")

        assert inspection.status == InspectionStatus.PASSED

    def test_item_copies_template_fields(self, critical_template):
        """Test that description and critical flag are copied at binding."""
        inspection = InspectionResult.from_template(critical_template, order_id="ORD-1")

        guard = inspection.get_item("safety", "guard")
        assert guard.description == "Check guard"
        assert guard.critical_item is True

    def test_blank_order_rejected(self, two_section_template):
        with pytest.raises(ValueError, match="Order ID cannot be empty"):
            InspectionResult.from_template(two_section_template, order_id="  ")

    def test_non_uuid_id_rejected(self):
        with pytest.raises(ValueError, match="must be a UUID"):
            InspectionResult(order_id="ORD-1", checklist_id="c", checklist_name="C", inspection_id="abc")

    def test_status_derived_from_given_sections(self):
        """Test that a reloaded inspection derives its status from its items."""
        sections = [InspectionResultSection(id="s", name="S", items=[
            InspectionResultItem(id="a", description="A", result=True, passed=True),
            InspectionResultItem(id="b", description="B", result=True, passed=True)
        ])]

        inspection = InspectionResult(
            order_id="ORD-1", checklist_id="c", checklist_name="C", inspection_id=uuid4(), sections=sections
        )

        assert inspection.status == InspectionStatus.PASSED


class TestRecordValue:
    """Test cases for recording measurements."""

    def test_two_by_three_scenario(self, two_section_template):
        """Test the reference scenario of six recorded values."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")

        flags = record_all(inspection, two_section_template, [99, 101, True, 98, 105, False])

        assert flags == [True, True, True, True, False, False]
        assert inspection.summarize().passed_items == 4
        assert inspection.status == InspectionStatus.FAILED

    def test_two_by_three_scenario_with_unit_tolerance(self):
        """Test the same six values against numeric items of 100 +/- 1."""
        template = ChecklistTemplate(name="Tight Tolerance", template_id="tight")
        for section_id in ("dimensions", "assembly"):
            template.add_section(section_id=section_id)
            for item_id in ("first", "second"):
                template.add_item(section_id, f"Measure {item_id}", ChecklistItemType.NUMERIC,
                                  expected_value=100, tolerance=1, item_id=item_id)
            template.add_item(section_id, "Visual check", item_id="visual")
        inspection = InspectionResult.from_template(template, order_id="ORD-1")

        flags = record_all(inspection, template, [99, 101, True, 98, 105, False])

        assert flags == [True, True, True, False, False, False]
        assert inspection.status == InspectionStatus.FAILED

    def test_status_follows_each_edit(self, two_section_template):
        """Test that status is re-derived after every recorded value."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")
        record_all(inspection, two_section_template, [99, 101, True, 98, 105, True])

        assert inspection.status == InspectionStatus.PARTIAL

        template_item = two_section_template.get_item("assembly", "depth")
        inspection.record_value("assembly", "depth", "100.5", template_item)

        assert inspection.status == InspectionStatus.PASSED

    def test_missing_template_item_fails(self, two_section_template):
        """Test recording against an item no longer in the template."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")

        item = inspection.record_value("dimensions", "length", 100, None)

        assert item.result == 100
        assert item.passed is False

    def test_unknown_item_raises(self, two_section_template):
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")

        with pytest.raises(ValueError, match="not found"):
            inspection.record_value("dimensions", "missing", 1, None)

    def test_recording_clears_manual_verdict(self, two_section_template):
        """Test that a new measurement replaces a manual verdict."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")
        template_item = two_section_template.get_item("dimensions", "length")
        inspection.set_verdict("dimensions", "length", ItemVerdict.APPROVED, template_item)

        item = inspection.record_value("dimensions", "length", 150, template_item)

        assert item.passed is False
        assert item.verdict_source == VerdictSource.AUTOMATIC
        assert item.verdict is None

    def test_critical_item_blocks_pass_until_it_conforms(self, critical_template):
        """Test the critical override inside an inspection."""
        inspection = InspectionResult.from_template(critical_template, order_id="ORD-1")
        for item_id in ["label", "manual"]:
            inspection.record_value("safety", item_id, True, critical_template.get_item("safety", item_id))

        assert inspection.status == InspectionStatus.FAILED

        inspection.record_value("safety", "guard", True, critical_template.get_item("safety", "guard"))
        assert inspection.status == InspectionStatus.PASSED


class TestSetVerdict:
    """Test cases for manual verdicts."""

    def test_rejecting_boolean_item_rewrites_answer(self, critical_template):
        """Test that the yes/no answer follows the verdict."""
        inspection = InspectionResult.from_template(critical_template, order_id="ORD-1")
        template_item = critical_template.get_item("safety", "label")
        inspection.record_value("safety", "label", True, template_item)

        item = inspection.set_verdict("safety", "label", ItemVerdict.REJECTED, template_item)

        assert item.passed is False
        assert item.result is False
        assert item.verdict_source == VerdictSource.MANUAL
        assert item.verdict == ItemVerdict.REJECTED

    def test_approving_numeric_item_keeps_measurement(self, two_section_template):
        """Test that non-boolean values are kept even when they disagree."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")
        template_item = two_section_template.get_item("assembly", "depth")
        inspection.record_value("assembly", "depth", 105, template_item)

        item = inspection.set_verdict("assembly", "depth", ItemVerdict.APPROVED, template_item)

        assert item.passed is True
        assert item.result == 105

    def test_rework_counts_as_failure(self, critical_template):
        """Test that rework fails the item, here the critical one."""
        inspection = InspectionResult.from_template(critical_template, order_id="ORD-1")
        for item_id in ["guard", "label", "manual"]:
            inspection.record_value("safety", item_id, True, critical_template.get_item("safety", item_id))

        item = inspection.set_verdict("safety", "guard", ItemVerdict.REWORK)

        assert item.passed is False
        assert item.verdict == ItemVerdict.REWORK
        assert inspection.status == InspectionStatus.FAILED

    def test_verdict_is_idempotent(self, two_section_template):
        """Test that applying the same verdict twice changes nothing more."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")
        record_all(inspection, two_section_template, [99, 101, True, 98, 105, True])
        template_item = two_section_template.get_item("assembly", "depth")

        first = inspection.set_verdict("assembly", "depth", ItemVerdict.APPROVED, template_item)
        snapshot = (first.result, first.passed, inspection.status)
        second = inspection.set_verdict("assembly", "depth", ItemVerdict.APPROVED, template_item)

        assert (second.result, second.passed, inspection.status) == snapshot
        assert inspection.status == InspectionStatus.PASSED

    def test_invalid_verdict_rejected(self, two_section_template):
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")

        with pytest.raises(ValueError, match="ItemVerdict"):
            inspection.set_verdict("dimensions", "length", "approved")


class TestRebind:
    """Test cases for template rebinding."""

    def test_rebind_replaces_sections(self, two_section_template, critical_template):
        """Test that rebinding discards previously recorded values."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")
        record_all(inspection, two_section_template, [99, 101, True, 98, 100, True])

        assert inspection.rebind(critical_template) is True
        assert inspection.checklist_id == "safety-check"
        assert [item.id for item in inspection.all_items()] == ["guard", "label", "manual"]
        assert inspection.status == InspectionStatus.FAILED

    def test_rebind_refused_when_persisted(self, two_section_template, critical_template):
        """Test that persisted inspections keep their template."""
        inspection = InspectionResult.from_template(two_section_template, order_id="ORD-1")
        inspection.mark_persisted(uuid4())
        before = [(item.id, item.result) for item in inspection.all_items()]

        assert inspection.rebind(critical_template) is False
        assert inspection.checklist_id == "final-inspection"
        assert [(item.id, item.result) for item in inspection.all_items()] == before


class TestAttachmentsAndDetails:
    """Test cases for comments, photos and general fields."""

    def test_item_comments_and_photos(self, critical_template):
        """Test annotations that do not change the status."""
        inspection = InspectionResult.from_template(critical_template, order_id="ORD-1")
        status = inspection.status

        inspection.update_item_comments("safety", "guard", "Loose bolt")
        first = inspection.add_item_photo("safety", "guard", "photos/guard-1.jpg")
        second = inspection.add_item_photo("safety", "guard", "photos/guard-2.jpg")
        removed = inspection.remove_item_photo("safety", "guard", first)

        item = inspection.get_item("safety", "guard")
        assert (first, second) == (0, 1)
        assert removed == "photos/guard-1.jpg"
        assert item.comments == "Loose bolt"
        assert item.photos == ["photos/guard-2.jpg"]
        assert inspection.status == status

    def test_photo_validation(self, critical_template):
        inspection = InspectionResult.from_template(critical_template, order_id="ORD-1")

        with pytest.raises(ValueError, match="cannot be empty"):
            inspection.add_item_photo("safety", "guard", " ")

        with pytest.raises(ValueError, match="not found"):
            inspection.remove_item_photo("safety", "guard", 0)

    def test_general_details(self, critical_template):
        inspection = InspectionResult.from_template(critical_template, order_id="ORD-1")
        inspection_date = datetime(2025, 3, 1, 9, 30)

        inspection.update_inspector("  Bruno ")
        inspection.update_comments("Second shift")
        inspection.update_inspection_date(inspection_date)

        assert inspection.inspector == "Bruno"
        assert inspection.comments == "Second shift"
        assert inspection.inspection_date == inspection_date


class TestIdentityAndCopy:
    """Test cases for persistence identity."""

    def test_mark_persisted_once(self, critical_template):
        """Test that the assigned ID never changes."""
        inspection = InspectionResult.from_template(critical_template, order_id="ORD-1")
        inspection_id = uuid4()

        inspection.mark_persisted(inspection_id)
        inspection.mark_persisted(inspection_id)

        assert inspection.id == inspection_id
        with pytest.raises(ValueError, match="different ID"):
            inspection.mark_persisted(uuid4())

    def test_copy_is_independent(self, critical_template):
        """Test that a snapshot copy does not share items."""
        inspection = InspectionResult.from_template(critical_template, order_id="ORD-1")
        snapshot = inspection.copy()

        inspection.record_value("safety", "guard", True, critical_template.get_item("safety", "guard"))

        assert snapshot.get_item("safety", "guard").passed is False

    def test_equality(self, critical_template):
        """Test that saved inspections compare by ID and unsaved by identity."""
        first = InspectionResult.from_template(critical_template, order_id="ORD-1")
        second = InspectionResult.from_template(critical_template, order_id="ORD-1")

        assert first != second
        assert first == first

        inspection_id = uuid4()
        first.mark_persisted(inspection_id)
        copy = first.copy()
        assert copy == first
        assert hash(copy) == hash(first)

    def test_build_sections(self, two_section_template):
        sections = build_sections(two_section_template)

        assert [len(section.items) for section in sections] == [3, 3]
