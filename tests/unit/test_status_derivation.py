"""Unit tests for aggregate status derivation."""

import random

from src.quality_inspection.domain.entities.inspection_result import InspectionResultItem
from src.quality_inspection.domain.services.status_derivation import (
    PASS_RATE_THRESHOLD,
    derive_status,
    failed_critical_items,
    summarize_items
)
from src.quality_inspection.domain.value_objects.inspection_status import InspectionStatus


def make_items(passed_flags, critical_flags=None):
    critical_flags = critical_flags or [False] * len(passed_flags)
    return [
        InspectionResultItem(id=f"item-{index}", description=f"Item {index}", passed=passed, critical_item=critical)
        for index, (passed, critical) in enumerate(zip(passed_flags, critical_flags))
    ]


class TestDeriveStatus:
    """Test cases for derive_status."""

    def test_threshold_value(self):
        """Test the fixed pass rate threshold."""
        assert PASS_RATE_THRESHOLD == 0.70

    def test_all_items_passed(self):
        """Test that a full pass rate passes."""
        assert derive_status(make_items([True] * 5)) == InspectionStatus.PASSED

    def test_empty_checklist_passes(self):
        """Test the vacuous pass of an inspection without items."""
        assert derive_status([]) == InspectionStatus.PASSED

    def test_exactly_seventy_percent_is_partial(self):
        """Test that the threshold itself is inclusive."""
        items = make_items([True] * 7 + [False] * 3)

        assert derive_status(items) == InspectionStatus.PARTIAL

    def test_sixty_percent_fails(self):
        """Test a pass rate below the threshold."""
        items = make_items([True] * 6 + [False] * 4)

        assert derive_status(items) == InspectionStatus.FAILED

    def test_single_failure_is_partial(self):
        """Test that 9 of 10 is partial, not passed."""
        items = make_items([True] * 9 + [False])

        assert derive_status(items) == InspectionStatus.PARTIAL

    def test_failed_critical_item_overrides_pass_rate(self):
        """Test that one failed critical item fails an otherwise 90% inspection."""
        passed = [False] + [True] * 9
        critical = [True] + [False] * 9

        assert derive_status(make_items(passed, critical)) == InspectionStatus.FAILED

    def test_passed_critical_item_does_not_fail(self):
        """Test that passing critical items have no special effect."""
        passed = [True, True, True, False]
        critical = [True, True, False, False]

        # 3 of 4 = 75%
        assert derive_status(make_items(passed, critical)) == InspectionStatus.PARTIAL

    def test_status_ignores_item_order(self):
        """Test that pooling items across sections is order independent."""
        items = make_items([True] * 7 + [False] * 3, [False] * 9 + [True])
        expected = derive_status(items)

        shuffled = list(items)
        random.Random(7).shuffle(shuffled)

        assert derive_status(shuffled) == expected == InspectionStatus.FAILED

    def test_status_is_deterministic(self):
        """Test that the same items always yield the same status."""
        items = make_items([True, False, True])

        assert derive_status(items) == derive_status(items)


class TestSummarizeItems:
    """Test cases for summarize_items."""

    def test_counts(self):
        """Test summary counters."""
        items = make_items([True, False, True, False], [True, True, False, False])

        summary = summarize_items(items)

        assert summary.total_items == 4
        assert summary.passed_items == 2
        assert summary.failed_items == 2
        assert summary.critical_items == 2
        assert summary.failed_critical_items == 1
        assert summary.has_critical_failures is True
        assert summary.pass_rate == 0.5

    def test_accepts_generator(self):
        """Test that a single-pass iterable is enough."""
        summary = summarize_items(item for item in make_items([True, True]))

        assert summary.total_items == 2
        assert summary.passed_items == 2

    def test_failed_critical_items(self):
        """Test listing failed critical items."""
        items = make_items([False, False, True], [True, False, True])

        failed = failed_critical_items(items)

        assert [item.id for item in failed] == ["item-0"]
