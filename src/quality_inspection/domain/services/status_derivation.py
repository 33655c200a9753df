"""Aggregate status derivation over every item of an inspection."""

from typing import Iterable, List, TYPE_CHECKING

from ..value_objects.inspection_status import InspectionStatus
from ..value_objects.inspection_summary import InspectionSummary

if TYPE_CHECKING:
    from ..entities.inspection_result import InspectionResultItem

PASS_RATE_THRESHOLD = 0.70


def summarize_items(items: Iterable["InspectionResultItem"]) -> InspectionSummary:
    """Count passed and critical items in a single pass."""
    total = passed = critical = failed_critical = 0
    for item in items:
        total += 1
        if item.passed:
            passed += 1
        if item.critical_item:
            critical += 1
            if not item.passed:
                failed_critical += 1

    return InspectionSummary(
        total_items=total,
        passed_items=passed,
        critical_items=critical,
        failed_critical_items=failed_critical,
    )


def derive_status(items: Iterable["InspectionResultItem"]) -> InspectionStatus:
    """Derive the overall status from the full item set.

    A failed critical item fails the inspection outright. Otherwise the pass
    rate decides: below 70% fails, below 100% is partial, 100% passes.
    An empty checklist passes.
    """
    summary = summarize_items(items)
    return status_from_summary(summary)


def status_from_summary(summary: InspectionSummary) -> InspectionStatus:
    if summary.has_critical_failures:
        return InspectionStatus.FAILED

    pass_rate = summary.pass_rate
    if pass_rate < PASS_RATE_THRESHOLD:
        return InspectionStatus.FAILED
    if pass_rate < 1.0:
        return InspectionStatus.PARTIAL
    return InspectionStatus.PASSED


def failed_critical_items(items: Iterable["InspectionResultItem"]) -> List["InspectionResultItem"]:
    return [item for item in items if item.critical_item and not item.passed]
