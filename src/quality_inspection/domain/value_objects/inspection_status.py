"""Aggregate inspection status enumeration."""

from enum import Enum


class InspectionStatus(Enum):
    """Overall status of an inspection, always derived from its items."""

    PASSED = "passed"
    PARTIAL = "partial"
    FAILED = "failed"

    def get_label(self) -> str:
        """Get label used on reports and dashboards."""
        labels = {
            self.PASSED: "APPROVED",
            self.PARTIAL: "PARTIALLY APPROVED",
            self.FAILED: "REJECTED",
        }
        return labels[self]
