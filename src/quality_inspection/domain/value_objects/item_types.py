"""Checklist item type and verdict enumerations."""

from enum import Enum


class ChecklistItemType(Enum):
    """Enumeration of checklist item types."""

    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    TEXT = "text"


class ItemVerdict(Enum):
    """Verdict an inspector can set directly on an item."""

    APPROVED = "approved"
    REJECTED = "rejected"
    REWORK = "rework"

    @property
    def passed(self) -> bool:
        """Rejected and rework both count as a failed item."""
        return self is ItemVerdict.APPROVED

    def get_label(self) -> str:
        """Get label used on reports."""
        labels = {
            self.APPROVED: "Approved",
            self.REJECTED: "Rejected",
            self.REWORK: "Rework",
        }
        return labels[self]


class VerdictSource(Enum):
    """Where the current verdict of a result item came from."""

    AUTOMATIC = "automatic"
    MANUAL = "manual"
