"""Inspection summary value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class InspectionSummary:
    """Immutable item counts of a single inspection."""

    total_items: int
    passed_items: int
    critical_items: int = 0
    failed_critical_items: int = 0

    def __post_init__(self) -> None:
        """Validate summary counts."""
        if self.total_items < 0 or self.passed_items < 0:
            raise ValueError("Item counts cannot be negative")
        if self.passed_items > self.total_items:
            raise ValueError("Passed items cannot exceed total items")
        if self.failed_critical_items > self.critical_items:
            raise ValueError("Failed critical items cannot exceed critical items")

    @property
    def failed_items(self) -> int:
        return self.total_items - self.passed_items

    @property
    def pass_rate(self) -> float:
        """Fraction of passed items; an empty checklist passes vacuously."""
        if self.total_items == 0:
            return 1.0
        return self.passed_items / self.total_items

    @property
    def passed_percentage(self) -> int:
        """Rounded percentage shown on reports (0 for an empty checklist)."""
        if self.total_items == 0:
            return 0
        return round(self.passed_items / self.total_items * 100)

    @property
    def failed_percentage(self) -> int:
        if self.total_items == 0:
            return 0
        return 100 - self.passed_percentage

    @property
    def has_critical_failures(self) -> bool:
        return self.failed_critical_items > 0
