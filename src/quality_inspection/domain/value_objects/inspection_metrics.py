"""Quality metrics value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class InspectionMetrics:
    """Status distribution across a set of inspections."""

    total_inspections: int
    passed_inspections: int
    partial_inspections: int
    failed_inspections: int

    def __post_init__(self) -> None:
        """Validate metric counts."""
        counted = self.passed_inspections + self.partial_inspections + self.failed_inspections
        if counted != self.total_inspections:
            raise ValueError("Status counts must add up to the total number of inspections")

    @property
    def pass_rate_percentage(self) -> int:
        """Share of fully passed inspections, rounded to a whole percent."""
        if self.total_inspections == 0:
            return 0
        return round(self.passed_inspections / self.total_inspections * 100)
