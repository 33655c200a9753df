"""Comparison criteria, one variant per checklist item type."""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class BooleanCriterion:
    """Yes/no item. Only a recorded ``True`` conforms."""

    def default_result(self) -> bool:
        return False


@dataclass(frozen=True)
class NumericCriterion:
    """Measured item checked against an absolute +/- tolerance band."""

    expected: Optional[float] = None
    tolerance: float = 0

    def __post_init__(self) -> None:
        """Validate numeric criterion data."""
        if self.tolerance < 0:
            raise ValueError("Tolerance cannot be negative")

    @property
    def has_target(self) -> bool:
        return self.expected is not None

    @property
    def lower_bound(self) -> Optional[float]:
        if self.expected is None:
            return None
        return self.expected - self.tolerance

    @property
    def upper_bound(self) -> Optional[float]:
        if self.expected is None:
            return None
        return self.expected + self.tolerance

    def default_result(self) -> float:
        return self.expected if self.expected is not None else 0


@dataclass(frozen=True)
class TextCriterion:
    """Free text item, optionally matched against an exact expected answer."""

    expected: Optional[str] = None

    @property
    def requires_exact_match(self) -> bool:
        return bool(self.expected)

    def default_result(self) -> str:
        return self.expected or ""


Criterion = Union[BooleanCriterion, NumericCriterion, TextCriterion]
