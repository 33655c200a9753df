"""Conformance rules for a single recorded checklist value."""

import math
from typing import Any, Optional

from ..entities.checklist_template import ChecklistTemplateItem
from ..value_objects.criteria import BooleanCriterion, Criterion, NumericCriterion, TextCriterion


def evaluate(template_item: ChecklistTemplateItem, recorded_value: Any) -> bool:
    """Decide whether ``recorded_value`` conforms to ``template_item``.

    Pure and total: malformed input never raises, it simply does not conform.
    """
    return evaluate_criterion(template_item.criterion, recorded_value)


def evaluate_criterion(criterion: Criterion, recorded_value: Any) -> bool:
    """Apply the comparison rule matching the criterion variant."""
    if isinstance(criterion, BooleanCriterion):
        # expected_value is ignored for yes/no items
        return recorded_value is True

    if isinstance(criterion, NumericCriterion):
        if not criterion.has_target:
            return False
        measured = parse_numeric(recorded_value)
        if measured is None:
            return False
        return criterion.lower_bound <= measured <= criterion.upper_bound

    if isinstance(criterion, TextCriterion):
        answer = _as_text(recorded_value)
        if answer is None:
            return False
        if criterion.requires_exact_match:
            return answer == criterion.expected
        return answer.strip() != ""

    raise TypeError(f"No comparison rule for criterion {type(criterion).__name__}")


def parse_numeric(value: Any) -> Optional[float]:
    """Interpret a recorded value as a number, or ``None`` if it is not one."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number):
        return None
    return number


def _as_text(value: Any) -> Optional[str]:
    """Text answer of a recorded value; ``None`` when it is not text at all."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return None
