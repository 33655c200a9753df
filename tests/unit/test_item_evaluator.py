"""Unit tests for the item evaluator domain service."""

import math

import pytest

from src.quality_inspection.domain.entities.checklist_template import ChecklistTemplateItem
from src.quality_inspection.domain.services.item_evaluator import evaluate, evaluate_criterion, parse_numeric
from src.quality_inspection.domain.value_objects.criteria import NumericCriterion, TextCriterion
from src.quality_inspection.domain.value_objects.item_types import ChecklistItemType


class TestBooleanEvaluation:
    """Test cases for yes/no items."""

    def test_only_true_conforms(self):
        """Test that only a recorded True conforms."""
        item = ChecklistTemplateItem(id="guard", description="Guard mounted")

        assert evaluate(item, True) is True
        assert evaluate(item, False) is False

    def test_truthy_values_do_not_conform(self):
        """Test that truthy non-boolean values are not a yes."""
        item = ChecklistTemplateItem(id="guard", description="Guard mounted")

        for value in [1, "true", "yes", 1.0]:
            assert evaluate(item, value) is False

    def test_expected_value_is_ignored(self):
        """Test that an expected value of False does not invert the rule."""
        item = ChecklistTemplateItem(id="guard", description="Guard mounted", expected_value=False)

        assert evaluate(item, True) is True
        assert evaluate(item, False) is False


class TestNumericEvaluation:
    """Test cases for numeric items with tolerance."""

    def _item(self, expected=10, tolerance=2):
        return ChecklistTemplateItem(
            id="length",
            description="Overall length",
            type=ChecklistItemType.NUMERIC,
            expected_value=expected,
            tolerance=tolerance
        )

    def test_bounds_are_inclusive(self):
        """Test that values on the tolerance bounds conform."""
        item = self._item()

        assert evaluate(item, 8) is True
        assert evaluate(item, 10) is True
        assert evaluate(item, 12) is True

    def test_values_outside_band_fail(self):
        """Test values just outside the tolerance band."""
        item = self._item()

        assert evaluate(item, 7.999) is False
        assert evaluate(item, 12.001) is False

    def test_numeric_strings_are_parsed(self):
        """Test that measurements typed as text are parsed."""
        item = self._item()

        assert evaluate(item, "11.5") is True
        assert evaluate(item, " 9 ") is True
        assert evaluate(item, "13") is False

    def test_unparseable_values_fail_without_raising(self):
        """Test that malformed input simply does not conform."""
        item = self._item()

        for value in ["abc", "", "   ", None, True, False, float("nan"), [10]]:
            assert evaluate(item, value) is False

    def test_missing_tolerance_requires_exact_value(self):
        """Test that an absent tolerance is treated as zero."""
        item = self._item(expected=5, tolerance=None)

        assert evaluate(item, 5) is True
        assert evaluate(item, 5.0001) is False

    def test_missing_expected_value_never_conforms(self):
        """Test numeric items without a target."""
        item = self._item(expected=None)

        assert evaluate(item, 0) is False
        assert evaluate(item, 10) is False


class TestTextEvaluation:
    """Test cases for free text items."""

    def test_exact_match_is_case_sensitive(self):
        """Test exact answer comparison."""
        item = ChecklistTemplateItem(id="color", description="Color", type=ChecklistItemType.TEXT, expected_value="OK")

        assert evaluate(item, "OK") is True
        assert evaluate(item, "ok") is False
        assert evaluate(item, "OK ") is False
        assert evaluate(item, "") is False

    def test_free_form_requires_non_blank_answer(self):
        """Test text items without an expected answer."""
        item = ChecklistTemplateItem(id="remarks", description="Remarks", type=ChecklistItemType.TEXT)

        assert evaluate(item, "anything") is True
        assert evaluate(item, "") is False
        assert evaluate(item, "   ") is False
        assert evaluate(item, None) is False

    def test_empty_expected_value_means_free_form(self):
        """Test that an empty expected answer does not require an empty answer."""
        item = ChecklistTemplateItem(id="remarks", description="Remarks", type=ChecklistItemType.TEXT, expected_value="")

        assert evaluate(item, "") is False
        assert evaluate(item, "fine") is True

    def test_non_string_values_do_not_conform(self):
        """Test that only text answers can satisfy a text item."""
        assert evaluate_criterion(TextCriterion(expected="42"), 42) is False
        assert evaluate_criterion(TextCriterion(expected="42"), "42") is True
        assert evaluate_criterion(TextCriterion(expected="True"), True) is False

        assert evaluate_criterion(TextCriterion(), False) is False
        assert evaluate_criterion(TextCriterion(), 0) is False


class TestEvaluateCriterion:
    """Test cases for criterion dispatch."""

    def test_unknown_criterion_raises_type_error(self):
        """Test that an unsupported criterion is a programming error."""
        with pytest.raises(TypeError):
            evaluate_criterion(object(), True)

    def test_numeric_criterion_directly(self):
        """Test evaluating a numeric criterion without a template item."""
        criterion = NumericCriterion(expected=0.5, tolerance=0.25)

        assert evaluate_criterion(criterion, 0.25) is True
        assert evaluate_criterion(criterion, 0.8) is False


class TestParseNumeric:
    """Test cases for numeric parsing."""

    def test_parse_numbers_and_strings(self):
        """Test supported numeric representations."""
        assert parse_numeric(3) == 3.0
        assert parse_numeric(2.5) == 2.5
        assert parse_numeric("  -1.25 ") == -1.25

    def test_parse_rejects_non_numbers(self):
        """Test values that are not numbers."""
        assert parse_numeric(True) is None
        assert parse_numeric(None) is None
        assert parse_numeric("1,5") is None
        assert parse_numeric("nan") is None
        assert parse_numeric({"value": 1}) is None

    def test_parse_keeps_infinity(self):
        """Test that infinity parses and is then outside any band."""
        assert math.isinf(parse_numeric("inf"))
