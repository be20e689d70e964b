"""
Tests for the digits rule.
"""
import pytest

from fieldrules import InvalidRuleConfigError
from fieldrules.rules.numeric import DigitsRule


@pytest.fixture
def rule():
    """Create a DigitsRule with default messages."""
    return DigitsRule()


class TestExactDigits:
    """Test digits:n."""

    def test_exact_match(self, rule):
        assert rule.validate("pin", "1234", "4") is None

    def test_integer_value(self, rule):
        """Test that numbers are stringified before counting."""
        assert rule.validate("pin", 1234, "4") is None

    def test_too_few(self, rule):
        assert rule.validate("pin", "123", "4") == "The pin must be exactly 4 digits."

    def test_too_many(self, rule):
        assert rule.validate("pin", "12345", "4") == "The pin must be exactly 4 digits."

    def test_non_digit(self, rule):
        assert rule.validate("pin", "12a4", "4") == "The pin must contain only digits."

    @pytest.mark.parametrize("value", ["-123", -123, "12.5", 12.5, "12 34", "12-34", "", "+123"])
    def test_rejects_formatting(self, rule, value):
        """Test signs, decimals, spaces and hyphens are not digits."""
        assert rule.validate("code", value, "3") == "The code must contain only digits."

    def test_boolean_is_not_digits(self, rule):
        assert rule.validate("code", True, "4") == "The code must contain only digits."


class TestDigitRange:
    """Test digits:min,max."""

    @pytest.mark.parametrize("value", ["123", "1234", "12345"])
    def test_inside_range(self, rule, value):
        assert rule.validate("zip", value, "3,5") is None

    def test_below_range(self, rule):
        assert rule.validate("zip", "12", "3,5") == "The zip must be between 3 and 5 digits."

    def test_above_range(self, rule):
        assert rule.validate("zip", "123456", "3,5") == "The zip must be between 3 and 5 digits."

    def test_spaces_in_parameter(self, rule):
        assert rule.validate("zip", "1234", " 3 , 5 ") is None

    @pytest.mark.parametrize("parameter", ["3,5,", "3,5,,"])
    def test_trailing_commas_ignored(self, rule, parameter):
        assert rule.validate("zip", "1234", parameter) is None
        assert rule.validate("zip", "12", parameter) == "The zip must be between 3 and 5 digits."

    def test_equal_bounds_use_exact_message(self, rule):
        assert rule.validate("zip", "12", "3,3") == "The zip must be exactly 3 digits."


class TestNullValue:
    """Test null handling."""

    def test_null_passes(self, rule):
        assert rule.validate("pin", None, "4") is None

    def test_null_passes_even_with_bad_parameter(self, rule):
        """Test the null check runs before parameter validation."""
        assert rule.validate("pin", None, "0") is None


class TestConfigurationErrors:
    """Test invalid parameters raise instead of failing validation."""

    @pytest.mark.parametrize("parameter", [None, "", "0", "-1", "abc", "5,3", "0,3", "1,2,3", "3,", "a,5", "4.5"])
    def test_invalid_parameter(self, rule, parameter):
        with pytest.raises(InvalidRuleConfigError):
            rule.validate("pin", "1234", parameter)

    def test_zero_message(self, rule):
        with pytest.raises(InvalidRuleConfigError, match="positive integer"):
            rule.validate("pin", "1234", "0")

    def test_min_greater_than_max_message(self, rule):
        with pytest.raises(InvalidRuleConfigError, match=r"minimum \(5\) cannot be greater than maximum \(3\)"):
            rule.validate("pin", "1234", "5,3")

    def test_error_names_rule(self, rule):
        with pytest.raises(InvalidRuleConfigError) as exc_info:
            rule.validate("pin", "1234", "abc")
        assert exc_info.value.rule == "digits"
