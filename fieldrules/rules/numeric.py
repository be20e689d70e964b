"""
Numeric rules: numeric, gt, lt, gte, lte, between, digits.

Values are coerced with to_decimal(): ints, floats, Decimals and numeric
strings are numbers; booleans, NaN and infinities are not. A value that
cannot be coerced fails with the "must be a number" message.
"""

import operator
import re

from .base import ValidationRule, format_number, split_pair, to_decimal

_DIGITS = re.compile(r"[0-9]+")


class NumericRule(ValidationRule):
    """Value must be numeric-coercible."""

    name = "numeric"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        if to_decimal(value) is None:
            return self.message("numeric", field_name)
        return None


class _ComparisonRule(ValidationRule):

    compare = None

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        bound = self.parse_decimal(self.require_parameter(parameter, f"{self.name}:0"))
        number = to_decimal(value)
        if number is None:
            return self.message("numeric", field_name)
        if self.compare(number, bound):
            return None
        return self.message(self.name, field_name, value=format_number(bound))


class GreaterThanRule(_ComparisonRule):
    """Usage: gt:0"""

    name = "gt"
    compare = operator.gt


class LessThanRule(_ComparisonRule):
    """Usage: lt:100"""

    name = "lt"
    compare = operator.lt


class GreaterThanOrEqualRule(_ComparisonRule):
    """Usage: gte:18"""

    name = "gte"
    compare = operator.ge


class LessThanOrEqualRule(_ComparisonRule):
    """Usage: lte:65"""

    name = "lte"
    compare = operator.le


class BetweenRule(ValidationRule):
    """
    Inclusive numeric range.

    Usage: between:18,65
    """

    name = "between"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        low_raw, high_raw = split_pair(self, parameter, "between:18,65")
        low = self.parse_decimal(low_raw)
        high = self.parse_decimal(high_raw)
        if low > high:
            raise self.config_error(
                f"minimum ({format_number(low)}) cannot be greater than maximum ({format_number(high)})"
            )

        number = to_decimal(value)
        if number is None:
            return self.message("numeric", field_name)
        if low <= number <= high:
            return None
        return self.message("between", field_name, min=format_number(low), max=format_number(high))


class DigitsRule(ValidationRule):
    """
    Checks that a value is made only of digits and has a given digit count.

    Usage:
        digits:5    exactly 5 digits (ZIP codes)
        digits:3,5  between 3 and 5 digits, inclusive

    The value is stringified first, so 1234 and "1234" are treated alike.
    Signs, decimal points, spaces and hyphens all fail the digits-only check.
    """

    name = "digits"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None

        if parameter is None or not parameter:
            raise self.config_error(
                "requires a parameter specifying the number of digits (e.g., 'digits:4' or 'digits:3,5')"
            )
        min_digits, max_digits = self._parse_bounds(parameter)

        text = str(value)
        if not _DIGITS.fullmatch(text):
            return self.message("digits.non_digit", field_name)

        count = len(text)
        if min_digits == max_digits:
            if count != min_digits:
                return self.message("digits.exact", field_name, digits=min_digits)
        elif count < min_digits or count > max_digits:
            return self.message("digits.between", field_name, min=min_digits, max=max_digits)
        return None

    def _parse_bounds(self, parameter):
        if "," in parameter:
            parts = parameter.split(",")
            # Trailing empty parts are dropped, so "3,5," reads as "3,5".
            while parts and not parts[-1]:
                parts.pop()
            if len(parts) != 2:
                raise self.config_error("range must have exactly two values (e.g., 'digits:3,5')")
            try:
                min_digits = int(parts[0].strip())
                max_digits = int(parts[1].strip())
            except ValueError:
                raise self.config_error(f"parameters must be valid integers: {parameter}") from None
            if min_digits < 1 or max_digits < 1:
                raise self.config_error(f"parameters must be positive integers: {parameter}")
            if min_digits > max_digits:
                raise self.config_error(
                    f"minimum ({min_digits}) cannot be greater than maximum ({max_digits})"
                )
            return min_digits, max_digits

        try:
            exact = int(parameter.strip())
        except ValueError:
            raise self.config_error(f"parameter must be a valid integer: {parameter}") from None
        if exact < 1:
            raise self.config_error(f"parameter must be a positive integer: {parameter}")
        return exact, exact
