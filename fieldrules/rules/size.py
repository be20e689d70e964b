"""
Size rules: min, max, size.

What "size" means depends on the value:
- strings: number of characters
- lists, tuples, sets, mappings: number of items
- numbers: the numeric value itself
"""

from decimal import Decimal
from typing import Any, Optional, Tuple

from .base import ValidationRule, format_number, is_collection, to_decimal


def measure(value: Any) -> Tuple[Optional[str], Optional[Decimal]]:
    """Return (kind, measured size) or (None, None) if the value has no size."""
    if isinstance(value, str):
        return "string", Decimal(len(value))
    if is_collection(value):
        return "array", Decimal(len(value))
    if isinstance(value, (int, float, Decimal)):
        number = to_decimal(value)
        if number is not None:
            return "numeric", number
    return None, None


class _SizeRule(ValidationRule):

    usage = ""

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        limit = self.parse_decimal(self.require_parameter(parameter, self.usage))
        if limit < 0:
            raise self.config_error(f"parameter must not be negative: {parameter!r}")

        kind, size = measure(value)
        if kind is None:
            return self.message("size.type", field_name)
        if self.passes(size, limit):
            return None
        return self.message(f"{self.name}.{kind}", field_name,
                            **{self.name: format_number(limit)})

    def passes(self, size: Decimal, limit: Decimal) -> bool:
        raise NotImplementedError


class MinRule(_SizeRule):
    """Usage: min:3"""

    name = "min"
    usage = "min:3"

    def passes(self, size, limit):
        return size >= limit


class MaxRule(_SizeRule):
    """Usage: max:20"""

    name = "max"
    usage = "max:20"

    def passes(self, size, limit):
        return size <= limit


class SizeRule(_SizeRule):
    """Usage: size:10"""

    name = "size"
    usage = "size:10"

    def passes(self, size, limit):
        return size == limit
