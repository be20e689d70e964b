"""Collection rules: distinct."""

from collections.abc import Mapping

from .base import ValidationRule, is_collection


def has_duplicates(items) -> bool:
    """Pairwise equality check that also works for unhashable items."""
    seen_hashable = set()
    seen_other = []
    for item in items:
        try:
            if item in seen_hashable:
                return True
            seen_hashable.add(item)
        except TypeError:
            if any(item == other for other in seen_other):
                return True
            seen_other.append(item)
    return False


class DistinctRule(ValidationRule):
    """
    Every item of a list, tuple or set must be unique (mappings: their values).

    Equality is semantic (==), so 1 and 1.0 count as duplicates.
    """

    name = "distinct"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        if not is_collection(value):
            return self.message("distinct.type", field_name)
        items = value.values() if isinstance(value, Mapping) else value
        if has_duplicates(items):
            return self.message("distinct", field_name)
        return None
