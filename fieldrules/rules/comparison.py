"""
Field-comparison rules: same, different.

Both read the raw value of a sibling field at the same nesting level from
the FieldContext. They never trigger validation of the sibling.
"""

from .base import ValidationRule


class SameRule(ValidationRule):
    """Usage: same:password"""

    name = "same"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        other = self.require_parameter(parameter, "same:password")
        sibling = context.sibling(other) if context is not None else None
        if value == sibling:
            return None
        return self.message("same", field_name, other=other)


class DifferentRule(ValidationRule):
    """Usage: different:old_password"""

    name = "different"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        other = self.require_parameter(parameter, "different:old_password")
        sibling = context.sibling(other) if context is not None else None
        if value != sibling:
            return None
        return self.message("different", field_name, other=other)
