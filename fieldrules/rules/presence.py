"""
Presence rules: required, required_if, required_unless, nullable.

These are the only rules that look at None values. Every other rule
passes a None value through untouched.
"""

from typing import Optional

from .base import ValidationRule, describe_values, is_blank, stringify


class RequiredRule(ValidationRule):
    """Fails for None, blank strings and empty collections."""

    name = "required"

    def validate(self, field_name, value, parameter, context=None) -> Optional[str]:
        if is_blank(value):
            return self.message("required", field_name)
        return None


class _ConditionalRequiredRule(ValidationRule):
    """Shared parsing for 'other,value1,value2,...' parameters."""

    usage = ""

    def _condition(self, parameter):
        parts = self.split_list(parameter, self.usage, minimum=2)
        return parts[0], parts[1:]

    def _sibling_matches(self, context, other, values) -> bool:
        sibling = context.sibling(other) if context is not None else None
        return stringify(sibling) in values


class RequiredIfRule(_ConditionalRequiredRule):
    """
    Required when another field equals one of the listed values.

    Usage: required_if:payment_type,card
    """

    name = "required_if"
    usage = "required_if:other_field,value"

    def validate(self, field_name, value, parameter, context=None):
        other, values = self._condition(parameter)
        if not is_blank(value):
            return None
        if self._sibling_matches(context, other, values):
            return self.message("required_if", field_name, other=other,
                                values=describe_values(values))
        return None


class RequiredUnlessRule(_ConditionalRequiredRule):
    """
    Required unless another field equals one of the listed values.

    Usage: required_unless:role,guest
    """

    name = "required_unless"
    usage = "required_unless:other_field,value"

    def validate(self, field_name, value, parameter, context=None):
        other, values = self._condition(parameter)
        if not is_blank(value):
            return None
        if not self._sibling_matches(context, other, values):
            return self.message("required_unless", field_name, other=other,
                                values=describe_values(values))
        return None


class NullableRule(ValidationRule):
    """
    Marker consumed by the rule executor: a None value skips the field.

    Registered so that resolving 'nullable' succeeds; on its own it always
    passes.
    """

    name = "nullable"

    def validate(self, field_name, value, parameter, context=None):
        return None
