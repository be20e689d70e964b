"""
Error-message templates.

Messages are the user-facing output of validation, so their shape is kept
stable: "The {field} must be exactly {digits} digits." Templates are plain
str.format strings; configuration can replace any of them by key, and a
schema field can supply its own message which wins over everything.
"""

from typing import Any, Dict, Mapping, Optional, Union

DEFAULT_MESSAGES: Dict[str, str] = {
    # presence
    "required": "The {field} field is required.",
    "required_if": "The {field} field is required when {other} is {values}.",
    "required_unless": "The {field} field is required unless {other} is in {values}.",
    # size
    "min.string": "The {field} must be at least {min} characters.",
    "min.numeric": "The {field} must be at least {min}.",
    "min.array": "The {field} must have at least {min} items.",
    "max.string": "The {field} may not be greater than {max} characters.",
    "max.numeric": "The {field} may not be greater than {max}.",
    "max.array": "The {field} may not have more than {max} items.",
    "size.string": "The {field} must be {size} characters.",
    "size.numeric": "The {field} must be {size}.",
    "size.array": "The {field} must contain {size} items.",
    "size.type": "The {field} must be a string, number or collection.",
    # numeric
    "numeric": "The {field} must be a number.",
    "gt": "The {field} must be greater than {value}.",
    "lt": "The {field} must be less than {value}.",
    "gte": "The {field} must be greater than or equal to {value}.",
    "lte": "The {field} must be less than or equal to {value}.",
    "between": "The {field} must be between {min} and {max}.",
    "digits.non_digit": "The {field} must contain only digits.",
    "digits.exact": "The {field} must be exactly {digits} digits.",
    "digits.between": "The {field} must be between {min} and {max} digits.",
    # format
    "email": "The {field} must be a valid email address.",
    "regex": "The {field} format is invalid.",
    "alpha": "The {field} may only contain letters.",
    "alpha_num": "The {field} may only contain letters and numbers.",
    "url": "The {field} must be a valid URL.",
    "ip": "The {field} must be a valid IP address.",
    "ip.v4": "The {field} must be a valid IPv4 address.",
    "ip.v6": "The {field} must be a valid IPv6 address.",
    "uuid": "The {field} must be a valid UUID.",
    "json": "The {field} must be a valid JSON string.",
    # choice
    "in": "The selected {field} is invalid. Must be one of: {values}.",
    "enum": "The {field} must be one of: {values}.",
    # dates
    "date": "The {field} is not a valid date.",
    "date.format": "The {field} does not match the format {format}.",
    "before": "The {field} must be a date before {date}.",
    "after": "The {field} must be a date after {date}.",
    "future": "The {field} must be a date in the future.",
    "past": "The {field} must be a date in the past.",
    # comparison
    "same": "The {field} and {other} must match.",
    "different": "The {field} and {other} must be different.",
    # collection
    "distinct": "The {field} must not contain duplicate values.",
    "distinct.type": "The {field} must be a collection.",
}


class _KeepMissing(dict):
    """format_map helper that leaves unknown placeholders untouched."""

    def __missing__(self, key):
        return "{" + key + "}"


def render(template: str, **params: Any) -> str:
    """Format a template, leaving placeholders without a value as-is."""
    try:
        return template.format_map(_KeepMissing(params))
    except (ValueError, IndexError, AttributeError):
        # Templates with stray braces or positional fields are shown verbatim.
        return template


class MessageCatalog:
    """Resolves message keys to templates, honouring configured overrides."""

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self._templates: Dict[str, str] = dict(DEFAULT_MESSAGES)
        if overrides:
            self._templates.update(overrides)

    def template(self, key: str) -> str:
        try:
            return self._templates[key]
        except KeyError:
            # Fall back to the family template, e.g. "min.string" -> "min".
            family = key.split(".", 1)[0]
            return self._templates.get(family, "The {field} is invalid.")

    def format(self, key: str, **params: Any) -> str:
        return render(self.template(key), **params)

    def keys(self):
        return self._templates.keys()


def apply_override(override: Union[None, str, Mapping[str, str]], rule_name: str,
                   default: str, field: str, path: str) -> str:
    """
    Pick the message for a failed rule given a field's explicit override.

    The override is either one string used for every rule on the field or
    a mapping from rule name to template.
    """
    if override is None:
        return default
    if isinstance(override, str):
        return render(override, field=field, path=path)
    template = override.get(rule_name)
    if template is None:
        return default
    return render(template, field=field, path=path)
