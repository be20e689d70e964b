"""
Base interface for validation rules.

A rule is one stateless capability: validate(field_name, value, parameter,
context) returns None when the value passes and an error message when it
fails. Rules are stored by name in a RuleRegistry; adding a rule never
touches existing ones.

Null policy: every rule except the required family returns None for a None
value before looking at its parameter. Presence is the required rule's job,
which is what makes "nullable|email" and "min:3|required" behave.
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple

from ..exceptions import InvalidRuleConfigError
from ..messages import MessageCatalog

_EMPTY_SIBLINGS: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class FieldContext:
    """
    The field being validated plus the raw values of its siblings.

    siblings are the enclosing object's fields at the same nesting level;
    only the field-comparison rules read them.
    """

    field_path: str
    value: Any
    siblings: Mapping[str, Any] = field(default_factory=lambda: _EMPTY_SIBLINGS)

    def sibling(self, name: str) -> Any:
        return self.siblings.get(name)

    def has_sibling(self, name: str) -> bool:
        return name in self.siblings


class ValidationRule(ABC):
    """
    Interface implemented by every rule.

    Subclasses set a class-level ``name`` and implement validate(). The rule
    loader instantiates them with the shared message catalog and the rule
    settings from configuration.
    """

    name: str = ""

    def __init__(self, messages: Optional[MessageCatalog] = None,
                 settings: Optional[Mapping[str, Any]] = None):
        self.messages = messages or MessageCatalog()
        self.settings: Mapping[str, Any] = settings or {}

    def get_name(self) -> str:
        return self.name

    @abstractmethod
    def validate(self, field_name: str, value: Any, parameter: Optional[str],
                 context: Optional[FieldContext] = None) -> Optional[str]:
        """
        Check one value.

        Returns:
            None when the value passes, otherwise the error message

        Raises:
            InvalidRuleConfigError: If the parameter is missing or invalid
        """

    def message(self, key: str, field_name: str, **params: Any) -> str:
        return self.messages.format(key, field=field_name, **params)

    def config_error(self, detail: str) -> InvalidRuleConfigError:
        return InvalidRuleConfigError(f"The '{self.name}' rule {detail}", rule=self.name)

    def require_parameter(self, parameter: Optional[str], usage: str) -> str:
        """Return the stripped parameter or raise if it is absent."""
        if parameter is None or not parameter.strip():
            raise self.config_error(f"requires a parameter (e.g., '{usage}')")
        return parameter.strip()

    def parse_decimal(self, raw: str) -> Decimal:
        number = to_decimal(raw)
        if number is None:
            raise self.config_error(f"parameter must be a number: {raw!r}")
        return number

    def parse_int(self, raw: str) -> int:
        try:
            return int(raw.strip())
        except ValueError:
            raise self.config_error(f"parameter must be a valid integer: {raw!r}") from None

    def split_list(self, parameter: Optional[str], usage: str, minimum: int = 1) -> List[str]:
        raw = self.require_parameter(parameter, usage)
        parts = [part.strip() for part in raw.split(",")]
        if len(parts) < minimum or any(not part for part in parts):
            raise self.config_error(f"parameter is malformed: {raw!r} (e.g., '{usage}')")
        return parts


class FunctionRule(ValidationRule):
    """Adapts a plain function to the rule interface.

    The function may take (field_name, value, parameter) or
    (field_name, value, parameter, context).
    """

    def __init__(self, name: str, func: Callable[..., Optional[str]],
                 messages: Optional[MessageCatalog] = None):
        super().__init__(messages)
        self.name = name
        self.func = func
        self._wants_context = _accepts_context(func)

    def validate(self, field_name, value, parameter, context=None):
        if self._wants_context:
            return self.func(field_name, value, parameter, context)
        return self.func(field_name, value, parameter)

    def __repr__(self) -> str:
        return f"FunctionRule({self.name!r}, {self.func!r})"


def _accepts_context(func: Callable) -> bool:
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = [
        p for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    if any(p.kind == p.VAR_POSITIONAL for p in params):
        return True
    return len(positional) >= 4


# ---------------------------------------------------------------------------
# Value helpers shared by the rule families
# ---------------------------------------------------------------------------


def to_decimal(value: Any) -> Optional[Decimal]:
    """Coerce a value to a finite Decimal, or None if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    if not number.is_finite():
        return None
    return number


def format_number(number: Decimal) -> str:
    """Render a Decimal the way a person would write it (no trailing zeros)."""
    if number == number.to_integral_value():
        return str(number.quantize(Decimal(1)))
    return format(number.normalize(), "f")


def is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset, Mapping))


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if is_collection(value):
        return len(value) == 0
    return False


def stringify(value: Any) -> str:
    """String form used when comparing a sibling against literal parameters."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def split_pair(rule: ValidationRule, parameter: Optional[str], usage: str) -> Tuple[str, str]:
    parts = rule.split_list(parameter, usage, minimum=2)
    if len(parts) != 2:
        raise rule.config_error(f"range must have exactly two values (e.g., '{usage}')")
    return parts[0], parts[1]


def settings_list(settings: Mapping[str, Any], key: str, default: List[str]) -> List[str]:
    values = settings.get(key)
    if not values:
        return list(default)
    return list(values)


def describe_values(values: List[str]) -> str:
    return ", ".join(values)

