"""
Choice rules: in, enum.

in lists its allowed values inline. enum takes its constants from outside
the expression: either a named constant set registered on the rule at
startup, or the dotted import path of an enum.Enum subclass.
"""

import enum
import importlib
import threading
from typing import Any, Dict, Iterable, List, Tuple, Type, Union

from .base import ValidationRule, describe_values, stringify


class InRule(ValidationRule):
    """
    Usage: in:admin,user,guest

    The value's string form must equal one of the listed items.
    """

    name = "in"

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        allowed = self.split_list(parameter, "in:admin,user,guest")
        if stringify(value) in allowed:
            return None
        return self.message("in", field_name, values=describe_values(allowed))


class EnumRule(ValidationRule):
    """
    Usage:
        enum:OrderStatus              constants registered under that name
        enum:myapp.models.OrderStatus an enum.Enum subclass, imported by path

    A value matches an Enum member itself, a member's name or a member's
    value. Registered constant sets match by equality or string form.
    """

    name = "enum"

    def __init__(self, messages=None, settings=None):
        super().__init__(messages, settings)
        self._constants: Dict[str, Tuple[Any, ...]] = {}
        self._imported: Dict[str, Type[enum.Enum]] = {}
        self._lock = threading.Lock()

    def register_constants(self, name: str, values: Union[Type[enum.Enum], Iterable[Any]]) -> None:
        """Register a constant set (or an Enum class) under a short name."""
        constants = tuple(values)
        if not constants:
            raise self.config_error(f"constant set {name!r} must not be empty")
        with self._lock:
            self._constants[name] = constants

    def constants(self, name: str) -> Tuple[Any, ...]:
        """Resolve a constant-set name or dotted Enum path."""
        if name in self._constants:
            return self._constants[name]
        return tuple(self._import_enum(name))

    def validate(self, field_name, value, parameter, context=None):
        if value is None:
            return None
        source = self.require_parameter(parameter, "enum:OrderStatus")
        constants = self.constants(source)
        if any(_matches(constant, value) for constant in constants):
            return None
        return self.message("enum", field_name, values=describe_values(_labels(constants)))

    def _import_enum(self, path: str) -> Type[enum.Enum]:
        cached = self._imported.get(path)
        if cached is not None:
            return cached

        module_name, _, class_name = path.rpartition(".")
        if not module_name:
            raise self.config_error(f"has no registered constants named {path!r}")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise self.config_error(f"cannot import enum module {module_name!r}: {e}") from e
        enum_class = getattr(module, class_name, None)
        if not (isinstance(enum_class, type) and issubclass(enum_class, enum.Enum)):
            raise self.config_error(f"parameter {path!r} is not an Enum class")

        with self._lock:
            self._imported[path] = enum_class
        return enum_class


def _matches(constant: Any, value: Any) -> bool:
    if isinstance(constant, enum.Enum):
        if value is constant:
            return True
        return value == constant.name or value == constant.value or (
            isinstance(value, str) and value == stringify(constant.value)
        )
    return value == constant or stringify(value) == stringify(constant)


def _labels(constants: Iterable[Any]) -> List[str]:
    return [c.name if isinstance(c, enum.Enum) else stringify(c) for c in constants]
