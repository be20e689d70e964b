"""
Rule Registry - name -> rule implementation lookup.

The registry is the only state shared between validation calls. It is
populated once at startup (built-in rules, then any custom rules) and only
read while validating: writes take a lock, reads do not.

Registering a name that already exists replaces the previous rule; the last
registration wins.

Usage:
    registry = get_registry()          # process-wide, built-ins loaded
    registry.register("even", lambda field, value, param: ...)

    @registry.rule("slug")
    def slug(field, value, parameter):
        ...

Testing:
    reset_registry()
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Union

from .exceptions import UnknownRuleError
from .rules.base import FunctionRule, ValidationRule

logger = logging.getLogger(__name__)

RuleLike = Union[ValidationRule, Callable]


class RuleRegistry:
    """Maps rule names to ValidationRule instances."""

    def __init__(self, messages=None):
        """
        Initialize an empty registry.

        Args:
            messages: MessageCatalog handed to plain functions wrapped as rules
        """
        self._rules: Dict[str, ValidationRule] = {}
        self._lock = threading.Lock()
        self._messages = messages

    def register(self, name_or_rule: Union[str, ValidationRule],
                 rule: Optional[RuleLike] = None) -> ValidationRule:
        """
        Register a rule.

        Accepts register(rule_instance), register(name, rule_instance) or
        register(name, function).

        Returns:
            The registered ValidationRule

        Raises:
            TypeError: If the arguments do not describe a rule
            ValueError: If no name can be determined
        """
        if rule is None:
            if not isinstance(name_or_rule, ValidationRule):
                raise TypeError("register(rule) expects a ValidationRule instance")
            rule = name_or_rule
            name = rule.get_name()
        else:
            name = name_or_rule

        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Rule name must be a non-empty string, got {name!r}")
        name = name.strip()

        if not isinstance(rule, ValidationRule):
            if not callable(rule):
                raise TypeError(f"Rule {name!r} must be a ValidationRule or a callable")
            rule = FunctionRule(name, rule, self._messages)

        with self._lock:
            if name in self._rules:
                logger.debug(f"Rule '{name}' re-registered; replacing {self._rules[name]!r}")
            self._rules[name] = rule
        return rule

    def rule(self, name: str) -> Callable[[Callable], Callable]:
        """Decorator form of register() for plain functions."""
        def decorator(func: Callable) -> Callable:
            self.register(name, func)
            return func
        return decorator

    def unregister(self, name: str) -> None:
        with self._lock:
            self._rules.pop(name, None)

    def resolve(self, name: str) -> ValidationRule:
        """
        Look up a rule by name.

        Raises:
            UnknownRuleError: If nothing is registered under name
        """
        try:
            return self._rules[name]
        except KeyError:
            raise UnknownRuleError(f"Unknown validation rule: '{name}'", rule=name) from None

    def names(self) -> List[str]:
        return sorted(self._rules)

    def __contains__(self, name: str) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)


_registry: Optional[RuleRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> RuleRegistry:
    """Get or initialize the process-wide registry with the built-in rules."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                from .config_loader import ConfigLoader
                from .messages import MessageCatalog
                from .rule_loader import RuleLoader

                config_loader = ConfigLoader()
                messages = MessageCatalog(config_loader.get_messages())
                registry = RuleRegistry(messages)
                RuleLoader(config_loader, messages).register_all(registry)
                _registry = registry
    return _registry


def reset_registry() -> None:
    """Reset the process-wide registry (for testing)."""
    global _registry
    with _registry_lock:
        _registry = None
