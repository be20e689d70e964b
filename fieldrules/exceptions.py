"""
Exception types for fieldrules.

Two families never mix:

- ConfigurationError and its subclasses signal a broken schema or rule
  annotation (a programmer mistake). They are always raised.
- ValidationException is only raised by the explicit validate_or_raise()
  entry point. Bad input data is otherwise reported as ValidationError
  entries in a ValidationResult, never raised.
"""

from typing import Optional


class ConfigurationError(Exception):
    """Base class for errors caused by a misconfigured schema or rule."""

    def __init__(self, message: str, rule: Optional[str] = None,
                 field_path: Optional[str] = None):
        super().__init__(message)
        self.rule = rule
        self.field_path = field_path

    def __str__(self) -> str:
        message = super().__str__()
        if self.field_path:
            return f"{message} (field: {self.field_path})"
        return message


class InvalidRuleConfigError(ConfigurationError, ValueError):
    """A rule parameter is missing, malformed or semantically invalid."""


class UnknownRuleError(ConfigurationError, LookupError):
    """No rule is registered under the requested name."""


class ParseError(ConfigurationError, ValueError):
    """A rule expression could not be parsed."""


class SchemaError(ConfigurationError, ValueError):
    """A schema document is malformed or could not be loaded."""


class ValidationException(Exception):
    """Raised by validate_or_raise() when the data has validation failures."""

    def __init__(self, result):
        self.result = result
        count = len(result)
        noun = "error" if count == 1 else "errors"
        first = result.errors[0] if count else None
        summary = f"Validation failed with {count} {noun}"
        if first is not None:
            summary += f"; first: {first.path}: {first.message}"
        super().__init__(summary)
