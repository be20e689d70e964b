"""
fieldrules: declarative field validation with rule expressions

Fields are annotated with short rule expressions such as
"required|min:3|max:20"; the engine evaluates each rule against the field's
value and reports human-readable, path-qualified errors
("address.street", "items[2].sku").

This library provides:
- A pipe-delimited rule-expression parser
- ~30 built-in rules and a registry for custom ones
- First-failure-wins evaluation per field
- Recursive validation of nested objects and collections
- Schema documents in YAML or JSON, local or remote

Example:
    from fieldrules import ValidationService

    service = ValidationService()
    result = service.validate({"pin": "12a4"}, {"fields": {"pin": "required|digits:4"}})
    result.to_dict()  # {"pin": ["The pin must contain only digits."]}
"""

from .api import ValidationService
from .exceptions import (
    ConfigurationError,
    InvalidRuleConfigError,
    ParseError,
    SchemaError,
    UnknownRuleError,
    ValidationException,
)
from .parser import RuleExpression, RuleInvocation, parse_expression
from .registry import RuleRegistry, get_registry, reset_registry
from .results import ValidationError, ValidationResult
from .rules.base import FieldContext, ValidationRule
from .schema import FieldSpec, Schema

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "FieldContext",
    "FieldSpec",
    "InvalidRuleConfigError",
    "ParseError",
    "RuleExpression",
    "RuleInvocation",
    "RuleRegistry",
    "Schema",
    "SchemaError",
    "UnknownRuleError",
    "ValidationError",
    "ValidationException",
    "ValidationResult",
    "ValidationRule",
    "ValidationService",
    "get_registry",
    "parse_expression",
    "reset_registry",
]
