"""
Built-in validation rules, grouped by family.

Each module defines ValidationRule subclasses with a class-level ``name``.
The rule loader registers every such class from the modules listed under
``rule_modules`` in local-config.yaml.
"""

from .base import FieldContext, FunctionRule, ValidationRule

__all__ = ["FieldContext", "FunctionRule", "ValidationRule"]
