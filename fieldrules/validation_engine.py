import logging
from collections.abc import Mapping, Set
from typing import Any, Dict, List, Sequence

from .exceptions import SchemaError
from .results import ValidationError, ValidationResult
from .rule_executor import RuleExecutor
from .schema import Schema

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Walks an object graph against a Schema, collecting path-qualified errors."""

    def __init__(self, executor: RuleExecutor):
        """
        Initialize validation engine.

        Args:
            executor: RuleExecutor evaluating each field's expression
        """
        self.executor = executor

    def validate(self, data: Any, schema: Schema) -> ValidationResult:
        """
        Validate data (a mapping or a plain object) against schema.

        Errors are ordered depth-first in field declaration order: a field's
        own error comes first, then the errors of whatever it cascades into.

        Args:
            data: Root object; None is treated as an object with no fields
            schema: Field rules for the root level

        Returns:
            ValidationResult, empty when everything passed

        Raises:
            ConfigurationError: If any rule is unknown or misconfigured;
                the whole walk stops
        """
        errors: List[ValidationError] = []
        self._walk(data, schema, "", errors)
        if errors:
            logger.debug(f"Validation found {len(errors)} error(s)")
        return ValidationResult(errors)

    def _walk(self, obj: Any, schema: Schema, prefix: str, errors: List[ValidationError]) -> None:
        siblings = self._sibling_values(obj, schema)

        for spec in schema.fields:
            value = siblings.get(spec.name)
            path = f"{prefix}.{spec.name}" if prefix else spec.name

            if spec.rules:
                error = self.executor.validate_field(
                    path, value, spec.rules, siblings,
                    field_name=spec.name, message=spec.message,
                )
                if error is not None:
                    errors.append(error)

            # Cascade does not imply required: a missing nested value is skipped.
            if spec.schema is None or value is None:
                continue

            if is_element_collection(value):
                for index, item in enumerate(_ordered_elements(value, path)):
                    if item is not None:
                        self._walk(item, spec.schema, f"{path}[{index}]", errors)
            else:
                self._walk(value, spec.schema, path, errors)

    def _sibling_values(self, obj: Any, schema: Schema) -> Dict[str, Any]:
        """Raw field values at this level: every key of a mapping, or the instance attributes of an object."""
        if obj is None:
            return {}
        if isinstance(obj, Mapping):
            return dict(obj)
        values = dict(vars(obj)) if hasattr(obj, "__dict__") else {}
        # Declared fields may be properties or slots, which vars() misses.
        for name in schema.field_names():
            values[name] = getattr(obj, name, None)
        return values


def is_element_collection(value: Any) -> bool:
    """Lists, tuples and sets are walked element by element."""
    return isinstance(value, (list, tuple, Set))


def _ordered_elements(value: Any, path: str) -> Sequence[Any]:
    """Index order: sequence order, or sorted order for sets."""
    if not isinstance(value, Set):
        return value
    try:
        return sorted(item for item in value if item is not None)
    except TypeError:
        raise SchemaError(
            "Cannot cascade into a set of unorderable elements; use a list or tuple",
            field_path=path,
        ) from None
