import logging
import time
from typing import Any, Mapping, Optional, Union

from .exceptions import ConfigurationError
from .messages import apply_override
from .parser import NULLABLE, ExpressionLike, parse_expression
from .results import ValidationError
from .rules.base import FieldContext

logger = logging.getLogger(__name__)

MessageOverride = Union[None, str, Mapping[str, str]]


class RuleExecutor:
    """Runs one field's rule expression in order; the first failure wins."""

    def __init__(self, registry):
        """
        Initialize rule executor.

        Args:
            registry: RuleRegistry used to resolve rule names
        """
        self.registry = registry

    def validate_field(
        self,
        field_path: str,
        value: Any,
        expression: ExpressionLike,
        siblings: Optional[Mapping[str, Any]] = None,
        field_name: Optional[str] = None,
        message: MessageOverride = None,
    ) -> Optional[ValidationError]:
        """
        Validate one value against a rule expression.

        Rules run in the authored order and are never reordered. With
        'nullable' in the expression a None value passes without running
        anything else.

        Args:
            field_path: Path reported in the error (e.g. "items[2].sku")
            value: The field's runtime value
            expression: Rule expression string, segment list or RuleExpression
            siblings: Raw values of the other fields at the same level
            field_name: Name used inside messages (defaults to field_path)
            message: Explicit message overriding the rule's default, either
                one template or a mapping of rule name to template

        Returns:
            ValidationError for the first failing rule, or None

        Raises:
            ConfigurationError: On an unknown rule or an invalid parameter;
                the field path is attached before re-raising
        """
        parsed = parse_expression(expression)
        if value is None and parsed.nullable:
            return None

        name = field_name or field_path
        context = FieldContext(field_path, value, siblings if siblings is not None else {})

        for invocation in parsed:
            if invocation.name == NULLABLE:
                continue

            start = time.perf_counter()
            try:
                rule = self.registry.resolve(invocation.name)
                error = rule.validate(name, value, invocation.parameter, context)
            except ConfigurationError as e:
                if e.field_path is None:
                    e.field_path = field_path
                if e.rule is None:
                    e.rule = invocation.name
                logger.error(f"Rule configuration error on field '{field_path}': {e}")
                raise
            elapsed_ms = round((time.perf_counter() - start) * 1000, 3)
            logger.debug(
                f"{field_path}: {invocation.serialize()} -> "
                f"{'FAIL' if error is not None else 'PASS'} ({elapsed_ms} ms)"
            )

            if error is not None:
                text = apply_override(message, invocation.name, error, name, field_path)
                return ValidationError(field_path, text, invocation.name)

        return None
