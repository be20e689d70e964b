"""
Public API for fieldrules

This is the "front door" - the main entry point for all validation operations.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .config_loader import ConfigLoader
from .exceptions import ValidationException
from .messages import MessageCatalog
from .parser import ExpressionLike, RuleExpression, parse_expression
from .registry import RuleRegistry, get_registry, reset_registry
from .results import ValidationResult
from .rule_executor import MessageOverride, RuleExecutor
from .rule_loader import RuleLoader
from .rules.base import ValidationRule
from .schema import Schema
from .schema_loader import SchemaLoader
from .validation_engine import ValidationEngine

logger = logging.getLogger(__name__)

SchemaSource = Union[Schema, Mapping[str, Any], str]


class ValidationService:
    """
    Main validation service class.

    Wires configuration, the rule registry, the rule executor and the graph
    walker together.

    Example:
        from fieldrules import ValidationService

        service = ValidationService()
        result = service.validate(user, {
            "fields": {
                "username": "required|min:3|max:20",
                "address": {"cascade": {"fields": {"zipCode": "digits:5"}}},
            }
        })
        for error in result:
            print(f"{error.path}: {error.message}")
    """

    def __init__(self, config_path: Optional[str] = None, registry: Optional[RuleRegistry] = None):
        """
        Initialize validation service.

        Without arguments the service shares the process-wide registry built
        from the bundled configuration. With a config_path (or FIELDRULES_CONFIG
        set) it builds a private registry from that configuration.

        Args:
            config_path: Optional YAML override for local-config.yaml
            registry: Optional registry to use as-is (rules already registered)

        Raises:
            FileNotFoundError: If config_path does not exist
            ImportError: If a configured rule module cannot be imported
        """
        self._config_path = config_path
        self._explicit_registry = registry
        self._initialize()

    def _initialize(self):
        """Internal initialization logic (used by __init__ and reload_rules)."""
        self.config_loader = ConfigLoader(self._config_path)
        self.messages = MessageCatalog(self.config_loader.get_messages())

        if self._explicit_registry is not None:
            self.registry = self._explicit_registry
        elif self.config_loader.override_path is None:
            self.registry = get_registry()
        else:
            self.registry = RuleRegistry(self.messages)
            RuleLoader(self.config_loader, self.messages).register_all(self.registry)

        self.executor = RuleExecutor(self.registry)
        self.engine = ValidationEngine(self.executor)
        self.schema_loader = SchemaLoader(timeout=self.config_loader.get_schema_fetch_timeout())

    def validate(self, data: Any, schema: SchemaSource) -> ValidationResult:
        """
        Validate an object graph.

        Args:
            data: Mapping or plain object to validate
            schema: Schema, schema document mapping, or path/URI of a document

        Returns:
            ValidationResult (empty when valid)

        Raises:
            ConfigurationError: If the schema or a rule is misconfigured

        Example:
            result = service.validate({"address": {"zipCode": "12"}},
                                      {"fields": {"address": {"cascade": {"fields": {"zipCode": "digits:5"}}}}})
            result.paths()  # ["address.zipCode"]
        """
        return self.engine.validate(data, self.load_schema(schema))

    def validate_or_raise(self, data: Any, schema: SchemaSource) -> None:
        """
        Validate and raise if anything failed.

        Raises:
            ValidationException: With the full result, when invalid
        """
        result = self.validate(data, schema)
        if not result.is_valid:
            raise ValidationException(result)

    def validate_field(
        self,
        field_name: str,
        value: Any,
        expression: ExpressionLike,
        siblings: Optional[Mapping[str, Any]] = None,
        message: MessageOverride = None,
    ) -> Optional[str]:
        """
        Validate a single value.

        Returns:
            The first failing rule's message, or None when the value passes

        Example:
            service.validate_field("pin", "123", "required|digits:4")
            # "The pin must be exactly 4 digits."
        """
        error = self.executor.validate_field(
            field_name, value, expression, siblings, field_name=field_name, message=message
        )
        return error.message if error is not None else None

    def batch_validate(self, entities: Iterable[Any], schema: SchemaSource,
                       id_fields: List[str]) -> List[Dict[str, Any]]:
        """
        Validate many objects against one schema.

        Args:
            entities: Objects to validate
            schema: Schema applied to every entity (loaded once)
            id_fields: Field names joined with '-' to identify each entity

        Returns:
            One dict per entity, in input order:
                - entity_id: Extracted identifier ("unknown" if none)
                - valid: True when the entity has no errors
                - errors: List of {"path", "message", "rule"} dicts

        Example:
            results = service.batch_validate(users, schema, ["id"])
            for entity_result in results:
                if not entity_result["valid"]:
                    print(entity_result["entity_id"], entity_result["errors"])
        """
        resolved = self.load_schema(schema)
        results = []
        for entity in entities:
            result = self.engine.validate(entity, resolved)
            results.append(
                {
                    "entity_id": self._extract_id(entity, id_fields),
                    "valid": result.is_valid,
                    "errors": result.to_list(),
                }
            )
        return results

    def parse_expression(self, expression: ExpressionLike) -> RuleExpression:
        return parse_expression(expression)

    def resolve_rule(self, name: str) -> ValidationRule:
        return self.registry.resolve(name)

    def register_rule(self, name: str, rule) -> ValidationRule:
        """
        Register a custom rule (ValidationRule instance or function).

        Registering an existing name replaces it. Register rules at startup,
        before validating.
        """
        registered = self.registry.register(name, rule)
        logger.info(f"Registered custom rule '{name}'")
        return registered

    def register_enum(self, name: str, values) -> None:
        """Make a constant set (or Enum class) available as enum:<name>."""
        self.registry.resolve("enum").register_constants(name, values)

    def list_rules(self) -> List[str]:
        return self.registry.names()

    def load_schema(self, schema: SchemaSource) -> Schema:
        if isinstance(schema, Schema):
            return schema
        return self.schema_loader.load(schema)

    def reload_rules(self):
        """
        Re-read configuration and rebuild the rules.

        The process-wide registry is rebuilt as well when it is in use, so
        do not call this while other threads are validating.
        """
        if self._explicit_registry is None and self.config_loader.override_path is None:
            reset_registry()
        self._initialize()

    def _extract_id(self, entity, id_fields):
        """
        Extract entity identifier from entity data.

        Args:
            entity: Mapping or object
            id_fields: List of field names to try

        Returns:
            String identifier (concatenated if multiple fields)
        """
        id_parts = []
        for field in id_fields:
            if isinstance(entity, Mapping):
                value = entity.get(field)
            else:
                value = getattr(entity, field, None)
            if value is not None:
                id_parts.append(str(value))

        if not id_parts:
            return "unknown"

        return "-".join(id_parts)
