"""
Explicit field schemas.

A Schema maps field names to rule expressions, in declaration order. The
host builds one in code or loads it from a document; the engine never
discovers rules by inspecting classes.

Document form (YAML or JSON):

    fields:
      username: "required|min:3|max:20"
      email:
        rules: [required, email]
        message: "Please give us an email address we can reach."
      address:
        rules: required
        cascade:
          fields:
            zipCode: "digits:5"
      alternateAddresses:
        cascade:
          fields:
            zipCode: "digits:5"
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from .exceptions import ParseError, SchemaError
from .parser import ExpressionLike, RuleExpression, parse_expression


@dataclass(frozen=True)
class FieldSpec:
    """
    One field's validation settings.

    Attributes:
        name: Key (for mappings) or attribute name (for objects)
        rules: Rule expression for the field's own value
        message: Explicit message, or a mapping of rule name to message
        schema: Nested schema to cascade into; None means no cascade
    """

    name: str
    rules: ExpressionLike = None
    message: Union[None, str, Mapping[str, str]] = None
    schema: Optional["Schema"] = None

    @property
    def expression(self) -> RuleExpression:
        return parse_expression(self.rules)

    @property
    def cascades(self) -> bool:
        return self.schema is not None


@dataclass(frozen=True)
class Schema:
    """Ordered collection of FieldSpec."""

    fields: Tuple[FieldSpec, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise SchemaError(f"Duplicate field names in schema: {', '.join(duplicates)}")

    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def __iter__(self):
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @classmethod
    def from_dict(cls, document: Mapping[str, Any]) -> "Schema":
        """
        Build a Schema from a document mapping.

        The document is {"fields": {...}} at every level, the same shape
        SchemaLoader checks against its meta-schema.

        Raises:
            SchemaError: If the document structure is invalid
        """
        if not isinstance(document, Mapping):
            raise SchemaError(f"Schema document must be a mapping, got {type(document).__name__}")
        if "fields" not in document:
            raise SchemaError("Schema document must have a 'fields' mapping")
        fields = document["fields"]
        if not isinstance(fields, Mapping):
            raise SchemaError("Schema 'fields' must be a mapping of field name to rules")
        return cls(tuple(_field_from_document(name, entry) for name, entry in fields.items()))

    @classmethod
    def of(cls, **fields: Any) -> "Schema":
        """Shorthand: Schema.of(username="required|min:3", address=Schema.of(...))."""
        specs = []
        for name, entry in fields.items():
            if isinstance(entry, Schema):
                specs.append(FieldSpec(name, schema=entry))
            elif isinstance(entry, FieldSpec):
                specs.append(entry if entry.name == name else FieldSpec(
                    name, entry.rules, entry.message, entry.schema))
            else:
                specs.append(_field_from_document(name, entry))
        return cls(tuple(specs))


def _field_from_document(name: Any, entry: Any) -> FieldSpec:
    if not isinstance(name, str) or not name:
        raise SchemaError(f"Field names must be non-empty strings, got {name!r}")

    if entry is None or isinstance(entry, (str, list, tuple)):
        return FieldSpec(name, _checked_rules(name, entry))

    if not isinstance(entry, Mapping):
        raise SchemaError(f"Field '{name}' must be a rule expression or a mapping")

    unknown = set(entry) - {"rules", "message", "cascade"}
    if unknown:
        raise SchemaError(f"Field '{name}' has unknown keys: {', '.join(sorted(unknown))}")

    message = entry.get("message")
    if message is not None and not isinstance(message, (str, Mapping)):
        raise SchemaError(f"Field '{name}' message must be a string or a mapping")

    nested = entry.get("cascade")
    schema = None
    if nested is not None:
        schema = nested if isinstance(nested, Schema) else Schema.from_dict(nested)

    return FieldSpec(name, _checked_rules(name, entry.get("rules")), message, schema)


def _checked_rules(name: str, rules: Any) -> Union[None, str, Sequence[str]]:
    if isinstance(rules, list):
        rules = tuple(rules)
    # Parse now so malformed expressions surface when the schema is built.
    try:
        parse_expression(rules)
    except ParseError as e:
        raise SchemaError(f"Field '{name}': {e}", field_path=name) from e
    return rules
