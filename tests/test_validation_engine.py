"""
Tests for ValidationEngine (the nested-object path walker).
"""
from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from fieldrules import (
    FieldSpec,
    InvalidRuleConfigError,
    Schema,
    SchemaError,
    UnknownRuleError,
    get_registry,
    reset_registry,
)
from fieldrules.rule_executor import RuleExecutor
from fieldrules.validation_engine import ValidationEngine

ADDRESS = Schema.of(street="required", zipCode="digits:5")


@dataclass
class Address:
    street: Optional[str] = None
    zipCode: Optional[str] = None


@dataclass
class User:
    name: Optional[str] = None
    address: Optional[Address] = None
    alternateAddresses: List[Address] = field(default_factory=list)


@pytest.fixture(scope="module")
def engine():
    """Create a ValidationEngine over the built-in rules."""
    reset_registry()
    return ValidationEngine(RuleExecutor(get_registry()))


@pytest.fixture
def user_schema():
    """Schema with a nested object and a collection."""
    return Schema((
        FieldSpec("name", "required|min:3"),
        FieldSpec("address", schema=ADDRESS),
        FieldSpec("alternateAddresses", schema=ADDRESS),
    ))


class TestFlatValidation:
    """Test a single level of fields."""

    def test_valid(self, engine):
        result = engine.validate({"name": "alice"}, Schema.of(name="required|min:3"))
        assert result.is_valid
        assert len(result) == 0

    def test_errors_in_declaration_order(self, engine):
        schema = Schema.of(b="required", a="required", c="required")
        result = engine.validate({}, schema)
        assert result.paths() == ["b", "a", "c"]

    def test_one_error_per_field(self, engine):
        result = engine.validate({"code": "x"}, Schema.of(code="min:3|digits:4"))
        assert len(result) == 1

    def test_none_root(self, engine):
        result = engine.validate(None, Schema.of(name="required"))
        assert result.paths() == ["name"]


class TestNestedCascade:
    """Test cascading into a nested object."""

    def test_nested_error_path(self, engine):
        schema = Schema.of(address=Schema.of(zipCode="digits:5"))
        result = engine.validate({"address": {"zipCode": "12"}}, schema)
        assert result.paths() == ["address.zipCode"]
        assert result.errors[0].message == "The zipCode must be exactly 5 digits."

    def test_null_nested_object_skipped(self, engine, user_schema):
        """Test cascade does not imply required."""
        result = engine.validate({"name": "alice", "address": None}, user_schema)
        assert result.is_valid

    def test_cascade_with_own_rules(self, engine):
        schema = Schema((FieldSpec("address", "required", schema=ADDRESS),))
        result = engine.validate({}, schema)
        assert result.paths() == ["address"]

    def test_deep_nesting(self, engine):
        schema = Schema.of(a=Schema.of(b=Schema.of(c="required")))
        result = engine.validate({"a": {"b": {}}}, schema)
        assert result.paths() == ["a.b.c"]


class TestCollectionCascade:
    """Test cascading into each element of a collection."""

    def test_index_in_path(self, engine, user_schema):
        data = {
            "name": "alice",
            "alternateAddresses": [
                {"street": "Main", "zipCode": "12345"},
                {"street": "Side", "zipCode": "bad"},
            ],
        }
        result = engine.validate(data, user_schema)
        assert result.paths() == ["alternateAddresses[1].zipCode"]
        assert result.errors_for("alternateAddresses[0].zipCode") == []

    def test_null_collection_skipped(self, engine, user_schema):
        result = engine.validate({"name": "alice", "alternateAddresses": None}, user_schema)
        assert result.is_valid

    def test_null_elements_skipped(self, engine, user_schema):
        data = {"name": "alice", "alternateAddresses": [None, {"street": None, "zipCode": "12345"}]}
        assert engine.validate(data, user_schema).paths() == ["alternateAddresses[1].street"]

    def test_collection_rules_and_elements(self, engine):
        schema = Schema((FieldSpec("items", "required|min:1", schema=Schema.of(sku="required")),))
        result = engine.validate({"items": [{"sku": "A"}, {}, {"sku": None}]}, schema)
        assert result.paths() == ["items[1].sku", "items[2].sku"]


class TestOrdering:
    """Test depth-first, declaration-order error ordering."""

    def test_nested_errors_follow_their_field(self, engine, user_schema):
        data = {
            "name": None,
            "address": {"street": None, "zipCode": "1"},
            "alternateAddresses": [{"street": None, "zipCode": "1"}],
        }
        result = engine.validate(data, user_schema)
        assert result.paths() == [
            "name",
            "address.street",
            "address.zipCode",
            "alternateAddresses[0].street",
            "alternateAddresses[0].zipCode",
        ]

    def test_deterministic(self, engine, user_schema):
        data = {"name": None, "address": {"zipCode": "1"}}
        assert engine.validate(data, user_schema) == engine.validate(data, user_schema)


class TestObjects:
    """Test plain objects are read by attribute."""

    def test_dataclass_graph(self, engine, user_schema):
        user = User(
            name="al",
            address=Address(street="Main", zipCode="12345"),
            alternateAddresses=[Address(street="Side", zipCode="99")],
        )
        result = engine.validate(user, user_schema)
        assert result.paths() == ["name", "alternateAddresses[0].zipCode"]

    def test_object_siblings(self, engine):
        @dataclass
        class Signup:
            password: str
            confirm: str

        schema = Schema.of(password="required", confirm="same:password")
        assert engine.validate(Signup("secret", "secret"), schema).is_valid
        assert engine.validate(Signup("secret", "other"), schema).paths() == ["confirm"]


class TestSiblingScope:
    """Test comparison rules only see fields at the same nesting level."""

    def test_same_level_siblings(self, engine):
        schema = Schema.of(
            password="required",
            profile=Schema.of(confirm="same:password"),
        )
        data = {"password": "secret", "profile": {"confirm": "secret"}}
        result = engine.validate(data, schema)
        assert result.paths() == ["profile.confirm"]

    def test_undeclared_mapping_keys_are_siblings(self, engine):
        schema = Schema.of(card_number="required_if:payment_type,card")
        result = engine.validate({"payment_type": "card"}, schema)
        assert result.paths() == ["card_number"]

    def test_undeclared_object_attributes_are_siblings(self, engine):
        """Test objects and mappings with the same fields give the same result."""
        class Payment:
            def __init__(self, payment_type, card_number=None):
                self.payment_type = payment_type
                self.card_number = card_number

        schema = Schema.of(card_number="required_if:payment_type,card")
        as_object = engine.validate(Payment("card"), schema)
        as_mapping = engine.validate({"payment_type": "card", "card_number": None}, schema)
        assert as_object.paths() == as_mapping.paths() == ["card_number"]
        assert engine.validate(Payment("cash"), schema).is_valid


@dataclass(frozen=True, order=True)
class Tag:
    code: str


@dataclass(frozen=True)
class Label:
    code: str


class TestSetCascade:
    """Test sets are walked in a stable order."""

    def test_sorted_order(self, engine):
        schema = Schema.of(tags=Schema.of(code="min:2"))
        result = engine.validate({"tags": {Tag("x"), Tag("aa"), Tag("b")}}, schema)
        assert result.paths() == ["tags[1].code", "tags[2].code"]
        assert result.messages() == [
            "The code must be at least 2 characters.",
            "The code must be at least 2 characters.",
        ]

    def test_unorderable_elements(self, engine):
        schema = Schema.of(labels=Schema.of(code="required"))
        with pytest.raises(SchemaError) as exc_info:
            engine.validate({"labels": {Label("a"), Label("b")}}, schema)
        assert exc_info.value.field_path == "labels"


class TestConfigurationErrorsAbortWalk:
    """Test configuration errors are raised, not collected."""

    def test_unknown_rule_in_nested_field(self, engine):
        schema = Schema.of(address=Schema.of(zipCode="postcode"))
        with pytest.raises(UnknownRuleError) as exc_info:
            engine.validate({"address": {"zipCode": "12345"}}, schema)
        assert exc_info.value.field_path == "address.zipCode"

    def test_invalid_parameter(self, engine):
        schema = Schema.of(a="required", pin="digits:5,3")
        with pytest.raises(InvalidRuleConfigError):
            engine.validate({"a": None, "pin": "1234"}, schema)


class TestMessageOverride:
    """Test per-field messages from the schema."""

    def test_field_message(self, engine):
        schema = Schema((FieldSpec("zip", "digits:5", message="Enter a five digit ZIP code."),))
        result = engine.validate({"zip": "12"}, schema)
        assert result.messages() == ["Enter a five digit ZIP code."]
