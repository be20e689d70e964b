"""
Tests for the rule-expression parser.
"""
import pytest

from fieldrules import ParseError, RuleExpression, RuleInvocation, parse_expression


class TestBasicParsing:
    """Test splitting expressions into invocations."""

    def test_bare_names(self):
        """Test segments without parameters."""
        expr = parse_expression("required|numeric|distinct")
        assert expr.names() == ("required", "numeric", "distinct")
        assert all(inv.parameter is None for inv in expr)

    def test_parameters(self):
        """Test name:parameter segments keep the raw parameter string."""
        expr = parse_expression("required|between:18,65|in:admin,user,guest")
        assert list(expr) == [
            RuleInvocation("required"),
            RuleInvocation("between", "18,65"),
            RuleInvocation("in", "admin,user,guest"),
        ]

    def test_split_on_first_colon_only(self):
        """Test that colons after the first belong to the parameter."""
        expr = parse_expression(r"regex:^\d{2}:\d{2}$|before:2030-01-01T10:00:00")
        assert expr[0] == RuleInvocation("regex", r"^\d{2}:\d{2}$")
        assert expr[1] == RuleInvocation("before", "2030-01-01T10:00:00")

    def test_order_preserved(self):
        """Test that authored order is evaluation order."""
        expr = parse_expression("min:3|required|max:5")
        assert expr.names() == ("min", "required", "max")

    def test_empty_parameter_is_present_but_empty(self):
        """Test 'digits:' parses to an empty parameter, not a missing one."""
        expr = parse_expression("digits:")
        assert expr[0] == RuleInvocation("digits", "")

    def test_whitespace_around_names(self):
        """Test whitespace around rule names is ignored but parameters are kept as written."""
        expr = parse_expression(" required | min:3 ")
        assert expr.names() == ("required", "min")
        assert expr[1].parameter == "3 "

    def test_unknown_names_are_not_rejected(self):
        """Test that the parser does not consult the registry."""
        expr = parse_expression("no_such_rule:1")
        assert expr[0].name == "no_such_rule"


class TestEmptyExpressions:
    """Test expressions meaning 'no validation'."""

    @pytest.mark.parametrize("expression", [None, "", "   ", [], ()])
    def test_empty(self, expression):
        """Test empty inputs give an empty expression."""
        expr = parse_expression(expression)
        assert len(expr) == 0
        assert expr.serialize() == ""


class TestNullable:
    """Test recognition of the nullable modifier."""

    def test_nullable_detected(self):
        assert parse_expression("nullable|email").nullable is True

    def test_nullable_anywhere(self):
        assert parse_expression("email|nullable").nullable is True

    def test_not_nullable(self):
        assert parse_expression("required|email").nullable is False


class TestSegmentLists:
    """Test list-form expressions."""

    def test_list_form(self):
        """Test each list item is one rule, so parameters may contain pipes."""
        expr = parse_expression(["required", "regex:^(cat|dog)$"])
        assert expr[1] == RuleInvocation("regex", "^(cat|dog)$")

    def test_parsed_expression_passthrough(self):
        """Test an already parsed expression is returned unchanged."""
        expr = parse_expression("required")
        assert parse_expression(expr) is expr


class TestRoundTrip:
    """Test serialize() reproduces the invocation list exactly."""

    @pytest.mark.parametrize("expression", [
        "required|min:3|max:20",
        "nullable|between:18,65",
        "in:admin,user,guest|digits:3,5",
        r"regex:^\d{2}:\d{2}$",
        "digits:",
        "in:a,b ",
        "regex:^a b $",
    ])
    def test_round_trip(self, expression):
        expr = parse_expression(expression)
        assert expr.serialize() == expression
        assert parse_expression(expr.serialize()) == expr

    def test_invocation_serialize(self):
        assert RuleInvocation("min", "3").serialize() == "min:3"
        assert RuleInvocation("required").serialize() == "required"


class TestParseErrors:
    """Test malformed expressions."""

    @pytest.mark.parametrize("expression", [
        "required||min:3",
        "required|",
        "|required",
        ":5",
        "min 3",
    ])
    def test_malformed(self, expression):
        with pytest.raises(ParseError):
            parse_expression(expression)

    def test_wrong_type(self):
        with pytest.raises(ParseError):
            parse_expression(42)

    def test_non_string_segment(self):
        with pytest.raises(ParseError):
            parse_expression(["required", 3])

    def test_parse_error_is_value_error(self):
        """Test ParseError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_expression("a||b")


class TestImmutability:
    """Test parsed expressions can be shared safely."""

    def test_cached_result_is_equal(self):
        assert parse_expression("required|min:3") == parse_expression("required|min:3")

    def test_invocations_are_tuples(self):
        expr = parse_expression("required|min:3")
        assert isinstance(expr.invocations, tuple)
        assert isinstance(expr, RuleExpression)
        with pytest.raises(AttributeError):
            expr[0].name = "other"
