"""
Rule-expression parser.

A rule expression is a pipe-delimited list of rule invocations:

    "required|min:3|max:20"
    "nullable|between:18,65"
    "regex:^[A-Z]{2}:\\d+$"

Each segment is a bare rule name or "name:parameter". Only the first ':'
separates name from parameter; the rest is handed to the rule unparsed.
Rule names are not checked against the registry here; unknown names fail
at evaluation time so one bad field does not block parsing its siblings.
"""

from functools import lru_cache
from typing import Iterator, NamedTuple, Optional, Sequence, Tuple, Union

from .exceptions import ParseError

NULLABLE = "nullable"


class RuleInvocation(NamedTuple):
    """One parsed rule call: a rule name and its raw parameter string."""

    name: str
    parameter: Optional[str] = None

    def serialize(self) -> str:
        if self.parameter is None:
            return self.name
        return f"{self.name}:{self.parameter}"


class RuleExpression:
    """Immutable, ordered sequence of RuleInvocation."""

    __slots__ = ("_invocations",)

    def __init__(self, invocations: Sequence[RuleInvocation] = ()):
        self._invocations: Tuple[RuleInvocation, ...] = tuple(invocations)

    @property
    def invocations(self) -> Tuple[RuleInvocation, ...]:
        return self._invocations

    @property
    def nullable(self) -> bool:
        return any(inv.name == NULLABLE for inv in self._invocations)

    def names(self) -> Tuple[str, ...]:
        return tuple(inv.name for inv in self._invocations)

    def serialize(self) -> str:
        return "|".join(inv.serialize() for inv in self._invocations)

    def __iter__(self) -> Iterator[RuleInvocation]:
        return iter(self._invocations)

    def __len__(self) -> int:
        return len(self._invocations)

    def __getitem__(self, index):
        return self._invocations[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, RuleExpression):
            return NotImplemented
        return self._invocations == other._invocations

    def __hash__(self) -> int:
        return hash(self._invocations)

    def __repr__(self) -> str:
        return f"RuleExpression({self.serialize()!r})"


EMPTY_EXPRESSION = RuleExpression()

ExpressionLike = Union[None, str, Sequence[str], RuleExpression]


def parse_expression(expression: ExpressionLike) -> RuleExpression:
    """
    Parse a rule expression.

    Args:
        expression: A pipe-delimited string, a sequence of single-rule
            segments (lets a parameter contain '|'), an already parsed
            RuleExpression, or None.

    Returns:
        RuleExpression preserving the authored order

    Raises:
        ParseError: If the expression has the wrong type, an empty segment
            or an empty rule name
    """
    if expression is None:
        return EMPTY_EXPRESSION
    if isinstance(expression, RuleExpression):
        return expression
    if isinstance(expression, str):
        return _parse_string(expression)
    if isinstance(expression, (list, tuple)):
        for segment in expression:
            if not isinstance(segment, str):
                raise ParseError(
                    f"Rule segments must be strings, got {type(segment).__name__}: {segment!r}"
                )
        return _parse_segments(tuple(expression))
    raise ParseError(
        f"Rule expression must be a string or a list of strings, got {type(expression).__name__}"
    )


@lru_cache(maxsize=1024)
def _parse_string(expression: str) -> RuleExpression:
    if not expression.strip():
        return EMPTY_EXPRESSION
    return _parse_segments(tuple(expression.split("|")), expression)


@lru_cache(maxsize=1024)
def _parse_segments(segments: Tuple[str, ...], source: Optional[str] = None) -> RuleExpression:
    source = source if source is not None else "|".join(segments)
    return RuleExpression(_parse_segment(segment, source) for segment in segments)


def _parse_segment(segment: str, source: str) -> RuleInvocation:
    segment = segment.lstrip()
    if not segment:
        raise ParseError(f"Empty rule segment in expression {source!r}")

    # Only the name is trimmed; the parameter is kept exactly as written.
    name, sep, parameter = segment.partition(":")
    name = name.strip()
    if not name:
        raise ParseError(f"Missing rule name in segment {segment!r} of expression {source!r}")
    if any(ch.isspace() for ch in name):
        raise ParseError(f"Rule name {name!r} must not contain whitespace (expression {source!r})")

    return RuleInvocation(name, parameter if sep else None)
