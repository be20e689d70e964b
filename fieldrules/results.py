"""Validation result types."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class ValidationError:
    """
    A single path-qualified validation failure.

    path uses '.' for nested objects and '[index]' for collection elements,
    e.g. 'alternateAddresses[0].zipCode'.
    """

    path: str
    message: str
    rule: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "message": self.message, "rule": self.rule}


class ValidationResult:
    """Ordered, immutable collection of ValidationError. Empty means valid."""

    __slots__ = ("_errors",)

    def __init__(self, errors: Iterable[ValidationError] = ()):
        self._errors: Tuple[ValidationError, ...] = tuple(errors)

    @property
    def errors(self) -> Tuple[ValidationError, ...]:
        return self._errors

    @property
    def is_valid(self) -> bool:
        return not self._errors

    def messages(self) -> List[str]:
        return [e.message for e in self._errors]

    def paths(self) -> List[str]:
        return [e.path for e in self._errors]

    def errors_for(self, path: str) -> List[ValidationError]:
        """Return the errors reported at exactly this path."""
        return [e for e in self._errors if e.path == path]

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._errors]

    def to_dict(self) -> Dict[str, List[str]]:
        """Group messages by path, keeping first-seen path order."""
        grouped: Dict[str, List[str]] = {}
        for error in self._errors:
            grouped.setdefault(error.path, []).append(error.message)
        return grouped

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self._errors == other._errors

    def __hash__(self) -> int:
        return hash(self._errors)

    def __repr__(self) -> str:
        return f"ValidationResult({list(self._errors)!r})"
