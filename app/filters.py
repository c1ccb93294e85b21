"""
Filter predicates and the clause compiler.

A ``FilterPredicate`` is the structured form of a query over analysed
strings. It comes from two places: plain query parameters on ``GET /strings``
(may be empty, which matches everything) and the natural-language parser in
``app.nlp`` (always carries at least one constraint).

``compile_filters`` turns a predicate into an ordered tuple of ``Clause``
objects over the stored metrics. The persistence layer maps each clause kind
to a bound-parameter SQL expression; see ``app.crud``.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class InvalidFilterError(ValueError):
    """Raised when a predicate would be structurally invalid."""


@dataclass(frozen=True)
class FilterPredicate:
    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    word_count: Optional[int] = None
    contains_character: Optional[str] = None

    def __post_init__(self):
        if self.contains_character is not None and len(self.contains_character) != 1:
            raise InvalidFilterError(
                f"contains_character must be exactly one character, got {self.contains_character!r}"
            )

    @classmethod
    def from_query_params(
        cls,
        is_palindrome: Optional[bool] = None,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
        word_count: Optional[int] = None,
        contains_character: Optional[str] = None,
    ) -> "FilterPredicate":
        """Build a predicate from request parameters. No parameters is a valid, empty filter."""
        if min_length is not None and max_length is not None and min_length > max_length:
            raise InvalidFilterError(
                f"min_length ({min_length}) is greater than max_length ({max_length})"
            )
        return cls(
            is_palindrome=is_palindrome,
            min_length=min_length,
            max_length=max_length,
            word_count=word_count,
            contains_character=contains_character,
        )

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        """Present fields only, in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


class ClauseKind(str, Enum):
    PALINDROME = "is_palindrome"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    WORD_COUNT = "word_count"
    CONTAINS_CHARACTER = "contains_character"


@dataclass(frozen=True)
class Clause:
    kind: ClauseKind
    column: str
    operator: str
    value: Any

    def __str__(self):
        return f"{self.column} {self.operator} {self.value!r}"


# predicate field -> (clause kind, metrics column, operator)
_CLAUSE_TABLE = (
    ("is_palindrome", ClauseKind.PALINDROME, "is_palindrome", "=="),
    ("min_length", ClauseKind.MIN_LENGTH, "length", ">="),
    ("max_length", ClauseKind.MAX_LENGTH, "length", "<="),
    ("word_count", ClauseKind.WORD_COUNT, "word_count", "=="),
    ("contains_character", ClauseKind.CONTAINS_CHARACTER, "character_frequency_map", "has_key"),
)


def compile_filters(predicate: FilterPredicate) -> Tuple[Clause, ...]:
    """
    Compile a predicate into AND-ed clauses, one per present field.

    Clause order follows field declaration order so the same predicate always
    yields the same plan. An empty predicate compiles to no clauses.
    """
    clauses = []
    for field_name, kind, column, operator in _CLAUSE_TABLE:
        value = getattr(predicate, field_name)
        if value is None:
            continue
        if kind is ClauseKind.CONTAINS_CHARACTER:
            value = value.lower()
        clauses.append(Clause(kind=kind, column=column, operator=operator, value=value))
    return tuple(clauses)
