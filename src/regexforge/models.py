"""Data models for regex-forge."""

import operator
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, Optional, Union

# Slot 0 is the full occurrence, slots 1..n the capture groups. A slot is
# None when its group did not take part in the match.
MatchResult = tuple[Optional[str], ...]

# Occurrences in document order.
MatchSet = list[MatchResult]


class Comparison(str, Enum):
    """Comparison of a candidate integer against a bound."""

    EQUAL = "equal"
    LESSER = "lesser"
    LESSER_OR_EQUAL = "lesser_or_equal"
    GREATER = "greater"
    GREATER_OR_EQUAL = "greater_or_equal"
    UNEQUAL = "unequal"

    @property
    def symbol(self) -> str:
        """Return the operator symbol, e.g. ``<=``."""
        return _SYMBOLS[self]

    def evaluate(self, candidate: int, bound: int) -> bool:
        """Return True if ``candidate <op> bound`` holds."""
        return _OPERATORS[self](candidate, bound)


_OPERATORS: dict[Comparison, Callable[[int, int], bool]] = {
    Comparison.EQUAL: operator.eq,
    Comparison.LESSER: operator.lt,
    Comparison.LESSER_OR_EQUAL: operator.le,
    Comparison.GREATER: operator.gt,
    Comparison.GREATER_OR_EQUAL: operator.ge,
    Comparison.UNEQUAL: operator.ne,
}

_SYMBOLS: dict[Comparison, str] = {
    Comparison.EQUAL: "==",
    Comparison.LESSER: "<",
    Comparison.LESSER_OR_EQUAL: "<=",
    Comparison.GREATER: ">",
    Comparison.GREATER_OR_EQUAL: ">=",
    Comparison.UNEQUAL: "!=",
}


@dataclass
class Examples:
    """Catalog entry validation examples."""

    match: list[str] = field(default_factory=list)
    nomatch: list[str] = field(default_factory=list)


@dataclass
class CatalogEntry:
    """Named pattern of a catalog."""

    name: str
    namespace: str
    pattern: str
    description: str = ""
    examples: Optional[Examples] = None

    @property
    def full_id(self) -> str:
        """Return full namespace/name identifier."""
        return f"{self.namespace}/{self.name}"

    @property
    def is_inert(self) -> bool:
        """Return True if the entry has no pattern text and is never evaluated."""
        return not self.pattern


@dataclass
class ScanResult:
    """Result from a catalog scan."""

    text: str
    hits: dict[str, list[str]] = field(default_factory=dict)
    entries_searched: list[str] = field(default_factory=list)

    @property
    def has_matches(self) -> bool:
        """Return True if any category was found."""
        return len(self.hits) > 0

    @property
    def match_count(self) -> int:
        """Return number of occurrences over all categories."""
        return sum(len(found) for found in self.hits.values())


@dataclass
class RegexAlternativeSet:
    """
    Regex alternatives describing a set of non-negative integers.

    A value belongs to the set when its decimal representation fully matches
    at least one alternative. The alternatives are never joined into a single
    pattern.
    """

    alternatives: list[str]
    bound: int
    comparison: Comparison
    sql_dialect: bool = False

    def accepts(self, candidate: Union[int, str]) -> bool:
        """Return True if ``candidate`` fully matches some alternative."""
        text = str(candidate)
        return any(re.fullmatch(alternative, text) for alternative in self.alternatives)

    def __iter__(self) -> Iterator[str]:
        return iter(self.alternatives)

    def __len__(self) -> int:
        return len(self.alternatives)
