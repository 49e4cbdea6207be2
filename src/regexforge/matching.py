"""Pattern validation, match extraction and catalog sweeps."""

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Optional

from regexforge.exceptions import InvalidArgumentError, InvalidPatternError, MissingInputError
from regexforge.models import MatchSet

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = 0

UNBOUNDED = -1

FLAG_NAMES: dict[str, int] = {
    "IGNORECASE": re.IGNORECASE,
    "MULTILINE": re.MULTILINE,
    "DOTALL": re.DOTALL,
    "UNICODE": re.UNICODE,
    "VERBOSE": re.VERBOSE,
    "ASCII": re.ASCII,
}


def parse_options(flag_names: Optional[Iterable[str]]) -> int:
    """
    Convert flag names into a ``re`` options bitset.

    Args:
        flag_names: Names such as "IGNORECASE" or "MULTILINE" (case-insensitive)

    Returns:
        Combined flag value, 0 when no names are given

    Raises:
        InvalidArgumentError: If a name is not a known flag
    """
    options = DEFAULT_OPTIONS
    for flag_name in flag_names or []:
        try:
            options |= FLAG_NAMES[flag_name.upper()]
        except KeyError:
            raise InvalidArgumentError(f"Unknown regex flag: {flag_name}") from None
    return options


def _require(value: object, name: str) -> None:
    if value is None:
        raise MissingInputError(f"{name} is required")


def compile_pattern(pattern: str, options: int = DEFAULT_OPTIONS) -> re.Pattern:
    """
    Compile pattern text with the given options.

    Raises:
        MissingInputError: If pattern is None
        InvalidArgumentError: If options is negative or an invalid flag combination
        InvalidPatternError: If the pattern does not compile
    """
    _require(pattern, "pattern")
    if options < 0:
        raise InvalidArgumentError(f"Pattern options must not be negative: {options}")

    try:
        return re.compile(pattern, options)
    except re.error as e:
        raise InvalidPatternError(pattern, e.msg) from e
    except (OverflowError, RecursionError) as e:
        # Repetition counts too large or groups nested too deeply for the parser
        raise InvalidPatternError(pattern, str(e)) from e
    except ValueError as e:
        # re rejects some flag combinations, e.g. ASCII with UNICODE
        raise InvalidArgumentError(f"Invalid pattern options {options}: {e}") from e


def is_valid(pattern: str, options: int = DEFAULT_OPTIONS) -> bool:
    """Return True if the pattern compiles. Syntax errors never propagate."""
    try:
        compile_pattern(pattern, options)
    except InvalidPatternError as e:
        logger.debug(f"Invalid regex {pattern!r}: {e.reason}")
        return False
    return True


def _validated(pattern: str, options: int) -> re.Pattern:
    if not is_valid(pattern, options):
        raise InvalidPatternError(pattern)
    return compile_pattern(pattern, options)


def find(pattern: str, options: int, text: str) -> bool:
    """Return True if at least one occurrence of the pattern exists in text."""
    _require(text, "text")
    return _validated(pattern, options).search(text) is not None


def matches(pattern: str, options: int, text: str) -> bool:
    """Return True if the whole text matches the pattern."""
    _require(text, "text")
    return _validated(pattern, options).fullmatch(text) is not None


def extract(pattern: str, options: int, limit: int, text: str) -> MatchSet:
    """
    Get the first ``limit`` occurrences of the pattern in text.

    Args:
        pattern: Pattern text
        options: ``re`` flags
        limit: -1 for every occurrence, 0 for none, otherwise a maximum count
        text: Text to search

    Returns:
        Occurrences in document order, each a tuple of the full match followed
        by the capture groups (None for groups that did not participate)

    Raises:
        MissingInputError: If pattern or text is None
        InvalidPatternError: If the pattern does not compile
        InvalidArgumentError: If limit is below -1
    """
    _require(pattern, "pattern")
    _require(text, "text")
    compiled = _validated(pattern, options)

    if limit < UNBOUNDED:
        raise InvalidArgumentError(f"Match limit must be -1 or greater, got {limit}")
    if limit == 0:
        return []

    found: MatchSet = [
        (regex_match.group(0),) + regex_match.groups() for regex_match in compiled.finditer(text)
    ]

    # Truncate after the full scan so the result never depends on search strategy
    if limit == UNBOUNDED:
        return found
    return found[:limit]


def extract_all(pattern: str, options: int, text: str) -> MatchSet:
    """Get every occurrence of the pattern in text."""
    return extract(pattern, options, UNBOUNDED, text)


def sweep(catalog: Mapping[str, str], text: str) -> dict[str, list[str]]:
    """
    Run every catalog pattern against text.

    Args:
        catalog: Category name to pattern text. Blank patterns are skipped.
        text: Text to sweep

    Returns:
        Category name to the full-match strings found, for categories with at
        least one occurrence only
    """
    _require(catalog, "catalog")
    _require(text, "text")

    hits: dict[str, list[str]] = {}
    for name, pattern in catalog.items():
        if not pattern:
            continue
        if find(pattern, DEFAULT_OPTIONS, text):
            hits[name] = [found[0] for found in extract_all(pattern, DEFAULT_OPTIONS, text)]

    logger.debug(f"Swept {len(catalog)} catalog entries, {len(hits)} categories found")
    return hits
