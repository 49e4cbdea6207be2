"""Regex alternatives for non-negative integers compared against a bound."""

import logging
from typing import Union

from regexforge.exceptions import InvalidArgumentError
from regexforge.matching import compile_pattern
from regexforge.models import Comparison, RegexAlternativeSet

logger = logging.getLogger(__name__)

DIGIT_CLASS = r"\d"
SQL_DIGIT_CLASS = "[0-9]"

SUPPORTED_COMPARISONS = (Comparison.EQUAL, Comparison.LESSER, Comparison.LESSER_OR_EQUAL)


def _digits_up_to(highest: int, lowest: int = 0) -> str:
    return f"[{lowest}-{highest}]"


def range_regex(
    bound: int,
    comparison: Union[Comparison, str],
    sql_dialect: bool = False,
) -> RegexAlternativeSet:
    """
    Generate regex alternatives for the integers satisfying ``n <comparison> bound``.

    Args:
        bound: Non-negative integer to compare against
        comparison: EQUAL, LESSER or LESSER_OR_EQUAL
        sql_dialect: Use ``[0-9]`` instead of ``\\d`` for unconstrained digits,
                     for SQL regex flavors

    Returns:
        Alternatives of which at least one fully matches the decimal form of
        every satisfying integer, and none matches any other integer

    Raises:
        InvalidArgumentError: If bound is negative or the comparison unsupported
    """
    try:
        comparison = Comparison(comparison)
    except ValueError:
        raise InvalidArgumentError(f"Unknown comparison: {comparison!r}") from None
    if comparison not in SUPPORTED_COMPARISONS:
        raise InvalidArgumentError(
            f"Comparison {comparison.name} is not supported, "
            f"use one of {[c.name for c in SUPPORTED_COMPARISONS]}"
        )
    if isinstance(bound, bool) or not isinstance(bound, int) or bound < 0:
        raise InvalidArgumentError(f"Bound must be a non-negative integer, got {bound!r}")

    any_digit = SQL_DIGIT_CLASS if sql_dialect else DIGIT_CLASS
    value = str(bound)
    digits = [int(c) for c in value]
    k = len(digits)
    alternatives: list[str] = []

    if comparison in (Comparison.EQUAL, Comparison.LESSER_OR_EQUAL):
        alternatives.append(value)

    if comparison in (Comparison.LESSER, Comparison.LESSER_OR_EQUAL):
        # Same length, smaller leading digit. Reducing it to zero gives a
        # shorter number, covered by the length alternatives below.
        if k > 1 and digits[0] > 1:
            alternatives.append(_digits_up_to(digits[0] - 1, lowest=1) + any_digit * (k - 1))

        # Same length, equal prefix, smaller at an interior position
        for i in range(1, k - 1):
            if digits[i] > 0:
                alternatives.append(
                    value[:i] + _digits_up_to(digits[i] - 1) + any_digit * (k - 1 - i)
                )

        # Same length, smaller last digit
        if digits[-1] > 0:
            alternatives.append(value[:-1] + _digits_up_to(digits[-1] - 1))

        # Fewer digits
        for length in range(1, k):
            alternatives.append(f"^{any_digit * length}$")

    for alternative in alternatives:
        compile_pattern(alternative)

    logger.debug(
        f"Synthesized {len(alternatives)} alternatives for n {comparison.symbol} {bound}: "
        f"{alternatives}"
    )
    return RegexAlternativeSet(
        alternatives=alternatives,
        bound=bound,
        comparison=comparison,
        sql_dialect=sql_dialect,
    )
