"""
Example string synthesis for a restricted regex grammar.

The generator rewrites pattern text in a fixed sequence of stages. Each stage
looks for one quantified token kind (a bracketed class, ``.``, ``\\w``,
``\\d`` or ``\\s`` under ``*``, ``+`` or no quantifier) and substitutes
random text that the token accepts.

Not supported: ranges (``a-z``), negated classes, escaped special
characters other than ``\\.``, ``\\S``/``\\W``/``\\D``, lazy quantifiers,
anchors and boundaries. They pass through unmodified, so the result may not
match such patterns.
"""

import logging
import random
import re
import string
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from regexforge.exceptions import InvalidArgumentError, InvalidPatternError, MissingInputError
from regexforge.matching import is_valid

logger = logging.getLogger(__name__)

WORD_CHARACTERS = string.ascii_letters + string.digits + "_"
DIGIT_CHARACTERS = string.digits
WHITESPACE_CHARACTERS = " "


class LengthPolicy(str, Enum):
    """How long a substituted value is, relative to the maximum length."""

    RANDOM = "random"
    MAXIMUM = "maximum"
    SINGLE = "single"


@dataclass(frozen=True)
class TokenRule:
    """
    One rewrite stage.

    ``alphabet`` of None means the characters come from the bracketed class
    captured by the ``members`` group of ``token``.
    """

    name: str
    token: re.Pattern
    policy: LengthPolicy
    alphabet: Optional[str] = None


_CLASS = r"\[(?P<members>[^\[\]\\^-]+)\]"
_BARE = r"(?![*+?{])"
# Escape pairs are consumed whole, so a token is only found outside of them.
_ESCAPED = r"|(?P<escaped>\\.)"


def _token(regex: str) -> re.Pattern:
    return re.compile(regex + _ESCAPED)


def _rules(symbol: str, label: str, alphabet: str) -> list[TokenRule]:
    return [
        TokenRule(f"{label}*", _token(symbol + r"\*"), LengthPolicy.RANDOM, alphabet),
        TokenRule(f"{label}+", _token(symbol + r"\+"), LengthPolicy.MAXIMUM, alphabet),
        TokenRule(label, _token(symbol + _BARE), LengthPolicy.SINGLE, alphabet),
    ]


# Order matters: later stages see the text injected by earlier ones.
PIPELINE: tuple[TokenRule, ...] = (
    TokenRule("[class]*", _token(_CLASS + r"\*"), LengthPolicy.RANDOM),
    TokenRule("[class]+", _token(_CLASS + r"\+"), LengthPolicy.MAXIMUM),
    TokenRule("[class]", _token(_CLASS + _BARE), LengthPolicy.SINGLE),
    *_rules(r"\.", ".", WORD_CHARACTERS),
    *_rules(r"\\w", r"\w", WORD_CHARACTERS),
    *_rules(r"\\d", r"\d", DIGIT_CHARACTERS),
    *_rules(r"\\s", r"\s", WHITESPACE_CHARACTERS),
)


class StringGenerator:
    """
    Synthesizes strings that match a pattern of the supported grammar.

    The randomness source is injected; pass a seeded ``random.Random`` for
    reproducible output. Draws are serialized with a lock so one generator
    can be shared between threads.
    """

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)
        self._lock = threading.Lock()

    def synthesize(self, pattern: str, max_random_length: int) -> str:
        """
        Generate a string matching ``pattern``.

        Args:
            pattern: Pattern text restricted to the supported grammar
            max_random_length: Upper bound for the length of each substituted value

        Returns:
            The rewritten pattern text

        Raises:
            MissingInputError: If pattern is None
            InvalidPatternError: If the pattern does not compile
            InvalidArgumentError: If max_random_length is negative
        """
        if pattern is None:
            raise MissingInputError("pattern is required")
        if not is_valid(pattern):
            raise InvalidPatternError(pattern)
        if max_random_length < 0:
            raise InvalidArgumentError(
                f"Maximum random length must not be negative, got {max_random_length}"
            )

        result = pattern
        for rule in PIPELINE:
            result = self.apply(rule, result, max_random_length)
        return result

    def apply(self, rule: TokenRule, text: str, max_random_length: int) -> str:
        """Replace every occurrence of the rule's token in text."""
        # One value per distinct class literal (or per stage for fixed
        # alphabets), reused for every occurrence of it.
        values: dict[str, str] = {}

        def replace(token_match: re.Match) -> str:
            if token_match.group("escaped"):
                return token_match.group("escaped")
            members = token_match.groupdict().get("members") or ""
            if members not in values:
                alphabet = rule.alphabet if rule.alphabet is not None else members
                values[members] = self.generate(self._length(rule.policy, max_random_length), alphabet)
            return values[members]

        return rule.token.sub(replace, text)

    def generate(self, length: int, alphabet: str) -> str:
        """Return ``length`` characters drawn uniformly from ``alphabet``."""
        with self._lock:
            value = "".join(self.rng.choice(alphabet) for _ in range(length))
        logger.debug(f"Generated {value!r} of length {length} from {alphabet!r}")
        return value

    def _length(self, policy: LengthPolicy, max_random_length: int) -> int:
        if policy == LengthPolicy.SINGLE:
            return 1
        if policy == LengthPolicy.MAXIMUM:
            # One-or-more always uses the full length while zero-or-more is
            # randomized; kept as is since it changes observable output.
            return max_random_length
        with self._lock:
            return self.rng.randint(0, max_random_length)


def synthesize(pattern: str, max_random_length: int, rng: Optional[random.Random] = None) -> str:
    """Generate a string matching ``pattern`` with a per-call generator."""
    return StringGenerator(rng=rng).synthesize(pattern, max_random_length)
