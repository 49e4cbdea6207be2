"""Tests for example string synthesis."""

import random
import re
import threading

import pytest

from regexforge.exceptions import InvalidArgumentError, InvalidPatternError, MissingInputError
from regexforge.generator import (
    DIGIT_CHARACTERS,
    PIPELINE,
    WORD_CHARACTERS,
    StringGenerator,
    synthesize,
)

SUPPORTED_PATTERNS = [
    r"\w",
    r"\w+",
    r"\w*",
    r"\s",
    r"\s+",
    r"\s*",
    r"\d",
    r"\d+",
    r"\d*",
    "[abz]",
    "[abz]*",
    "[abz]+",
    "hello.*",
    ".*",
    "hello.+",
    ".+",
    "hello.",
    ".",
    r"\w+\d+",
    r"\w\d+",
    r"\w\d",
    r"\w+[123]",
    r"\d*[abc]+",
    "a[avc]",
    ".[12345]+",
    r"id_\d+ \w*",
    r"[xyz]+-[xyz]*-\w",
]


@pytest.fixture
def generator():
    """Create a seeded generator."""
    return StringGenerator(seed=1234)


class TestSynthesize:
    """Tests for synthesize functionality."""

    @pytest.mark.parametrize("pattern", SUPPORTED_PATTERNS)
    def test_output_matches_pattern(self, generator, pattern):
        """Test that generated strings match their pattern."""
        for max_length in (1, 5, 100):
            value = generator.synthesize(pattern, max_length)
            assert re.fullmatch(pattern, value), f"{value!r} does not match {pattern!r}"

    def test_one_or_more_uses_max_length(self, generator):
        """Test that one-or-more tokens always get the maximum length."""
        assert len(generator.synthesize(r"\d+", 7)) == 7
        assert len(generator.synthesize("[ab]+", 7)) == 7
        assert generator.synthesize(r"\s+", 3) == "   "

    def test_zero_or_more_stays_within_bounds(self, generator):
        """Test that zero-or-more tokens get at most the maximum length."""
        lengths = {len(generator.synthesize(r"\w*", 4)) for _ in range(200)}

        assert lengths <= {0, 1, 2, 3, 4}
        assert len(lengths) > 1

    def test_single_token_has_length_one(self, generator):
        """Test that unquantified tokens produce one character."""
        value = generator.synthesize("[ab]", 50)

        assert value in ("a", "b")
        assert generator.synthesize(r"\s", 50) == " "

    def test_class_value_shared_by_occurrences(self, generator):
        """Test that repeated class literals get the same value."""
        value = generator.synthesize("[abc]+:[abc]+", 10)

        first, second = value.split(":")
        assert first == second
        assert set(first) <= set("abc")

    def test_distinct_classes_get_own_alphabets(self, generator):
        """Test that every class literal draws from its own members."""
        value = generator.synthesize("[ab]+[xy]+", 10)

        assert set(value[:10]) <= set("ab")
        assert set(value[10:]) <= set("xy")

    def test_alphabets(self, generator):
        """Test the character sets of the fixed-alphabet stages."""
        assert set(generator.synthesize(r"\d+", 50)) <= set(DIGIT_CHARACTERS)
        assert set(generator.synthesize(r"\w+", 50)) <= set(WORD_CHARACTERS)
        assert set(generator.synthesize(".+", 50)) <= set(WORD_CHARACTERS)

    def test_escaped_dot_is_not_a_wildcard(self, generator):
        """Test that an escaped dot is not rewritten by the dot stages."""
        assert generator.synthesize(r"a\.b", 3) == r"a\.b"
        assert generator.synthesize(r"a\.*", 3) == r"a\.*"

    @pytest.mark.parametrize(
        "pattern,shape",
        [
            (r"\\\d", r"\\\\\d"),
            (r"\\.", r"\\\\\w"),
            (r"\\\\\w", r"\\\\\\\\\w"),
            (r"\\[ab]", r"\\\\[ab]"),
        ],
    )
    def test_token_after_escaped_backslash(self, generator, pattern, shape):
        """Test that a token following an escaped backslash is still rewritten."""
        value = generator.synthesize(pattern, 3)

        assert re.fullmatch(shape, value)

    def test_escaped_backslash_before_literal(self, generator):
        """Test that an escaped backslash does not start a token."""
        assert generator.synthesize(r"\\d\\w", 3) == r"\\d\\w"

    def test_unsupported_tokens_pass_through(self, generator):
        """Test that unsupported syntax is left unmodified."""
        assert generator.synthesize("[a-z]+", 5) == "[a-z]+"
        assert generator.synthesize("[^ab]", 5) == "[^ab]"
        assert generator.synthesize(r"\S+", 5) == r"\S+"
        assert generator.synthesize(r"\d{3}", 5) == r"\d{3}"
        assert generator.synthesize("^$", 5) == "^$"

    def test_zero_length(self, generator):
        """Test generation with a maximum length of zero."""
        assert generator.synthesize(r"a\w*b", 0) == "ab"
        assert generator.synthesize(r"\d", 0) in DIGIT_CHARACTERS

    def test_seeded_generators_are_reproducible(self):
        """Test that equal seeds give equal output."""
        first = StringGenerator(seed=7).synthesize(r"\w*[abc]+\d*", 20)
        second = StringGenerator(seed=7).synthesize(r"\w*[abc]+\d*", 20)

        assert first == second

    def test_injected_rng(self):
        """Test that the generator draws from the injected source."""
        rng = random.Random(99)
        expected = StringGenerator(rng=random.Random(99)).synthesize(r"\w+", 12)

        assert synthesize(r"\w+", 12, rng=rng) == expected

    def test_shared_generator_across_threads(self, generator):
        """Test that one generator can serve several threads."""
        results = []

        def worker():
            for _ in range(50):
                results.append(generator.synthesize(r"\w*\d+[xyz]", 8))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 200
        assert all(re.fullmatch(r"\w*\d+[xyz]", value) for value in results)


class TestSynthesizeInvalidInputs:
    """Tests for synthesize argument validation."""

    @pytest.mark.parametrize(
        "pattern,max_length,error",
        [
            (None, 1, MissingInputError),
            ("(", 1, InvalidPatternError),
            ("a{99999999999}", 1, InvalidPatternError),
            (r"\w", -1, InvalidArgumentError),
        ],
    )
    def test_invalid_inputs(self, generator, pattern, max_length, error):
        """Test failures on invalid inputs."""
        with pytest.raises(error):
            generator.synthesize(pattern, max_length)


class TestPipeline:
    """Tests for the rewrite stage order."""

    def test_stage_order(self):
        """Test that stages run classes first, then dot, word, digit, whitespace."""
        names = [rule.name for rule in PIPELINE]

        assert names == [
            "[class]*",
            "[class]+",
            "[class]",
            ".*",
            ".+",
            ".",
            r"\w*",
            r"\w+",
            r"\w",
            r"\d*",
            r"\d+",
            r"\d",
            r"\s*",
            r"\s+",
            r"\s",
        ]

    def test_later_stage_sees_injected_text(self, generator):
        """Test that a dot produced by a class stage is rewritten by the dot stage."""
        value = generator.synthesize("[.]", 5)

        assert len(value) == 1
        assert value in WORD_CHARACTERS
