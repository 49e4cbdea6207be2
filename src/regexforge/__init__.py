"""
regex-forge: A toolkit for validating, extracting and synthesizing regular expressions.

This package provides ordered match extraction, catalog-driven sweeps for
identifiable information, example string synthesis for a restricted regex
grammar, and regex alternatives for numeric comparisons.
"""

__version__ = "0.1.0"

from regexforge.catalog import PatternCatalog, load_catalog
from regexforge.engine import Engine, find_identifiable_information
from regexforge.exceptions import (
    InvalidArgumentError,
    InvalidPatternError,
    MissingInputError,
    RegexForgeError,
)
from regexforge.generator import StringGenerator, synthesize
from regexforge.matching import extract, extract_all, find, is_valid, matches, sweep
from regexforge.models import Comparison, RegexAlternativeSet, ScanResult
from regexforge.ranges import range_regex

__all__ = [
    "Engine",
    "find_identifiable_information",
    "load_catalog",
    "PatternCatalog",
    "StringGenerator",
    "synthesize",
    "is_valid",
    "find",
    "matches",
    "extract",
    "extract_all",
    "sweep",
    "range_regex",
    "Comparison",
    "RegexAlternativeSet",
    "ScanResult",
    "RegexForgeError",
    "InvalidPatternError",
    "InvalidArgumentError",
    "MissingInputError",
]
