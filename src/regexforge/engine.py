"""Engine binding a pattern catalog and a string generator."""

import logging
from typing import Optional, Union

from regexforge.catalog import PatternCatalog, load_catalog
from regexforge.generator import StringGenerator
from regexforge.matching import DEFAULT_OPTIONS, UNBOUNDED, extract, is_valid, matches, sweep
from regexforge.models import Comparison, MatchSet, RegexAlternativeSet, ScanResult
from regexforge.ranges import range_regex

logger = logging.getLogger(__name__)


class Engine:
    """
    Entry point shared by the CLI and the HTTP server.

    The engine holds a PatternCatalog for identifiable-information scans and a
    StringGenerator for example synthesis. Every other operation is stateless.
    """

    def __init__(
        self,
        catalog: PatternCatalog,
        generator: Optional[StringGenerator] = None,
        default_max_length: int = 16,
    ) -> None:
        """
        Initialize engine.

        Args:
            catalog: PatternCatalog with loaded entries
            generator: Generator for synthesize(); a fresh unseeded one if None
            default_max_length: Maximum random length when synthesize() gets none
        """
        self.catalog = catalog
        self.generator = generator or StringGenerator()
        self.default_max_length = default_max_length

    def scan(self, text: str, names: Optional[list[str]] = None) -> ScanResult:
        """
        Sweep text with the catalog.

        Args:
            text: Text to scan
            names: Catalog entry names to use. If None, uses every entry.

        Returns:
            ScanResult with the categories found
        """
        selected = self.catalog.select(names) if names is not None else dict(self.catalog)
        hits = sweep(selected, text)
        logger.debug(f"Scan found {len(hits)} of {len(selected)} categories")
        return ScanResult(text=text, hits=hits, entries_searched=list(selected))

    def validate(self, pattern: str, options: int = DEFAULT_OPTIONS) -> bool:
        """Return True if the pattern compiles."""
        return is_valid(pattern, options)

    def matches(self, pattern: str, text: str, options: int = DEFAULT_OPTIONS) -> bool:
        """Return True if the whole text matches the pattern."""
        return matches(pattern, options, text)

    def extract(
        self,
        pattern: str,
        text: str,
        options: int = DEFAULT_OPTIONS,
        limit: int = UNBOUNDED,
    ) -> MatchSet:
        """Get up to ``limit`` occurrences of the pattern with their groups."""
        return extract(pattern, options, limit, text)

    def synthesize(self, pattern: str, max_random_length: Optional[int] = None) -> str:
        """Generate a string matching the pattern."""
        if max_random_length is None:
            max_random_length = self.default_max_length
        return self.generator.synthesize(pattern, max_random_length)

    def range_regex(
        self,
        bound: int,
        comparison: Union[Comparison, str],
        sql_dialect: bool = False,
    ) -> RegexAlternativeSet:
        """Generate regex alternatives for integers compared against bound."""
        return range_regex(bound, comparison, sql_dialect)


def find_identifiable_information(text: str) -> dict[str, list[str]]:
    """Sweep text with the bundled identifiable-information catalog."""
    return sweep(load_catalog(), text)
