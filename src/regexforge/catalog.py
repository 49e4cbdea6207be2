"""Pattern catalog for loading and managing named sweep patterns."""

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Optional

import jsonschema
import yaml

from regexforge.exceptions import InvalidArgumentError, InvalidPatternError
from regexforge.matching import compile_pattern
from regexforge.models import CatalogEntry, Examples

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent
DEFAULT_CATALOG_PATHS = [PACKAGE_DIR / "catalogs" / "identifiable.yml"]
SCHEMA_PATH = PACKAGE_DIR / "schemas" / "catalog-schema.json"


class PatternCatalog(Mapping[str, str]):
    """Catalog of named patterns, readable as a name -> pattern text mapping."""

    def __init__(self) -> None:
        """Initialize empty catalog."""
        self.entries: dict[str, CatalogEntry] = {}
        self._version: int = 0

    def add_entry(self, entry: CatalogEntry) -> None:
        """Add an entry, replacing any entry with the same name."""
        if entry.name in self.entries:
            logger.warning(
                f"Catalog entry {entry.name} already exists "
                f"({self.entries[entry.name].full_id}), overwriting with {entry.full_id}"
            )
        self.entries[entry.name] = entry
        self._version += 1

    def get_entry(self, name: str) -> Optional[CatalogEntry]:
        """Get entry by name."""
        return self.entries.get(name)

    def select(self, names: list[str]) -> dict[str, str]:
        """Return the name -> pattern text mapping restricted to ``names``."""
        unknown = [name for name in names if name not in self.entries]
        if unknown:
            raise InvalidArgumentError(f"Catalog entries not found: {', '.join(unknown)}")
        return {name: self.entries[name].pattern for name in names}

    @property
    def namespaces(self) -> list[str]:
        """Get the namespaces entries were loaded from."""
        return sorted({entry.namespace for entry in self.entries.values()})

    @property
    def version(self) -> int:
        """Get current catalog version (increments on changes)."""
        return self._version

    def __getitem__(self, name: str) -> str:
        return self.entries[name].pattern

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        """Return number of entries."""
        return len(self.entries)

    def __repr__(self) -> str:
        """String representation."""
        return f"PatternCatalog(entries={len(self.entries)}, namespaces={self.namespaces})"


def load_catalog(
    paths: Optional[list[str]] = None,
    validate_schema: bool = True,
    validate_examples: bool = True,
) -> PatternCatalog:
    """
    Load catalog entries from YAML files.

    Args:
        paths: List of file paths to load. If None, loads the bundled catalog.
        validate_schema: Whether to validate against JSON schema
        validate_examples: Whether to check examples against patterns

    Returns:
        PatternCatalog with loaded entries

    Raises:
        InvalidPatternError: If a non-empty pattern does not compile
        ValueError: If schema or example validation fails
    """
    catalog = PatternCatalog()
    catalog_paths = [Path(p) for p in paths] if paths is not None else DEFAULT_CATALOG_PATHS

    for path in catalog_paths:
        if not path.exists():
            logger.warning(f"Catalog file not found: {path}")
            continue

        logger.info(f"Loading catalog from {path}")
        data = _load_yaml_file(path)

        if validate_schema:
            _validate_schema(data)

        for entry in _parse_catalog_file(data):
            if validate_examples and entry.examples:
                _validate_examples(entry)
            catalog.add_entry(entry)

    logger.info(f"Loaded {len(catalog)} catalog entries from {len(catalog.namespaces)} namespaces")
    return catalog


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _validate_schema(data: dict[str, Any]) -> None:
    """Validate catalog data against JSON schema."""
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        schema = yaml.safe_load(f)

    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValueError(f"Catalog schema validation failed: {e.message}") from e


def _parse_catalog_file(data: dict[str, Any]) -> list[CatalogEntry]:
    """Parse catalog file data into CatalogEntry objects."""
    namespace = data["namespace"]
    return [_parse_entry(namespace, entry_data) for entry_data in data.get("entries", [])]


def _parse_entry(namespace: str, data: dict[str, Any]) -> CatalogEntry:
    """Parse and pre-compile a single entry."""
    name = data["name"]
    pattern = data.get("pattern") or ""

    # Blank patterns stay in the catalog but are never evaluated
    if pattern:
        try:
            compile_pattern(pattern)
        except InvalidPatternError as e:
            raise InvalidPatternError(pattern, f"catalog entry {namespace}/{name}: {e.reason}") from e

    examples = None
    if "examples" in data:
        examples = Examples(
            match=data["examples"].get("match", []),
            nomatch=data["examples"].get("nomatch", []),
        )

    return CatalogEntry(
        name=name,
        namespace=namespace,
        pattern=pattern,
        description=data.get("description", ""),
        examples=examples,
    )


def _validate_examples(entry: CatalogEntry) -> None:
    """Validate entry examples match/nomatch expectations."""
    if not entry.examples or entry.is_inert:
        return

    compiled = compile_pattern(entry.pattern)
    errors = []

    for example in entry.examples.match:
        if not compiled.fullmatch(example):
            errors.append(f"Example should match but doesn't: '{example}'")

    for example in entry.examples.nomatch:
        if compiled.fullmatch(example):
            errors.append(f"Example should NOT match but does: '{example}'")

    if errors:
        raise ValueError(
            f"Catalog entry {entry.full_id} example validation failed:\n" + "\n".join(errors)
        )

    logger.debug(f"Catalog entry {entry.full_id} examples validated successfully")
