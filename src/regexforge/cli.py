"""Command-line interface for regex-forge."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from regexforge import __version__, matching
from regexforge.catalog import load_catalog
from regexforge.engine import Engine
from regexforge.exceptions import RegexForgeError
from regexforge.generator import StringGenerator
from regexforge.matching import UNBOUNDED, is_valid, parse_options
from regexforge.models import Comparison
from regexforge.ranges import SUPPORTED_COMPARISONS, range_regex


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _read_text(text: Optional[str], file: Optional[Path]) -> str:
    if text is None and file is None:
        click.echo("Error: Must provide --text or --file", err=True)
        sys.exit(1)
    if file:
        return file.read_text(encoding="utf-8")
    assert text is not None
    return text


def _fail(error: RegexForgeError) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(2)


flag_option = click.option(
    "--flag",
    "flags",
    multiple=True,
    type=click.Choice(["IGNORECASE", "MULTILINE", "DOTALL", "UNICODE", "VERBOSE", "ASCII"],
                      case_sensitive=False),
    help="Regex flag (can be used multiple times)",
)

output_option = click.option(
    "--output",
    "-o",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format",
)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """regex-forge: Validate, extract and synthesize regular expressions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@main.command()
@click.option("--pattern", "-e", required=True, help="Pattern to validate")
@flag_option
def validate(pattern: str, flags: tuple[str, ...]) -> None:
    """Check whether a pattern compiles."""
    try:
        valid = is_valid(pattern, parse_options(flags))
    except RegexForgeError as e:
        _fail(e)

    if valid:
        click.echo(f"✓ Valid pattern {pattern}")
        sys.exit(0)
    click.echo(f"✗ Invalid pattern {pattern}")
    sys.exit(1)


@main.command()
@click.option("--pattern", "-e", required=True, help="Pattern to search for")
@click.option("--text", "-t", help="Text to search (use --file for file input)")
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, path_type=Path),
    help="File to search",
)
@click.option(
    "--limit",
    "-n",
    type=int,
    default=UNBOUNDED,
    show_default=True,
    help="Maximum number of matches, -1 for all",
)
@flag_option
@output_option
def extract(
    pattern: str,
    text: Optional[str],
    file: Optional[Path],
    limit: int,
    flags: tuple[str, ...],
    output: str,
) -> None:
    """Extract matches and capture groups from text or file."""
    content = _read_text(text, file)

    try:
        found = matching.extract(pattern, parse_options(flags), limit, content)
    except RegexForgeError as e:
        _fail(e)

    if output == "json":
        click.echo(
            json.dumps(
                {
                    "pattern": pattern,
                    "match_count": len(found),
                    "matches": [list(groups) for groups in found],
                },
                indent=2,
            )
        )
    else:
        click.echo(f"Found {len(found)} matches")
        for index, groups in enumerate(found):
            group_preview = ""
            if len(groups) > 1:
                group_preview = " groups: " + ", ".join(repr(g) for g in groups[1:])
            click.echo(f"  {index}: {groups[0]!r}{group_preview}")


@main.command()
@click.option("--text", "-t", help="Text to scan (use --file for file input)")
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, path_type=Path),
    help="File to scan",
)
@click.option(
    "--catalog",
    "-c",
    "catalogs",
    type=click.Path(exists=True, path_type=Path),
    multiple=True,
    help="Catalog files to load (uses the bundled catalog if not specified)",
)
@click.option(
    "--entry",
    "entries",
    multiple=True,
    help="Catalog entries to use (can be used multiple times)",
)
@output_option
def scan(
    text: Optional[str],
    file: Optional[Path],
    catalogs: tuple[Path, ...],
    entries: tuple[str, ...],
    output: str,
) -> None:
    """Find identifiable information in text or file."""
    content = _read_text(text, file)

    catalog_paths = [str(p) for p in catalogs] if catalogs else None
    engine = Engine(load_catalog(paths=catalog_paths))

    try:
        result = engine.scan(content, names=list(entries) if entries else None)
    except RegexForgeError as e:
        _fail(e)

    if output == "json":
        click.echo(
            json.dumps(
                {
                    "match_count": result.match_count,
                    "entries_searched": result.entries_searched,
                    "hits": result.hits,
                },
                indent=2,
            )
        )
    else:
        click.echo(f"Found {len(result.hits)} categories ({result.match_count} matches)")
        for name, found in result.hits.items():
            click.echo(f"  {name}: {', '.join(found)}")


@main.command()
@click.option("--pattern", "-e", required=True, help="Pattern to generate strings for")
@click.option(
    "--max-length",
    "-l",
    type=int,
    default=16,
    show_default=True,
    help="Maximum length of each random value",
)
@click.option("--count", "-n", type=int, default=1, show_default=True, help="Strings to generate")
@click.option("--seed", type=int, help="Random seed for reproducible output")
def generate(pattern: str, max_length: int, count: int, seed: Optional[int]) -> None:
    """Generate example strings matching a pattern."""
    generator = StringGenerator(seed=seed)
    try:
        for _ in range(count):
            click.echo(generator.synthesize(pattern, max_length))
    except RegexForgeError as e:
        _fail(e)


@main.command("range")
@click.option("--bound", "-b", type=int, required=True, help="Bound to compare against")
@click.option(
    "--comparison",
    "-c",
    type=click.Choice([c.value for c in SUPPORTED_COMPARISONS]),
    default=Comparison.LESSER_OR_EQUAL.value,
    show_default=True,
    help="Comparison of matched numbers against the bound",
)
@click.option("--sql", is_flag=True, help="Emit SQL-compatible digit classes")
@output_option
def range_command(bound: int, comparison: str, sql: bool, output: str) -> None:
    """Generate regexes for non-negative integers compared against a bound."""
    try:
        result = range_regex(bound, comparison, sql_dialect=sql)
    except RegexForgeError as e:
        _fail(e)

    if output == "json":
        click.echo(
            json.dumps(
                {
                    "bound": result.bound,
                    "comparison": result.comparison.value,
                    "sql": result.sql_dialect,
                    "alternatives": result.alternatives,
                },
                indent=2,
            )
        )
    else:
        for alternative in result:
            click.echo(alternative)


@main.command()
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to listen on (default: 8080 or server.port from config)",
)
@click.option(
    "--host",
    "-h",
    default=None,
    help="Host to bind to (default: 0.0.0.0 or server.host from config)",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload (development only)",
)
@click.pass_context
def serve(
    ctx: click.Context,
    port: Optional[int],
    host: Optional[str],
    config: Optional[Path],
    reload: bool,
) -> None:
    """Start HTTP server."""
    try:
        import uvicorn
        from regexforge.server import create_app
    except ImportError:
        click.echo(
            "Error: Server dependencies not installed. Install with: pip install regex-forge[server]",
            err=True,
        )
        sys.exit(1)

    # Load config
    config_data = {}
    if config:
        with open(config, "r") as f:
            config_data = yaml.safe_load(f) or {}

    # Override with CLI options
    server_config = config_data.get("server", {})
    if port is None:
        port = server_config.get("port", 8080)
    if host is None:
        host = server_config.get("host", "0.0.0.0")

    click.echo(f"Starting server on {host}:{port}")

    # uvicorn only reloads an application given as an import string, which
    # is built with the default configuration.
    if reload:
        if config:
            click.echo("Warning: --reload serves the default configuration", err=True)
        app = "regexforge.server:app"
    else:
        app = create_app(config_data)

    uvicorn.run(
        app,
        host=host,
        port=port,
        reload=reload,
        log_level="info" if ctx.obj.get("verbose") else "warning",
    )


@main.command()
@click.option(
    "--catalog",
    "-c",
    "catalogs",
    type=click.Path(exists=True, path_type=Path),
    multiple=True,
    help="Catalog files to list",
)
def list_catalog(catalogs: tuple[Path, ...]) -> None:
    """List catalog entries."""
    catalog_paths = [str(p) for p in catalogs] if catalogs else None
    catalog = load_catalog(paths=catalog_paths)

    click.echo(f"Loaded {len(catalog)} entries from {len(catalog.namespaces)} namespaces\n")

    for entry in catalog.entries.values():
        status = "" if entry.pattern else " (disabled)"
        click.echo(f"  {entry.name:<20} {entry.namespace:<15} {entry.description}{status}")


if __name__ == "__main__":
    main()
