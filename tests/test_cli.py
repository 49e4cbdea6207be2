"""Tests for the command-line interface."""

import json
import re

import pytest
import yaml
from click.testing import CliRunner

from regexforge.cli import main


@pytest.fixture
def runner():
    """Create CLI runner."""
    return CliRunner()


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_pattern(self, runner):
        """Test validating a valid pattern."""
        result = runner.invoke(main, ["validate", "-e", r"\d+"])
        assert result.exit_code == 0
        assert "Valid pattern" in result.output

    def test_invalid_pattern(self, runner):
        """Test validating an invalid pattern."""
        result = runner.invoke(main, ["validate", "-e", "["])
        assert result.exit_code == 1
        assert "Invalid pattern" in result.output


class TestExtractCommand:
    """Tests for the extract command."""

    def test_extract_json(self, runner):
        """Test JSON output of extracted matches."""
        result = runner.invoke(
            main, ["extract", "-e", r"(\w)(\d)", "-t", "a1 b2 c3", "-n", "2", "-o", "json"]
        )
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert data["match_count"] == 2
        assert data["matches"] == [["a1", "a", "1"], ["b2", "b", "2"]]

    def test_extract_text(self, runner):
        """Test text output of extracted matches."""
        result = runner.invoke(main, ["extract", "-e", r"\d+", "-t", "99.99999999"])
        assert result.exit_code == 0
        assert "Found 2 matches" in result.output

    def test_extract_with_flag(self, runner):
        """Test extraction with a regex flag."""
        result = runner.invoke(
            main, ["extract", "-e", "abc", "-t", "ABC", "--flag", "ignorecase", "-o", "json"]
        )
        assert json.loads(result.output)["matches"] == [["ABC"]]

    def test_extract_from_file(self, runner, tmp_path):
        """Test extraction from a file."""
        source = tmp_path / "input.txt"
        source.write_text("one 1\ntwo 2\n", encoding="utf-8")

        result = runner.invoke(main, ["extract", "-e", r"\d", "-f", str(source), "-o", "json"])
        assert json.loads(result.output)["match_count"] == 2

    def test_extract_invalid_limit(self, runner):
        """Test that a limit below -1 fails."""
        result = runner.invoke(main, ["extract", "-e", r"\d", "-t", "1", "-n", "-2"])
        assert result.exit_code == 2

    def test_extract_requires_input(self, runner):
        """Test that text or file is required."""
        result = runner.invoke(main, ["extract", "-e", r"\d"])
        assert result.exit_code == 1


class TestScanCommand:
    """Tests for the scan command."""

    def test_scan_bundled_catalog(self, runner):
        """Test scanning with the bundled catalog."""
        result = runner.invoke(main, ["scan", "-t", "192.168.1.1", "-o", "json"])
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert set(data["hits"]) == {"ip.v4.address", "domain.url"}

    def test_scan_custom_catalog(self, runner, tmp_path):
        """Test scanning with a catalog file."""
        catalog_file = tmp_path / "catalog.yml"
        catalog_file.write_text(
            yaml.dump(
                {
                    "namespace": "custom",
                    "entries": [
                        {"name": "ticket", "pattern": r"TCK-\d+"},
                        {"name": "disabled", "pattern": ""},
                    ],
                }
            ),
            encoding="utf-8",
        )

        result = runner.invoke(
            main, ["scan", "-t", "see TCK-12 and TCK-7", "-c", str(catalog_file)]
        )
        assert result.exit_code == 0
        assert "ticket: TCK-12, TCK-7" in result.output
        assert "disabled" not in result.output


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_generate(self, runner):
        """Test generating several strings."""
        result = runner.invoke(
            main, ["generate", "-e", r"\w+@[xyz]+", "-l", "4", "-n", "3", "--seed", "5"]
        )
        assert result.exit_code == 0

        lines = result.output.splitlines()
        assert len(lines) == 3
        assert all(re.fullmatch(r"\w{4}@[xyz]{4}", line) for line in lines)

    def test_generate_invalid_pattern(self, runner):
        """Test generating from an invalid pattern."""
        result = runner.invoke(main, ["generate", "-e", "("])
        assert result.exit_code == 2


class TestRangeCommand:
    """Tests for the range command."""

    def test_range_text(self, runner):
        """Test printing alternatives."""
        result = runner.invoke(main, ["range", "-b", "10", "-c", "lesser"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [r"^\d$"]

    def test_range_json_sql(self, runner):
        """Test JSON output in the SQL dialect."""
        result = runner.invoke(main, ["range", "-b", "10", "-c", "lesser_or_equal", "--sql", "-o", "json"])
        data = json.loads(result.output)
        assert data["alternatives"] == ["10", "^[0-9]$"]
        assert data["sql"] is True

    def test_range_negative_bound(self, runner):
        """Test that a negative bound fails."""
        result = runner.invoke(main, ["range", "-b", "-5"])
        assert result.exit_code == 2


class TestListCatalogCommand:
    """Tests for the list-catalog command."""

    def test_list_catalog(self, runner):
        """Test listing the bundled catalog."""
        result = runner.invoke(main, ["list-catalog"])
        assert result.exit_code == 0
        assert "email.address" in result.output
        assert "(disabled)" in result.output


class TestServeCommand:
    """Tests for the serve command."""

    @pytest.fixture
    def served(self, monkeypatch):
        """Capture uvicorn.run calls instead of starting a server."""
        uvicorn = pytest.importorskip("uvicorn")
        calls = []

        def fake_run(app, **kwargs):
            calls.append((app, kwargs))

        monkeypatch.setattr(uvicorn, "run", fake_run)
        return calls

    @pytest.fixture
    def config_file(self, tmp_path):
        """Write a server configuration file."""
        path = tmp_path / "config.yml"
        path.write_text(
            yaml.dump({"server": {"host": "127.0.0.1", "port": 9123}}), encoding="utf-8"
        )
        return path

    def test_serve_defaults(self, runner, served):
        """Test default host and port without a configuration file."""
        result = runner.invoke(main, ["serve"])
        assert result.exit_code == 0

        _, kwargs = served[0]
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 8080

    def test_serve_uses_config_file(self, runner, served, config_file):
        """Test that host and port come from the configuration file."""
        result = runner.invoke(main, ["serve", "--config", str(config_file)])
        assert result.exit_code == 0
        assert "Starting server on 127.0.0.1:9123" in result.output

        app, kwargs = served[0]
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9123
        assert not isinstance(app, str)

    def test_serve_options_override_config(self, runner, served, config_file):
        """Test that command-line options win over the configuration file."""
        result = runner.invoke(
            main, ["serve", "--config", str(config_file), "--port", "9200", "--host", "localhost"]
        )
        assert result.exit_code == 0

        _, kwargs = served[0]
        assert kwargs["host"] == "localhost"
        assert kwargs["port"] == 9200

    def test_serve_reload_uses_import_string(self, runner, served):
        """Test that reload mode hands uvicorn an import string."""
        result = runner.invoke(main, ["serve", "--reload"])
        assert result.exit_code == 0

        app, kwargs = served[0]
        assert app == "regexforge.server:app"
        assert kwargs["reload"] is True
