"""Unit tests for CLI command behavior."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from migration_converter.application.results import ConversionResult
from migration_converter.cli import cli as cli_module

runner = CliRunner()

PLUGIN_PATH = (
    Path(__file__).resolve().parents[3] / "examples" / "require_to_import_plugin.py"
)


def test_help_shows_commands() -> None:
    """Ensure top-level help lists the available subcommands."""
    result = runner.invoke(cli_module.app, ["--help"])
    assert result.exit_code == 0
    assert "convert" in result.output
    assert "migrations" in result.output


def test_migrations_lists_builtin_and_plugins() -> None:
    """List built-in migrations plus those loaded from a plugin file."""
    result = runner.invoke(
        cli_module.app, ["migrations", "--plugin-module", str(PLUGIN_PATH)]
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.split() == ["cjs-to-esm", "inventory"]


def test_convert_prints_summary(source_tree: Path) -> None:
    """Summarize an inventory run over a project tree."""
    result = runner.invoke(cli_module.app, ["convert", str(source_tree)])
    assert result.exit_code == 0, result.output
    assert "inventory: 0 processed, 5 skipped, 0 error(s), 0 warning(s)" in result.output


def test_convert_json_output(source_tree: Path) -> None:
    """Print a camelCase JSON result when ``--json`` is given."""
    result = runner.invoke(
        cli_module.app,
        ["convert", str(source_tree), "--include", "src/**/*.js", "--json"],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["success"] is True
    assert payload["stats"]["skippedFiles"] == 3
    assert sorted(item["file"]["relativePath"] for item in payload["skippedFiles"]) == [
        "src/index.js",
        "src/index.test.js",
        "src/util/helpers.js",
    ]


def test_convert_forwards_options(monkeypatch: pytest.MonkeyPatch) -> None:
    """Forward parsed CLI options to the API layer."""
    called: dict[str, object] = {}

    def fake_run_migration(source: str, **kwargs: object) -> ConversionResult:
        called["source"] = source
        called.update(kwargs)
        return ConversionResult(success=True)

    import migration_converter.api as api_module

    monkeypatch.setattr(api_module, "run_migration", fake_run_migration)

    result = runner.invoke(
        cli_module.app,
        [
            "convert",
            "./tests",
            "-m",
            "custom",
            "--dry-run",
            "--no-backup",
            "--exclude",
            "**/*.spec.js",
            "--concurrency",
            "3",
            "--config",
            "framework=playwright",
            "--config",
            "retries=2",
            "--config",
            "headless=true",
        ],
    )

    assert result.exit_code == 0, result.output
    assert called["source"] == "./tests"
    assert called["migration"] == "custom"
    assert called["dry_run"] is True
    assert called["backup"] is False
    assert called["exclude"] == ["**/*.spec.js"]
    assert called["concurrency"] == 3
    assert called["config"] == {
        "framework": "playwright",
        "retries": 2,
        "headless": True,
    }
    assert called["listeners"] == []


def test_convert_failure_exits_one(tmp_path: Path) -> None:
    """Exit with status 1 when the run reports errors."""
    missing = tmp_path / "missing"
    result = runner.invoke(cli_module.app, ["convert", str(missing)])
    assert result.exit_code == 1
    assert "CONVERSION_FAILED" in result.output
    assert "Source path does not exist" in result.output


def test_unknown_migration_is_configuration_error(source_tree: Path) -> None:
    """Exit with the configuration exit code for unknown migrations."""
    result = runner.invoke(
        cli_module.app, ["convert", str(source_tree), "-m", "wdio-to-playwright"]
    )
    assert result.exit_code == 2
    assert "Unknown migration 'wdio-to-playwright'" in result.output


def test_bad_config_entry_is_rejected(source_tree: Path) -> None:
    """Reject config overrides without KEY=VALUE form."""
    result = runner.invoke(
        cli_module.app, ["convert", str(source_tree), "--config", "broken"]
    )
    assert result.exit_code == 2
    assert "Invalid config entry" in result.output


def test_progress_events_are_echoed(source_tree: Path) -> None:
    """Print progress events when ``--progress`` is set."""
    result = runner.invoke(
        cli_module.app, ["convert", str(source_tree), "--progress"]
    )
    assert result.exit_code == 0, result.output
    assert "analysis: Starting conversion..." in result.output
    assert "[src/index.js]" in result.output


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("False", False), ("3", 3), ("2.5", 2.5), ("chrome", "chrome")],
)
def test_coerce_option_value(raw: str, expected: object) -> None:
    """Coerce KEY=VALUE values to booleans and numbers when possible."""
    assert cli_module._coerce_option_value(raw) == expected
