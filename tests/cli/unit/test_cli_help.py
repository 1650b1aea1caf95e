"""CLI smoke tests."""

from click.testing import CliRunner
from simple_schema_rules.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "generate-config" in result.output
    assert "validate" in result.output
    assert "translate" in result.output
    assert "resolve" in result.output
    assert "report" in result.output


def test_validate_help_lists_path_filter() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", "--help"])

    assert result.exit_code == 0
    assert "--schema" in result.output
    assert "--instance" in result.output
    assert "--path" in result.output
