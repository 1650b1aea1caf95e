"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import click
import yaml

from simple_schema_rules.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from simple_schema_rules.error_reporting import detailed_errors, specific_errors
from simple_schema_rules.reference_resolution import resolve_all_references
from simple_schema_rules.results_writing import (
    InstanceOutcome,
    RunMetadata,
    write_failure_report,
)
from simple_schema_rules.rule_translation import translate
from simple_schema_rules.schema_documents import RootSchema, SchemaError, load_schema_file

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="simple-schema-rules")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level for library diagnostics written to stderr",
)
def cli(log_level: str) -> None:
    """JSON Schema validation and rule translation utility."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML validation configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML validation configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="validate")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the JSON or YAML schema document",
)
@click.option(
    "--instance",
    "instance_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the JSON or YAML document to validate",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional YAML validation configuration file",
)
@click.option(
    "--path",
    "target_path",
    required=False,
    help="Only report failures at or below this path (e.g. tags[0] or /tags/0)",
)
def validate_instance(
    schema_path: str, instance_path: str, config_path: str | None, target_path: str | None
) -> None:
    """Validate one instance document and print its failures."""
    try:
        root = load_schema_file(schema_path)
        instance = _load_instance(instance_path)
        configuration = _load_optional_configuration(config_path)
        if target_path is None:
            failures = detailed_errors(
                instance,
                root.document,
                configuration.custom_formats(),
                root,
                settings=configuration.validation,
            )
        else:
            failures = specific_errors(
                instance,
                root.document,
                target_path,
                configuration.custom_formats(),
                root,
                settings=configuration.validation,
            )
    except (ConfigurationError, SchemaError) as exc:
        raise CliError(str(exc)) from exc

    if not failures:
        click.echo("valid")
        return
    for failure in failures:
        click.echo(f"{failure.code.value} {failure.describe()}")
    click.get_current_context().exit(1)


@cli.command(name="translate")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the JSON or YAML schema document",
)
def translate_schema(schema_path: str) -> None:
    """Print the rule records derived from a schema as JSON."""
    try:
        root = load_schema_file(schema_path)
        records = translate(root)
    except SchemaError as exc:
        raise CliError(str(exc)) from exc
    click.echo(json.dumps([record.to_dict() for record in records], indent=2))


@cli.command(name="resolve")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the JSON or YAML schema document",
)
def resolve_references(schema_path: str) -> None:
    """Print the schema with every in-document reference inlined."""
    try:
        root = load_schema_file(schema_path)
        inlined = resolve_all_references(root.document, root)
    except SchemaError as exc:
        raise CliError(str(exc)) from exc
    click.echo(json.dumps(inlined, indent=2))


@cli.command(name="report")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the JSON or YAML schema document",
)
@click.option(
    "--instance",
    "instance_paths",
    required=True,
    multiple=True,
    type=click.Path(path_type=str),
    help="Instance document to validate; repeat for several documents",
)
@click.option(
    "--output",
    "output_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the failure report workbook to write",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional YAML validation configuration file",
)
def report(
    schema_path: str, instance_paths: tuple[str, ...], output_path: str, config_path: str | None
) -> None:
    """Validate several instance documents and write a failure report workbook."""
    run_start = datetime.now(UTC)
    try:
        root = load_schema_file(schema_path)
        configuration = _load_optional_configuration(config_path)
        outcomes = [
            _collect_outcome(path, root, configuration) for path in instance_paths
        ]
        written = write_failure_report(
            output_path,
            Path(schema_path).read_text(encoding="utf-8"),
            outcomes,
            RunMetadata(
                run_start=run_start,
                schema_path=Path(schema_path),
                output_path=Path(output_path),
            ),
        )
    except (ConfigurationError, SchemaError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(written.resolve()))


def _collect_outcome(
    instance_path: str, root: RootSchema, configuration: Configuration
) -> InstanceOutcome:
    failures = detailed_errors(
        _load_instance(instance_path),
        root.document,
        configuration.custom_formats(),
        root,
        settings=configuration.validation,
    )
    return InstanceOutcome(instance_name=instance_path, failures=tuple(failures))


def _load_optional_configuration(config_path: str | None) -> Configuration:
    if config_path is None:
        return Configuration(path=None)
    return load_configuration(config_path)


def _load_instance(instance_path: str) -> Any:
    path = Path(instance_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CliError(f"Cannot read instance document {path}: {exc}") from exc
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CliError(f"Invalid instance document {path}: {exc}") from exc


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        result = cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
