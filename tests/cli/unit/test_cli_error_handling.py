"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from simple_schema_rules.cli import main


def test_missing_required_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["validate", "--instance", "instance.json"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--schema" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["translate", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_missing_schema_file_is_reported_without_traceback(tmp_path: Path, capsys) -> None:
    instance_path = tmp_path / "instance.json"
    instance_path.write_text("{}", encoding="utf-8")

    exit_code = main(
        [
            "validate",
            "--schema",
            str(tmp_path / "missing.json"),
            "--instance",
            str(instance_path),
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Schema file not found" in captured.err
    assert "Traceback" not in captured.err


def test_malformed_instance_is_reported(tmp_path: Path, capsys) -> None:
    schema_path = tmp_path / "schema.json"
    schema_path.write_text("{}", encoding="utf-8")
    instance_path = tmp_path / "instance.json"
    instance_path.write_text("{not json", encoding="utf-8")

    exit_code = main(["validate", "--schema", str(schema_path), "--instance", str(instance_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Invalid instance document" in captured.err


def test_invalid_configuration_is_reported(tmp_path: Path, capsys) -> None:
    schema_path = tmp_path / "schema.json"
    schema_path.write_text("{}", encoding="utf-8")
    instance_path = tmp_path / "instance.json"
    instance_path.write_text("{}", encoding="utf-8")
    config_path = tmp_path / "schema-rules.yaml"
    config_path.write_text("validation:\n  max_depth: -1\n", encoding="utf-8")

    exit_code = main(
        [
            "validate",
            "--schema",
            str(schema_path),
            "--instance",
            str(instance_path),
            "--config",
            str(config_path),
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "validation.max_depth must be greater than zero" in captured.err


def test_invalid_instance_returns_exit_code_one(tmp_path: Path, capsys) -> None:
    schema_path = tmp_path / "schema.json"
    schema_path.write_text('{"type": "string"}', encoding="utf-8")
    instance_path = tmp_path / "instance.json"
    instance_path.write_text("42", encoding="utf-8")

    exit_code = main(["validate", "--schema", str(schema_path), "--instance", str(instance_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "TYPE_MISMATCH <root>: expected string, got number" in captured.out
