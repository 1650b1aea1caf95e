"""Scenario-style integration tests for core validation behaviors."""

from __future__ import annotations

import os
import re
import subprocess
import sys
from pathlib import Path
from typing import Any

from simple_schema_rules.chain_emission import emit, register_rules
from simple_schema_rules.direct_validation import validate
from simple_schema_rules.error_reporting import FailureCode, detailed_errors
from simple_schema_rules.rule_translation import translate
from simple_schema_rules.schema_documents import load_schema_document

ORDER_SCHEMA_TEXT = """
{
  "$defs": {
    "line": {
      "type": "object",
      "properties": {
        "sku": {"type": "string", "pattern": "^[A-Z]{3}-[0-9]+$"},
        "quantity": {"type": "integer", "exclusiveMinimum": 0}
      },
      "required": ["sku", "quantity"]
    }
  },
  "type": "object",
  "properties": {
    "id": {"type": "string", "format": "uuid"},
    "customer": {"type": ["string", "null"]},
    "lines": {"type": "array", "minItems": 1, "items": {"$ref": "#/$defs/line"}}
  },
  "required": ["id", "lines"],
  "additionalProperties": false
}
"""

VALID_ORDER = {
    "id": "123e4567-e89b-42d3-a456-426614174000",
    "customer": None,
    "lines": [{"sku": "ABC-1", "quantity": 2}],
}


class _PredicateChain:
    """Minimal chain that evaluates the rules it was given."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self.checks: list[Any] = []
        self.is_required = False
        self.is_nullable = False

    def required(self) -> _PredicateChain:
        self.is_required = True
        return self

    def nullable(self) -> _PredicateChain:
        self.is_nullable = True
        return self

    def min(self, value: Any, *, exclusive: bool = False) -> _PredicateChain:
        if self.kind == "string":
            self.checks.append(lambda data: len(data) >= value)
        elif exclusive:
            self.checks.append(lambda data: data > value)
        else:
            self.checks.append(lambda data: data >= value)
        return self

    def integer(self) -> _PredicateChain:
        self.checks.append(lambda data: float(data).is_integer())
        return self

    def min_items(self, count: int) -> _PredicateChain:
        self.checks.append(lambda data: len(data) >= count)
        return self

    def uuid(self) -> _PredicateChain:
        self.checks.append(lambda data: len(data) == 36)
        return self

    def pattern(self, regex: str) -> _PredicateChain:
        self.checks.append(lambda data: re.search(regex, data) is not None)
        return self

    def items(self, chain: _PredicateChain) -> _PredicateChain:
        self.checks.append(lambda data: all(chain.accepts(item) for item in data))
        return self

    def custom(self, predicate: Any) -> _PredicateChain:
        self.checks.append(predicate)
        return self

    def accepts(self, data: Any) -> bool:
        if data is None:
            return self.is_nullable
        return all(check(data) for check in self.checks)


class _PredicateBuilder:
    def string(self) -> _PredicateChain:
        return _PredicateChain("string")

    def number(self) -> _PredicateChain:
        return _PredicateChain("number")

    def array(self) -> _PredicateChain:
        return _PredicateChain("array")

    def object(self) -> _PredicateChain:
        return _PredicateChain("object")

    def any(self) -> _PredicateChain:
        return _PredicateChain("any")


class _FieldCollector:
    def __init__(self) -> None:
        self.fields: dict[str, _PredicateChain] = {}
        self.is_strict = False

    def field(self, path: str, definition: Any) -> _FieldCollector:
        self.fields[path] = definition(_PredicateBuilder())
        return self

    def strict(self) -> _FieldCollector:
        self.is_strict = True
        return self


def test_given_valid_order_when_validating_then_direct_and_detailed_results_agree() -> None:
    root = load_schema_document(ORDER_SCHEMA_TEXT)

    assert validate(VALID_ORDER, root.document, root_schema=root) is True
    assert detailed_errors(VALID_ORDER, root.document, root_schema=root) == []


def test_given_broken_order_line_when_collecting_errors_then_paths_point_into_the_array() -> None:
    root = load_schema_document(ORDER_SCHEMA_TEXT)
    order = {**VALID_ORDER, "lines": [{"sku": "abc", "quantity": 0}], "note": "rush"}

    failures = detailed_errors(order, root.document, root_schema=root)

    assert [(failure.path, failure.code) for failure in failures] == [
        ("lines[0].sku", FailureCode.PATTERN),
        ("lines[0].quantity", FailureCode.EXCLUSIVE_MINIMUM),
        ("note", FailureCode.ADDITIONAL_PROPERTIES),
    ]
    assert validate(order, root.document, root_schema=root) is False


def test_given_order_schema_when_translating_then_records_follow_declaration_order() -> None:
    records = translate(load_schema_document(ORDER_SCHEMA_TEXT))

    assert [(record.path, record.primary_type) for record in records] == [
        ("", "object"),
        ("id", "string"),
        ("customer", "string"),
        ("lines", "array"),
        ("lines[*]", "object"),
        ("lines[*].sku", "string"),
        ("lines[*].quantity", "number"),
    ]
    assert records[2].nullable is True
    assert records[5].is_required is True


def test_given_translated_records_when_registering_then_field_chains_enforce_the_rules() -> None:
    records = translate(load_schema_document(ORDER_SCHEMA_TEXT))
    collector = _FieldCollector()

    register_rules(records, collector)

    assert collector.is_strict is True
    assert collector.fields["id"].is_required is True
    assert collector.fields["customer"].accepts(None) is True
    assert collector.fields["lines[*].quantity"].accepts(2) is True
    assert collector.fields["lines[*].quantity"].accepts(0) is False
    assert collector.fields["lines"].accepts([{"sku": "ABC-1", "quantity": 1}]) is True
    assert collector.fields["lines"].accepts([]) is False


def test_given_single_record_when_emitting_then_chain_agrees_with_direct_validation() -> None:
    root = load_schema_document(ORDER_SCHEMA_TEXT)
    sku_record = next(record for record in translate(root) if record.path == "lines[*].sku")

    chain = emit(sku_record, _PredicateBuilder())

    for sku in ("ABC-1", "abc", "ABC-"):
        expected = validate(sku, root.document["$defs"]["line"]["properties"]["sku"])
        assert chain.accepts(sku) is expected


def test_given_module_entry_point_when_requesting_help_then_commands_are_listed() -> None:
    project_root = Path(__file__).resolve().parents[3]
    env = {**os.environ, "PYTHONPATH": str(project_root / "src")}

    result = subprocess.run(
        [sys.executable, "-m", "simple_schema_rules", "--help"],
        cwd=project_root,
        check=False,
        capture_output=True,
        text=True,
        env=env,
    )

    assert result.returncode == 0
    assert "validate" in result.stdout
    assert "translate" in result.stdout
    assert "report" in result.stdout
