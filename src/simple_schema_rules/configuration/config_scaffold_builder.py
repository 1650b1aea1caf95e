"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "schema-rules.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Validation configuration template for simple-schema-rules.
# Every setting is optional; delete the ones you do not need.

validation:
  # How unknown "format" names are treated: allow (default) or reject.
  unknown_formats: "allow"
  # Maximum nesting of schema evaluations before a recursion error is raised.
  max_depth: 100

formats:
  # Custom string formats, checked before the built-in formats of the same name.
  # Each entry needs a regular expression that the string must match.
  # order-number:
  #   pattern: "^ORD-[0-9]{6}$"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
