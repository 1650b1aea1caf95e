"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration
from .runtime_settings import (
    DEFAULT_MAX_DEPTH,
    Configuration,
    FormatPatternConfig,
    ValidationSettings,
)

__all__ = [
    "Configuration",
    "FormatPatternConfig",
    "ValidationSettings",
    "DEFAULT_MAX_DEPTH",
    "ConfigurationError",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
