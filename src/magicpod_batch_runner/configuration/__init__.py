"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import SETTING_NAMES, ConfigurationError, load_configuration
from .runtime_settings import (
    ApiSettings,
    Configuration,
    ExportSettings,
    ExternalServiceSettings,
    RunSettings,
    WaitSettings,
    describe_settings,
)

__all__ = [
    "ApiSettings",
    "Configuration",
    "ExportSettings",
    "ExternalServiceSettings",
    "RunSettings",
    "WaitSettings",
    "describe_settings",
    "SETTING_NAMES",
    "ConfigurationError",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
