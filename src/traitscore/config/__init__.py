"""Settings, settings loading and scoring-configuration validation."""

from .settings import (
    Settings,
    AggregationSettings,
    ProcessingSettings,
    LoggingSettings,
    LogLevel,
    get_settings,
    set_settings,
)
from .scoring import (
    validate_scoring_configuration,
    scoring_configuration_from_mapping,
    load_scoring_configuration,
)

__all__ = [
    "Settings",
    "AggregationSettings",
    "ProcessingSettings",
    "LoggingSettings",
    "LogLevel",
    "get_settings",
    "set_settings",
    "validate_scoring_configuration",
    "scoring_configuration_from_mapping",
    "load_scoring_configuration",
]
