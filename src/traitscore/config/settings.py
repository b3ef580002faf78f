"""Core configuration settings for traitscore."""

import math
import os
import logging
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
from enum import Enum

from traitscore.domain.exceptions import ConfigurationError
from traitscore.domain.models import AggregatorConfig

logger = logging.getLogger(__name__)

class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

def _finite(x) -> bool:
    return isinstance(x, (int, float)) and math.isfinite(x)

@dataclass
class AggregationSettings:
    """Aggregator, confidence and stop-gate tuning."""
    w_max: float = 1.0
    c: float = 2.0
    tau: float = 0.75
    initial_score: float = 0.5
    numeric_tolerance: float = 1e-12
    min_samples: int = 1

    def validate(self) -> None:
        """Validate aggregation settings."""
        if not _finite(self.w_max) or self.w_max < 0:
            raise ConfigurationError(
                "w_max must be a non-negative number",
                config_field="aggregation.w_max"
            )

        if not _finite(self.c) or self.c <= 0:
            raise ConfigurationError(
                "Confidence shape c must be positive",
                config_field="aggregation.c"
            ).add_suggestion("The reference deployment uses c=2")

        if not _finite(self.tau) or not 0 < self.tau < 1:
            raise ConfigurationError(
                "Stop threshold tau must lie strictly between 0 and 1",
                config_field="aggregation.tau"
            ).add_suggestion("Confidence never reaches 1, so tau >= 1 would never stop")

        if not _finite(self.initial_score) or not 0 <= self.initial_score <= 1:
            raise ConfigurationError(
                "initial_score must lie in [0, 1]",
                config_field="aggregation.initial_score"
            )

        if not _finite(self.numeric_tolerance) or self.numeric_tolerance < 0:
            raise ConfigurationError(
                "numeric_tolerance must be non-negative",
                config_field="aggregation.numeric_tolerance"
            )

        if not isinstance(self.min_samples, int) or self.min_samples < 1:
            raise ConfigurationError(
                "min_samples must be a positive integer",
                config_field="aggregation.min_samples"
            )

    def to_config(self) -> AggregatorConfig:
        """Freeze into the immutable per-session aggregator config."""
        return AggregatorConfig(
            w_max=float(self.w_max),
            c=float(self.c),
            tau=float(self.tau),
            initial_score=float(self.initial_score),
            numeric_tolerance=float(self.numeric_tolerance),
            min_samples=int(self.min_samples),
        )

@dataclass
class ProcessingSettings:
    """Batch aggregation configuration."""
    chunk_size: int = 500
    max_workers: int = field(default_factory=lambda: min(4, os.cpu_count() or 1))
    memory_threshold_mb: int = 2000

    def validate(self) -> None:
        """Validate processing settings."""
        if self.chunk_size <= 0:
            raise ConfigurationError(
                "chunk_size must be positive",
                config_field="processing.chunk_size"
            )

        if self.max_workers <= 0:
            raise ConfigurationError(
                "max_workers must be positive",
                config_field="processing.max_workers"
            )

@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    file_path: Optional[Path] = None
    console_output: bool = True

    def validate(self) -> None:
        """Validate logging settings."""
        if self.file_path and not self.file_path.parent.exists():
            raise ConfigurationError(
                f"Log directory does not exist: {self.file_path.parent}",
                config_field="logging.file_path"
            ).add_suggestion("Create the directory or use console logging only")

@dataclass
class Settings:
    """Main configuration settings for traitscore."""

    aggregation: AggregationSettings = field(default_factory=AggregationSettings)
    processing: ProcessingSettings = field(default_factory=ProcessingSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    # Debug/development settings
    debug_mode: bool = False
    dry_run: bool = False

    def validate(self) -> None:
        """Validate all configuration settings."""
        try:
            self.aggregation.validate()
            self.processing.validate()
            self.logging.validate()
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Configuration validation failed: {str(e)}"
            ) from e

    def to_dict(self) -> dict:
        """Convert settings to dictionary for debugging."""
        return {
            'aggregation': self.aggregation.to_config().to_dict(),
            'processing': {
                'chunk_size': self.processing.chunk_size,
                'max_workers': self.processing.max_workers,
                'memory_threshold_mb': self.processing.memory_threshold_mb,
            },
            'logging': {
                'level': self.logging.level.value,
                'file_path': str(self.logging.file_path) if self.logging.file_path else None,
                'console_output': self.logging.console_output,
            },
            'runtime': {
                'debug_mode': self.debug_mode,
                'dry_run': self.dry_run,
            }
        }

# Global settings instance, used by the CLI layer only
_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """Get the current global settings instance."""
    if _settings is None:
        raise ConfigurationError(
            "Settings not initialized. Call set_settings() first."
        ).add_suggestion("Initialize settings in your application startup")
    return _settings

def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    settings.validate()  # Validate before setting
    _settings = settings
    logger.info("Configuration loaded and validated successfully")
