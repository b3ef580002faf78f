"""Configuration loading from CLI, settings files and programmatic sources."""

import json
import logging
from pathlib import Path
from dataclasses import replace, fields
from typing import Any, Dict, Mapping, Optional

from traitscore.config.settings import (
    Settings, AggregationSettings, ProcessingSettings, LoggingSettings, LogLevel
)
from traitscore.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

def _section_updates(section_cls, data: Mapping[str, Any], section: str) -> Dict[str, Any]:
    known = {f.name for f in fields(section_cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown {section} settings: {', '.join(sorted(unknown))}",
            config_field=section
        ).add_suggestion(f"Valid keys: {', '.join(sorted(known))}")
    return dict(data)

class ConfigurationLoader:
    """Loads configuration from defaults, a JSON settings file and CLI args."""

    def load_defaults(self) -> Settings:
        """Load default configuration settings."""
        return Settings(
            aggregation=AggregationSettings(
                w_max=1.0,
                c=2.0,
                tau=0.75,
                initial_score=0.5,
                numeric_tolerance=1e-12,
                min_samples=1,
            ),
            processing=ProcessingSettings(),
            logging=LoggingSettings(
                level=LogLevel.INFO,
                file_path=None,
                console_output=True,
            ),
            debug_mode=False,
            dry_run=False,
        )

    def load_from_file(self, path, base: Optional[Settings] = None) -> Settings:
        """Overlay a JSON settings file onto ``base`` (or the defaults)."""
        settings = base or self.load_defaults()
        p = Path(path)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Settings file not found: {p}",
                config_field="config"
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Settings file is not valid JSON: {e}",
                config_field="config"
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError("Settings file must contain a JSON object", config_field="config")

        aggregation_updates = _section_updates(AggregationSettings, data.get("aggregation", {}), "aggregation")
        processing_updates = _section_updates(ProcessingSettings, data.get("processing", {}), "processing")
        logging_updates = _section_updates(LoggingSettings, data.get("logging", {}), "logging")
        if "level" in logging_updates:
            logging_updates["level"] = LogLevel(str(logging_updates["level"]).upper())
        if logging_updates.get("file_path"):
            logging_updates["file_path"] = Path(logging_updates["file_path"])

        logger.debug("Loaded settings file %s", p)
        return replace(
            settings,
            aggregation=replace(settings.aggregation, **aggregation_updates),
            processing=replace(settings.processing, **processing_updates),
            logging=replace(settings.logging, **logging_updates),
        )

    def load_from_cli_args(self, args) -> Settings:
        """Load configuration from CLI arguments."""
        try:
            settings = self.load_defaults()
            config_path = getattr(args, 'config', None)
            if isinstance(config_path, (str, Path)) and config_path:
                settings = self.load_from_file(config_path, base=settings)

            aggregation_updates = {}
            for name in ('w_max', 'c', 'tau', 'initial_score', 'min_samples'):
                value = getattr(args, name, None)
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    aggregation_updates[name] = value

            processing_updates = {}
            chunk_size = getattr(args, 'chunk_size', None)
            if isinstance(chunk_size, int) and chunk_size:
                processing_updates['chunk_size'] = chunk_size
            max_workers = getattr(args, 'max_workers', None)
            if isinstance(max_workers, int) and max_workers:
                processing_updates['max_workers'] = max_workers

            logging_updates = {}
            log_file = getattr(args, 'log_file', None)
            if isinstance(log_file, (str, Path)) and log_file:
                logging_updates['file_path'] = Path(log_file)
            debug_mode = getattr(args, 'debug', False) is True
            if debug_mode:
                logging_updates['level'] = LogLevel.DEBUG

            return replace(
                settings,
                aggregation=replace(settings.aggregation, **aggregation_updates),
                processing=replace(settings.processing, **processing_updates),
                logging=replace(settings.logging, **logging_updates),
                debug_mode=debug_mode or settings.debug_mode,
                dry_run=getattr(args, 'dry_run', False) is True,
            )

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Failed to load configuration from CLI arguments: {str(e)}"
            ) from e

def configure_from_cli(args) -> Settings:
    """Main entry point to configure settings from CLI args."""
    loader = ConfigurationLoader()
    settings = loader.load_from_cli_args(args)
    settings.validate()
    return settings
