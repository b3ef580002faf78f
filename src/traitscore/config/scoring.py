"""Configuration-boundary checks for per-role scoring configurations.

The score composer trusts its configuration completely. Anything read from a
configuration store goes through ``validate_scoring_configuration`` first.
"""

import json
import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from traitscore.domain.exceptions import ConfigurationError, FileSystemError
from traitscore.scoring.models import ScoringConfiguration

logger = logging.getLogger(__name__)

CATEGORY_WEIGHT_TOTAL = 100.0
CATEGORY_WEIGHT_TOLERANCE = 0.01

WEIGHT_FIELDS = (
    "adaptability_weight",
    "creativity_weight",
    "reasoning_weight",
    "code_quality_weight",
    "problem_solving_weight",
    "independence_weight",
    "iteration_speed_weight",
    "debug_loops_weight",
    "ai_assist_weight",
    "experience_weight",
    "coding_weight",
)

THRESHOLD_FIELDS = (
    "iteration_speed_threshold_moderate",
    "iteration_speed_threshold_high",
    "debug_loops_depth_threshold_fast",
    "debug_loops_depth_threshold_moderate",
)

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    # configuration stores emit camelCase ("adaptabilityWeight")
    return _CAMEL.sub("_", key).lower()


def validate_scoring_configuration(config: ScoringConfiguration) -> None:
    """Reject negative weights, unbalanced category weights and inverted thresholds."""
    for name in WEIGHT_FIELDS + THRESHOLD_FIELDS:
        value = getattr(config, name)
        if not isinstance(value, (int, float)) or math.isnan(value):
            raise ConfigurationError(
                f"{name} must be a number",
                config_field=f"scoring.{name}"
            )

    for name in WEIGHT_FIELDS:
        if getattr(config, name) < 0:
            raise ConfigurationError(
                f"{name} must be a positive number",
                config_field=f"scoring.{name}"
            )

    total = config.experience_weight + config.coding_weight
    if abs(total - CATEGORY_WEIGHT_TOTAL) > CATEGORY_WEIGHT_TOLERANCE:
        raise ConfigurationError(
            "Experience weight and coding weight must sum to 100",
            config_field="scoring.experience_weight"
        ).add_context('category_weight_total', total)

    if config.iteration_speed_threshold_moderate >= config.iteration_speed_threshold_high:
        raise ConfigurationError(
            "Iteration speed moderate threshold must be less than high threshold",
            config_field="scoring.iteration_speed_threshold_moderate"
        )

    if config.debug_loops_depth_threshold_fast >= config.debug_loops_depth_threshold_moderate:
        raise ConfigurationError(
            "Debug loops fast threshold must be less than moderate threshold",
            config_field="scoring.debug_loops_depth_threshold_fast"
        )

    for name in THRESHOLD_FIELDS:
        if getattr(config, name) <= 0:
            raise ConfigurationError(
                f"{name} must be positive",
                config_field=f"scoring.{name}"
            )


def scoring_configuration_from_mapping(data: Mapping[str, Any]) -> ScoringConfiguration:
    """Build and validate a configuration from snake_case or camelCase keys."""
    normalised: Dict[str, Any] = {}
    for key, value in data.items():
        name = _snake(key)
        if name not in WEIGHT_FIELDS + THRESHOLD_FIELDS:
            logger.debug("Ignoring unknown scoring configuration key: %s", key)
            continue
        try:
            normalised[name] = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"{name} must be a number, got {value!r}",
                config_field=f"scoring.{name}"
            ) from e

    config = ScoringConfiguration.from_dict(normalised)
    validate_scoring_configuration(config)
    return config


def load_scoring_configuration(path: Union[str, Path]) -> ScoringConfiguration:
    """Read a JSON scoring configuration from disk and validate it."""
    p = Path(path)
    if not p.is_file():
        raise FileSystemError(
            f"Scoring configuration not found: {p}",
            path=str(p)
        )
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Scoring configuration is not valid JSON: {e}",
            config_field="scoring"
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Scoring configuration must be a JSON object",
            config_field="scoring"
        )
    return scoring_configuration_from_mapping(data)
