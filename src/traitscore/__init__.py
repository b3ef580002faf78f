"""traitscore: order-independent trait evidence aggregation and score composition."""

from traitscore.aggregation import (
    compute_weight,
    init_state,
    update,
    merge,
    confidence,
    confidences,
    stop_check,
)
from traitscore.domain import AggregatorConfig, AllTraitState, Observation, TraitKey, TraitState
from traitscore.domain.exceptions import InvalidInputError
from traitscore.scoring import calculate_score

__version__ = "0.1.0"

__all__ = [
    "compute_weight",
    "init_state",
    "update",
    "merge",
    "confidence",
    "confidences",
    "stop_check",
    "calculate_score",
    "AggregatorConfig",
    "AllTraitState",
    "Observation",
    "TraitKey",
    "TraitState",
    "InvalidInputError",
]
