"""Evidence collection loop: weights, aggregation, confidence and stop gate."""

from .weights import compute_weight, clip01
from .aggregator import (
    UpdateResult,
    init_state,
    reset,
    update,
    merge,
    merge_all,
    apply_all,
)
from .confidence import confidence, confidences
from .gate import TraitReadiness, trait_readiness, stop_check

__all__ = [
    "compute_weight",
    "clip01",
    "UpdateResult",
    "init_state",
    "reset",
    "update",
    "merge",
    "merge_all",
    "apply_all",
    "confidence",
    "confidences",
    "TraitReadiness",
    "trait_readiness",
    "stop_check",
]
