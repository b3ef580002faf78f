"""Core domain models."""

from .models import (
    TraitKey,
    TRAITS,
    AggregatorConfig,
    DEFAULT_CONFIG,
    TraitState,
    AllTraitState,
    Observation,
    Snapshot,
    CoverageStatus,
    coverage_from_dict,
)

__all__ = [
    "TraitKey",
    "TRAITS",
    "AggregatorConfig",
    "DEFAULT_CONFIG",
    "TraitState",
    "AllTraitState",
    "Observation",
    "Snapshot",
    "CoverageStatus",
    "coverage_from_dict",
]
