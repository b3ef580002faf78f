"""Confidence from cumulative evidence weight."""

from typing import Dict

from traitscore.domain.models import AggregatorConfig, AllTraitState, DEFAULT_CONFIG, TraitKey


def confidence(weight: float, c: float = DEFAULT_CONFIG.c) -> float:
    """W / (W + c): 0 at W=0, strictly increasing, tends to 1."""
    if weight <= 0:
        return 0.0
    return weight / (weight + c)


def confidences(
    state: AllTraitState,
    config: AggregatorConfig = DEFAULT_CONFIG,
) -> Dict[TraitKey, float]:
    return {trait: confidence(ts.weight, config.c) for trait, ts in state.items()}
