"""Online weighted-mean aggregation of trait evidence.

Every operation takes the current ``AllTraitState`` and returns a new one;
nothing here mutates its arguments. For a fixed multiset of observations the
result is sum(w_i * r_i) / sum(w_i) per trait, computed incrementally, so
ordering and batching do not matter beyond floating point noise.
"""

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Optional

from traitscore.domain.models import (
    AggregatorConfig,
    AllTraitState,
    DEFAULT_CONFIG,
    Observation,
    Snapshot,
    TraitKey,
    TraitState,
    TRAITS,
)
from .weights import clip01, require_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateResult:
    state: AllTraitState
    snapshot: Snapshot


def _bounded(score: float) -> float:
    # float rounding can push a convex combination just past the unit interval
    return min(1.0, max(0.0, score))


def init_state(config: AggregatorConfig = DEFAULT_CONFIG) -> AllTraitState:
    """Fresh state: neutral score, no weight, no samples for every trait."""
    return AllTraitState.initial(config.initial_score)


def reset(config: AggregatorConfig = DEFAULT_CONFIG) -> AllTraitState:
    return init_state(config)


def update(
    state: AllTraitState,
    observation: Observation,
    config: AggregatorConfig = DEFAULT_CONFIG,
) -> UpdateResult:
    """
    Fold one observation into the state.

    The rating is clipped to [0, 1] and the weight to [0, w_max]. A weight
    of zero after clipping returns the very same state object. Invalid input
    raises InvalidInputError before anything is computed.
    """
    trait = TraitKey.parse(observation.trait)
    rating = clip01(observation.rating, "r")
    weight = require_number(observation.weight, "w")
    weight = min(max(0.0, weight), config.w_max)

    prev = state[trait]

    if weight == 0:
        snapshot = Snapshot(
            trait=trait,
            rating=rating,
            weight=weight,
            score_before=prev.score,
            weight_before=prev.weight,
            score_after=prev.score,
            weight_after=prev.weight,
            count_after=prev.count,
        )
        logger.debug("Zero-weight observation for %s ignored", trait.value)
        return UpdateResult(state=state, snapshot=snapshot)

    weight_after = prev.weight + weight
    score_after = _bounded((prev.weight * prev.score + weight * rating) / weight_after)
    nxt = TraitState(score=score_after, weight=weight_after, count=prev.count + 1)

    snapshot = Snapshot(
        trait=trait,
        rating=rating,
        weight=weight,
        score_before=prev.score,
        weight_before=prev.weight,
        score_after=score_after,
        weight_after=weight_after,
        count_after=nxt.count,
    )
    return UpdateResult(state=state.with_trait(trait, nxt), snapshot=snapshot)


def _merge_trait(a: TraitState, b: TraitState, config: AggregatorConfig) -> TraitState:
    weight = a.weight + b.weight
    score = _bounded((a.weight * a.score + b.weight * b.score) / weight) if weight > 0 else config.initial_score
    return TraitState(score=score, weight=weight, count=a.count + b.count)


def merge(
    a: AllTraitState,
    b: AllTraitState,
    config: AggregatorConfig = DEFAULT_CONFIG,
) -> AllTraitState:
    """Combine two partial states; associative and commutative."""
    return AllTraitState(**{
        trait.value: _merge_trait(a[trait], b[trait], config) for trait in TRAITS
    })


def merge_all(
    states: Iterable[AllTraitState],
    config: AggregatorConfig = DEFAULT_CONFIG,
) -> AllTraitState:
    """Merge any number of partial states; an empty input gives the initial state."""
    return reduce(lambda acc, s: merge(acc, s, config), states, init_state(config))


def apply_all(
    observations: Iterable[Observation],
    config: AggregatorConfig = DEFAULT_CONFIG,
    state: Optional[AllTraitState] = None,
) -> AllTraitState:
    """Sequentially update ``state`` (or a fresh one) with every observation."""
    current = state if state is not None else init_state(config)
    for obs in observations:
        current = update(current, obs, config).state
    return current
