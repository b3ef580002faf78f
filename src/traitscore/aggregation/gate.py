"""Stop rule deciding when evidence collection can end."""

import logging
from dataclasses import dataclass
from typing import Dict

from traitscore.domain.models import (
    AggregatorConfig,
    AllTraitState,
    CoverageStatus,
    DEFAULT_CONFIG,
    TraitKey,
)
from .confidence import confidence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraitReadiness:
    """Which of the three stop conditions a trait currently meets."""
    covered: bool
    enough_samples: bool
    confident: bool
    confidence: float

    @property
    def ready(self) -> bool:
        return self.covered and self.enough_samples and self.confident


def trait_readiness(
    state: AllTraitState,
    coverage: CoverageStatus,
    config: AggregatorConfig = DEFAULT_CONFIG,
) -> Dict[TraitKey, TraitReadiness]:
    readiness = {}
    for trait, ts in state.items():
        conf = confidence(ts.weight, config.c)
        readiness[trait] = TraitReadiness(
            covered=bool(coverage.get(trait, False)),
            enough_samples=ts.count >= config.min_samples,
            confident=conf >= config.tau,
            confidence=conf,
        )
    return readiness


def stop_check(
    state: AllTraitState,
    coverage: CoverageStatus,
    config: AggregatorConfig = DEFAULT_CONFIG,
) -> bool:
    """
    True iff every trait is covered, has at least ``min_samples`` accepted
    samples and has confidence >= tau.

    All three are required: one heavy sample can cross tau on its own, and
    coverage says nothing about how much rubric evidence was seen. Since W,
    n and coverage only grow, a True answer is never retracted.
    """
    readiness = trait_readiness(state, coverage, config)
    ready = all(r.ready for r in readiness.values())
    if not ready:
        blocked = [t.value for t, r in readiness.items() if not r.ready]
        logger.debug("Stop gate closed; waiting on %s", ", ".join(blocked))
    return ready
