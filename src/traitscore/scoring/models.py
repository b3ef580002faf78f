"""Data models for final score composition."""

from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Mapping, Optional

from traitscore.domain.models import AllTraitState


def _known(cls, d: Mapping[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in d.items() if k in names}


@dataclass(frozen=True)
class ScoringConfiguration:
    """Per-role weights and workstyle thresholds.

    Cross-field rules (category weights summing to 100, ordered threshold
    pairs, no negative weights) are checked by
    ``traitscore.config.scoring.validate_scoring_configuration``.
    """
    # Experience dimension weights
    adaptability_weight: float = 33.0
    creativity_weight: float = 33.0
    reasoning_weight: float = 34.0
    # Coding dimension weights
    code_quality_weight: float = 25.0
    problem_solving_weight: float = 25.0
    independence_weight: float = 20.0
    # Workstyle metric weights
    iteration_speed_weight: float = 10.0
    debug_loops_weight: float = 10.0
    ai_assist_weight: float = 10.0
    # Category weights
    experience_weight: float = 50.0
    coding_weight: float = 50.0
    # Workstyle benchmarks
    iteration_speed_threshold_moderate: float = 5.0
    iteration_speed_threshold_high: float = 10.0
    debug_loops_depth_threshold_fast: float = 2.0
    debug_loops_depth_threshold_moderate: float = 4.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ScoringConfiguration":
        return cls(**{k: float(v) for k, v in _known(cls, d).items()})


@dataclass(frozen=True)
class RawScores:
    # Experience scores (0-100)
    adaptability: float
    creativity: float
    reasoning: float
    # Coding scores (0-100)
    code_quality: float
    problem_solving: float
    independence: float

    @classmethod
    def from_trait_state(
        cls,
        state: AllTraitState,
        *,
        code_quality: float,
        problem_solving: float,
        independence: float,
    ) -> "RawScores":
        """Experience scores from final trait means, scaled from [0, 1] to 0-100."""
        return cls(
            adaptability=100.0 * state.adaptability.score,
            creativity=100.0 * state.creativity.score,
            reasoning=100.0 * state.reasoning.score,
            code_quality=code_quality,
            problem_solving=problem_solving,
            independence=independence,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "RawScores":
        return cls(**{k: float(v) for k, v in _known(cls, d).items()})


@dataclass(frozen=True)
class WorkstyleMetrics:
    iteration_speed: Optional[float] = None             # raw iteration count
    debug_loops_avg_depth: Optional[float] = None       # mean debug loop depth
    ai_assist_accountability_score: Optional[float] = None  # already 0-100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "WorkstyleMetrics":
        return cls(**{k: (None if v is None else float(v)) for k, v in _known(cls, d).items()})


@dataclass(frozen=True)
class NormalizedWorkstyle:
    iteration_speed: float
    debug_loops: float
    ai_assist: float


@dataclass(frozen=True)
class CalculatedScore:
    final_score: float       # 0..100
    experience_score: float  # weighted average of the three traits
    coding_score: float      # weighted average including workstyle
    normalized_workstyle: NormalizedWorkstyle

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
