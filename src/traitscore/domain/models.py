"""Core domain models for trait evidence aggregation."""

from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Dict, Any, Iterator, Mapping, Optional, Tuple, Union


class TraitKey(str, Enum):
    """The three background dimensions probed during the interview."""
    ADAPTABILITY = "adaptability"
    CREATIVITY = "creativity"
    REASONING = "reasoning"

    @property
    def code(self) -> str:
        """Single-letter code used by upstream rating extractors."""
        return self.value[0].upper()

    @classmethod
    def parse(cls, value: Union["TraitKey", str]) -> "TraitKey":
        """Accept an enum member, its value, its name or its letter code."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unknown trait: {value!r}")
        token = value.strip()
        for member in cls:
            if token.lower() == member.value or token.upper() == member.name or token.upper() == member.code:
                return member
        raise ValueError(f"Unknown trait: {value!r}")


TRAITS: Tuple[TraitKey, ...] = tuple(TraitKey)


@dataclass(frozen=True)
class AggregatorConfig:
    """Per-session tuning of the aggregator, confidence curve and stop gate."""
    w_max: float = 1.0              # cap on a single observation's weight
    c: float = 2.0                  # confidence shape, W/(W+c)
    tau: float = 0.75               # stop threshold on confidence
    initial_score: float = 0.5      # neutral score while W == 0
    numeric_tolerance: float = 1e-12
    min_samples: int = 1            # sample floor of the stop gate

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = AggregatorConfig()


@dataclass(frozen=True)
class TraitState:
    """Running weighted mean for one trait.

    ``score`` is the weighted mean S in [0, 1], ``weight`` the cumulative
    evidence mass W and ``count`` the number of accepted samples n. While
    ``weight`` is zero the score is the configured neutral value.
    """
    score: float
    weight: float = 0.0
    count: int = 0

    @property
    def has_evidence(self) -> bool:
        return self.weight > 0

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "weight": self.weight, "count": self.count}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "TraitState":
        return cls(score=float(d["score"]), weight=float(d["weight"]), count=int(d["count"]))


@dataclass(frozen=True)
class AllTraitState:
    """Immutable per-interview state, one TraitState per trait."""
    adaptability: TraitState
    creativity: TraitState
    reasoning: TraitState

    @classmethod
    def initial(cls, initial_score: float) -> "AllTraitState":
        fresh = TraitState(score=initial_score, weight=0.0, count=0)
        return cls(adaptability=fresh, creativity=fresh, reasoning=fresh)

    def __getitem__(self, trait: Union[TraitKey, str]) -> TraitState:
        return getattr(self, TraitKey.parse(trait).value)

    def __iter__(self) -> Iterator[TraitKey]:
        return iter(TRAITS)

    def items(self) -> Iterator[Tuple[TraitKey, TraitState]]:
        for trait in TRAITS:
            yield trait, self[trait]

    def with_trait(self, trait: TraitKey, state: TraitState) -> "AllTraitState":
        """Return a copy with one trait replaced."""
        return replace(self, **{TraitKey.parse(trait).value: state})

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {trait.value: ts.to_dict() for trait, ts in self.items()}

    @classmethod
    def from_dict(cls, d: Mapping[str, Mapping[str, Any]]) -> "AllTraitState":
        parsed = {TraitKey.parse(k).value: TraitState.from_dict(v) for k, v in d.items()}
        missing = [t.value for t in TRAITS if t.value not in parsed]
        if missing:
            raise ValueError(f"Trait state missing for: {', '.join(missing)}")
        return cls(**parsed)


@dataclass(frozen=True)
class Observation:
    """One (trait, rating, weight) evidence tuple; consumed by a single update."""
    trait: TraitKey
    rating: Optional[float]
    weight: Optional[float]


@dataclass(frozen=True)
class Snapshot:
    """Audit record of one aggregator transition."""
    trait: TraitKey
    rating: float
    weight: float
    score_before: float
    weight_before: float
    score_after: float
    weight_after: float
    count_after: int

    @property
    def applied(self) -> bool:
        """Whether the observation moved the state at all."""
        return self.weight > 0

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["trait"] = self.trait.value
        return d


CoverageStatus = Mapping[TraitKey, bool]


def coverage_from_dict(d: Mapping[Union[TraitKey, str], Any]) -> Dict[TraitKey, bool]:
    """Normalise a coverage mapping; traits not mentioned count as uncovered."""
    coverage = {trait: False for trait in TRAITS}
    for key, value in d.items():
        coverage[TraitKey.parse(key)] = bool(value)
    return coverage
