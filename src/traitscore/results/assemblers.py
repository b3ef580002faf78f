# results/assemblers.py
import json
import math
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from traitscore.aggregation.gate import trait_readiness
from traitscore.domain.models import AggregatorConfig, AllTraitState, CoverageStatus
from traitscore.scoring.models import CalculatedScore


def _coerce_scalar(x: Any) -> Optional[float]:
    """Plain float for JSON output; NaN/inf become None."""
    if x is None:
        return None
    try:
        v = float(x)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def trait_rows(
    state: AllTraitState,
    coverage: CoverageStatus,
    config: AggregatorConfig,
) -> Dict[str, Dict[str, Any]]:
    """One row per trait: running mean, evidence mass, samples and gate status."""
    readiness = trait_readiness(state, coverage, config)
    rows = {}
    for trait, ts in state.items():
        r = readiness[trait]
        rows[trait.value] = {
            "score": ts.score,
            "weight": ts.weight,
            "count": ts.count,
            "confidence": r.confidence,
            "covered": r.covered,
            "enough_samples": r.enough_samples,
            "confident": r.confident,
            "ready": r.ready,
        }
    return rows


def score_block(score: Optional[CalculatedScore]) -> Optional[Dict[str, Any]]:
    if score is None:
        return None
    return {
        "final_score": _coerce_scalar(score.final_score),
        "experience_score": _coerce_scalar(score.experience_score),
        "coding_score": _coerce_scalar(score.coding_score),
        "normalized_workstyle": {
            "iteration_speed": _coerce_scalar(score.normalized_workstyle.iteration_speed),
            "debug_loops": _coerce_scalar(score.normalized_workstyle.debug_loops),
            "ai_assist": _coerce_scalar(score.normalized_workstyle.ai_assist),
        },
    }


def build_report(
    state: AllTraitState,
    coverage: CoverageStatus,
    config: AggregatorConfig,
    *,
    ready: bool,
    score: Optional[CalculatedScore] = None,
    partial_states: Optional[Mapping[str, AllTraitState]] = None,
    n_observations: int = 0,
) -> Dict[str, Any]:
    """Assemble the JSON-serialisable run report."""
    return {
        "ready": ready,
        "n_observations": n_observations,
        "config": config.to_dict(),
        "traits": trait_rows(state, coverage, config),
        "sources": {
            name: partial.to_dict() for name, partial in (partial_states or {}).items()
        },
        "score": score_block(score),
    }


def write_report(report: Mapping[str, Any], path: Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(report, indent=2, sort_keys=True), encoding="utf-8")
    return p
