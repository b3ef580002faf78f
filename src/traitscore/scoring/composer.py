"""Final score composition from trait scores, coding scores and telemetry."""

import logging
import math
from typing import Sequence, Tuple

from .models import (
    CalculatedScore,
    NormalizedWorkstyle,
    RawScores,
    ScoringConfiguration,
    WorkstyleMetrics,
)
from .normalization import NO_SIGNAL_SCORE, normalize_optional, round_half_up

logger = logging.getLogger(__name__)


def _weighted_average(pairs: Sequence[Tuple[float, float]]) -> float:
    """Sum(value * weight) / Sum(weight). A zero weight sum gives NaN or inf."""
    total_weight = sum(w for _, w in pairs)
    weighted_sum = sum(v * w for v, w in pairs)
    try:
        return weighted_sum / total_weight
    except ZeroDivisionError:
        return math.nan if weighted_sum == 0 else math.copysign(math.inf, weighted_sum)


def calculate_score(
    raw_scores: RawScores,
    workstyle_metrics: WorkstyleMetrics,
    config: ScoringConfiguration,
) -> CalculatedScore:
    """
    Blend experience and coding dimensions into one 0-100 score.

    The configuration is assumed pre-validated; nothing is checked here, so a
    malformed configuration may surface as NaN or infinity in the result.
    Intermediates keep full precision and only the outputs are rounded.
    """
    iteration_speed = normalize_optional(
        workstyle_metrics.iteration_speed,
        config.iteration_speed_threshold_moderate,
        config.iteration_speed_threshold_high,
    )
    debug_loops = normalize_optional(
        workstyle_metrics.debug_loops_avg_depth,
        config.debug_loops_depth_threshold_fast,
        config.debug_loops_depth_threshold_moderate,
    )
    ai_assist = workstyle_metrics.ai_assist_accountability_score
    if ai_assist is None:
        ai_assist = NO_SIGNAL_SCORE

    experience_score = _weighted_average([
        (raw_scores.adaptability, config.adaptability_weight),
        (raw_scores.creativity, config.creativity_weight),
        (raw_scores.reasoning, config.reasoning_weight),
    ])

    coding_score = _weighted_average([
        (raw_scores.code_quality, config.code_quality_weight),
        (raw_scores.problem_solving, config.problem_solving_weight),
        (raw_scores.independence, config.independence_weight),
        (iteration_speed, config.iteration_speed_weight),
        (debug_loops, config.debug_loops_weight),
        (ai_assist, config.ai_assist_weight),
    ])

    final_score = _weighted_average([
        (experience_score, config.experience_weight),
        (coding_score, config.coding_weight),
    ])

    logger.debug(
        "Composed score: experience=%.4f coding=%.4f final=%.4f",
        experience_score, coding_score, final_score,
    )

    return CalculatedScore(
        final_score=round_half_up(final_score),
        experience_score=round_half_up(experience_score),
        coding_score=round_half_up(coding_score),
        normalized_workstyle=NormalizedWorkstyle(
            iteration_speed=round_half_up(iteration_speed),
            debug_loops=round_half_up(debug_loops),
            ai_assist=round_half_up(ai_assist),
        ),
    )
