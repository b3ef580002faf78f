"""Final score composition."""

from .composer import calculate_score
from .models import (
    CalculatedScore,
    NormalizedWorkstyle,
    RawScores,
    ScoringConfiguration,
    WorkstyleMetrics,
)
from .normalization import normalize_inverse

__all__ = [
    "calculate_score",
    "normalize_inverse",
    "CalculatedScore",
    "NormalizedWorkstyle",
    "RawScores",
    "ScoringConfiguration",
    "WorkstyleMetrics",
]
