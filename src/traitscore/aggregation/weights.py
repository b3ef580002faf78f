"""Per-observation evidence weight composition."""

import math
from numbers import Real
from typing import Optional

from traitscore.domain.exceptions import InvalidInputError
from traitscore.domain.models import DEFAULT_CONFIG


def _isnum(x) -> bool:
    return isinstance(x, Real) and not isinstance(x, bool) and not math.isnan(x)


def require_number(x: Optional[float], label: str) -> float:
    """Reject None/NaN/non-numeric values with InvalidInputError."""
    if not _isnum(x):
        raise InvalidInputError(
            f"{label} is NaN or missing",
            field_name=label,
            field_value=x,
        )
    return float(x)


def clip01(x: Optional[float], label: str = "value") -> float:
    x = require_number(x, label)
    return 0.0 if x < 0 else 1.0 if x > 1 else x


def compute_weight(
    d: float,
    q: float,
    w_ind: float,
    w_rec: float,
    w_max: float = DEFAULT_CONFIG.w_max,
) -> float:
    """
    Compose a bounded weight for one observation.

        w = min(d * q * ((w_ind + w_rec) / 2), w_max)

    Decay ``d`` and quality ``q`` gate the sample multiplicatively, so either
    at zero nullifies it. Independence and recency compensate for each other
    and are averaged. All four factors are clipped to [0, 1] first.
    """
    d = clip01(d, "d")
    q = clip01(q, "q")
    w_ind = clip01(w_ind, "w_ind")
    w_rec = clip01(w_rec, "w_rec")
    cap = require_number(w_max, "w_max")

    composed = d * q * ((w_ind + w_rec) / 2)
    return max(0.0, min(composed, cap))
