import itertools
import math

import pytest

from traitscore.aggregation.weights import clip01, compute_weight, require_number
from traitscore.domain.exceptions import InvalidInputError


def test_clip01_limits_values_between_zero_and_one():
    assert clip01(-1.0) == 0.0
    assert clip01(0.4) == 0.4
    assert clip01(1.5) == 1.0
    assert clip01(math.inf) == 1.0


@pytest.mark.parametrize("bad", [None, float("nan"), "0.5", True])
def test_require_number_rejects_missing_and_nan(bad):
    with pytest.raises(InvalidInputError) as exc_info:
        require_number(bad, "r")
    assert exc_info.value.context["field_name"] == "r"
    assert exc_info.value.recoverable is True


def test_compute_weight_formula():
    # d * q * mean(w_ind, w_rec)
    assert compute_weight(0.8, 0.5, 1.0, 0.5, w_max=1.0) == pytest.approx(0.8 * 0.5 * 0.75)


def test_decay_or_quality_at_zero_nullifies_the_sample():
    assert compute_weight(0.0, 1.0, 1.0, 1.0) == 0.0
    assert compute_weight(1.0, 0.0, 1.0, 1.0) == 0.0


def test_independence_and_recency_compensate():
    assert compute_weight(1.0, 1.0, 1.0, 0.0) == pytest.approx(0.5)
    assert compute_weight(1.0, 1.0, 0.0, 1.0) == pytest.approx(0.5)


def test_w_max_caps_a_single_observation():
    assert compute_weight(1.0, 1.0, 1.0, 1.0, w_max=0.3) == pytest.approx(0.3)
    assert compute_weight(1.0, 1.0, 1.0, 1.0, w_max=0.0) == 0.0


def test_inputs_outside_unit_interval_are_clipped():
    assert compute_weight(2.0, 1.5, 3.0, -1.0, w_max=10.0) == pytest.approx(0.5)


@pytest.mark.parametrize("position", range(4))
def test_nan_factor_raises(position):
    args = [1.0, 1.0, 1.0, 1.0]
    args[position] = float("nan")
    with pytest.raises(InvalidInputError):
        compute_weight(*args)


def test_none_w_max_raises():
    with pytest.raises(InvalidInputError):
        compute_weight(1.0, 1.0, 1.0, 1.0, w_max=None)


def test_weight_always_within_zero_and_w_max():
    grid = [-0.5, 0.0, 0.25, 0.5, 1.0, 1.5]
    for w_max in (0.0, 0.1, 0.5, 1.0, 3.0):
        for d, q, wi, wr in itertools.product(grid, repeat=4):
            w = compute_weight(d, q, wi, wr, w_max)
            assert 0.0 <= w <= w_max
