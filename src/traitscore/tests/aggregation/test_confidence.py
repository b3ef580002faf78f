import random

import pytest

from traitscore.aggregation.aggregator import apply_all, init_state, update
from traitscore.aggregation.confidence import confidence, confidences
from traitscore.domain.models import AggregatorConfig, Observation, TraitKey, TRAITS


def test_zero_weight_has_zero_confidence():
    assert confidence(0.0, 2.0) == 0.0


def test_confidence_at_w_equal_c_is_one_half():
    assert confidence(2.0, 2.0) == pytest.approx(0.5)


def test_confidence_strictly_increasing_and_below_one():
    prev = confidence(0.0, 2.0)
    for i in range(1, 200):
        cur = confidence(i * 0.25, 2.0)
        assert prev < cur < 1.0
        prev = cur


def test_confidence_approaches_one():
    assert confidence(1e9, 2.0) == pytest.approx(1.0, abs=1e-8)


def test_confidences_reports_every_trait():
    cfg = AggregatorConfig(c=1.0)
    state = apply_all([Observation(TraitKey.REASONING, 0.6, 1.0)], cfg)
    conf = confidences(state, cfg)

    assert set(conf) == set(TRAITS)
    assert conf[TraitKey.REASONING] == pytest.approx(0.5)
    assert conf[TraitKey.ADAPTABILITY] == 0.0


def test_confidence_after_update_rises_on_weight_and_holds_on_zero():
    cfg = AggregatorConfig(c=2.0)
    rng = random.Random(5)
    state = init_state(cfg)
    for _ in range(300):
        trait = rng.choice(TRAITS)
        weight = rng.choice([0.0, rng.uniform(0.01, 1.0)])
        before = confidence(state[trait].weight, cfg.c)
        state = update(state, Observation(trait, rng.random(), weight), cfg).state
        after = confidence(state[trait].weight, cfg.c)
        if weight > 0:
            assert after > before
        else:
            assert after == before
