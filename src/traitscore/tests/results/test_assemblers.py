import json
import math

from traitscore.aggregation.aggregator import apply_all, init_state
from traitscore.domain.models import AggregatorConfig, Observation, TraitKey
from traitscore.results.assemblers import _coerce_scalar, build_report, score_block, write_report
from traitscore.scoring.models import CalculatedScore, NormalizedWorkstyle


def test_coerce_scalar():
    assert _coerce_scalar(3) == 3.0
    assert _coerce_scalar(None) is None
    assert _coerce_scalar(math.nan) is None
    assert _coerce_scalar(math.inf) is None
    assert _coerce_scalar("n/a") is None


def test_score_block_drops_non_finite_values():
    score = CalculatedScore(
        final_score=math.nan,
        experience_score=math.nan,
        coding_score=72.0,
        normalized_workstyle=NormalizedWorkstyle(85.0, 100.0, 100.0),
    )
    block = score_block(score)
    assert block["final_score"] is None
    assert block["coding_score"] == 72.0
    assert block["normalized_workstyle"]["iteration_speed"] == 85.0
    assert score_block(None) is None


def test_build_report_shape(tmp_path):
    cfg = AggregatorConfig(c=1.0, tau=0.5)
    chat = apply_all([Observation(TraitKey.ADAPTABILITY, 0.9, 1.0)], cfg)
    report = build_report(
        chat,
        {TraitKey.ADAPTABILITY: True},
        cfg,
        ready=False,
        partial_states={"chat": chat, "code": init_state(cfg)},
        n_observations=1,
    )

    assert report["ready"] is False
    assert report["n_observations"] == 1
    assert report["config"]["tau"] == 0.5
    row = report["traits"]["adaptability"]
    assert row["score"] == 0.9
    assert row["confidence"] == 0.5
    assert row["ready"] is True
    assert report["traits"]["creativity"]["covered"] is False
    assert report["sources"]["code"]["reasoning"]["count"] == 0
    assert report["score"] is None

    path = write_report(report, tmp_path / "nested" / "report.json")
    assert json.loads(path.read_text()) == report
