import json
import logging
from unittest.mock import patch

import pytest

from traitscore.cli import build_parser, main


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    monkeypatch.setenv("NO_PROGRESS", "1")
    yield
    for name in ("traitscore", "traitscore.summary"):
        lg = logging.getLogger(name)
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()
        lg.propagate = True


@pytest.fixture
def evidence_dir(tmp_path):
    d = tmp_path / "evidence"
    d.mkdir()
    (d / "chat.jsonl").write_text(
        '{"trait": "A", "rating": 0.8, "weight": 1.0}\n'
        '{"trait": "C", "rating": 0.6, "weight": 1.0}\n'
        '{"trait": "R", "rating": 0.7, "weight": 1.0}\n'
    )
    return d


@pytest.fixture
def session(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({
        "coding_scores": {"code_quality": 90, "problem_solving": 85, "independence": 0},
        "workstyle": {"iteration_speed": 3, "debug_loops_avg_depth": 0},
        "raw_scores": {
            "adaptability": 80, "creativity": 60, "reasoning": 70,
            "code_quality": 90, "problem_solving": 85, "independence": 0,
        },
    }))
    return path


def _log_args(tmp_path):
    return ["--log-file", str(tmp_path / "traitscore.log")]


def test_parser_requires_subcommand():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_run_prints_report(evidence_dir, session, tmp_path, capsys):
    argv = [
        "run", "-d", str(evidence_dir), "-s", str(session),
        "--covered", "all", "--c", "1", "--tau", "0.5", "--max-workers", "1",
    ] + _log_args(tmp_path)
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 0

    report = json.loads(capsys.readouterr().out)
    assert report["ready"] is True
    assert report["n_observations"] == 3
    assert report["score"]["final_score"] == 71.0
    assert report["config"]["c"] == 1.0


def test_run_writes_report_file(evidence_dir, session, tmp_path, capsys):
    out = tmp_path / "report.json"
    argv = ["run", "-d", str(evidence_dir), "-s", str(session), "-o", str(out)] + _log_args(tmp_path)
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 0
    assert capsys.readouterr().out == ""

    report = json.loads(out.read_text())
    # default gate: one unit of weight per trait gives confidence 1/3
    assert report["ready"] is False
    assert report["traits"]["adaptability"]["covered"] is False


def test_run_dry_run(evidence_dir, tmp_path, capsys):
    argv = ["run", "-d", str(evidence_dir), "--dry-run"] + _log_args(tmp_path)
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 0
    assert "DRY RUN SUMMARY" in capsys.readouterr().out


def test_run_missing_directory_exits_with_error(tmp_path):
    argv = ["run", "-d", str(tmp_path / "absent")] + _log_args(tmp_path)
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 1


def test_invalid_tau_exits_with_error(evidence_dir, tmp_path):
    argv = ["run", "-d", str(evidence_dir), "--tau", "1.5"] + _log_args(tmp_path)
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 1


def test_score_command(session, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["score", "-s", str(session)] + _log_args(tmp_path))
    assert exc_info.value.code == 0

    result = json.loads(capsys.readouterr().out)
    assert result["final_score"] == 71.0
    assert result["experience_score"] == 70.0
    assert result["coding_score"] == 72.0
    assert result["normalized_workstyle"]["iteration_speed"] == 85.0


def test_score_with_invalid_scoring_config(session, tmp_path):
    role = tmp_path / "role.json"
    role.write_text(json.dumps({"experienceWeight": 60, "codingWeight": 60}))
    argv = ["score", "-s", str(session), "--scoring-config", str(role)] + _log_args(tmp_path)
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 1


def test_score_requires_raw_scores(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"workstyle": {}}))
    with pytest.raises(SystemExit) as exc_info:
        main(["score", "-s", str(path)] + _log_args(tmp_path))
    assert exc_info.value.code == 1


def _quiet_loggers():
    lg = logging.getLogger("cli_checks")
    return lg, lg


def test_settings_file_log_level_reaches_setup_logging(session, tmp_path, capsys):
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps({"logging": {"level": "error"}}))
    argv = ["score", "-s", str(session), "--config", str(settings_file)] + _log_args(tmp_path)

    with patch("traitscore.cli.setup_logging", return_value=_quiet_loggers()) as mock_setup:
        with pytest.raises(SystemExit) as exc_info:
            main(argv)

    assert exc_info.value.code == 0
    kwargs = mock_setup.call_args.kwargs
    assert kwargs["level"] == "ERROR"
    assert kwargs["console_level"] == "WARNING"
    assert kwargs["log_dir"] == str(tmp_path)


def test_debug_flag_logs_everything(session, tmp_path, capsys):
    argv = ["score", "-s", str(session), "--debug"] + _log_args(tmp_path)

    with patch("traitscore.cli.setup_logging", return_value=_quiet_loggers()) as mock_setup:
        with pytest.raises(SystemExit):
            main(argv)

    kwargs = mock_setup.call_args.kwargs
    assert kwargs["level"] == "DEBUG"
    assert kwargs["console_level"] is None


def test_log_file_help_describes_directory(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["run", "--help"])
    assert exc_info.value.code == 0
    help_text = " ".join(capsys.readouterr().out.split())
    assert "Directory of PATH receives the log files." in help_text
