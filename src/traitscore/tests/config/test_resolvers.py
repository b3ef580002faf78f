from pathlib import Path

import pytest

from traitscore.config.resolvers import resolve_evidence_inputs, resolve_log_dir


@pytest.fixture
def evidence_dir(tmp_path):
    (tmp_path / "chat.jsonl").write_text("")
    (tmp_path / "code.json").write_text("[]")
    (tmp_path / "notes.txt").write_text("ignored")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "voice.jsonl").write_text("")
    return tmp_path


def test_directory_scan_filters_extensions(evidence_dir):
    files = resolve_evidence_inputs(input_dir=str(evidence_dir))
    assert [Path(f).name for f in files] == ["chat.jsonl", "code.json"]


def test_recursive_directory_scan(evidence_dir):
    files = resolve_evidence_inputs(input_dir=str(evidence_dir), recursive=True)
    assert {Path(f).name for f in files} == {"chat.jsonl", "code.json", "voice.jsonl"}


def test_explicit_inputs_are_deduplicated(evidence_dir):
    chat = str(evidence_dir / "chat.jsonl")
    files = resolve_evidence_inputs([chat, chat])
    assert len(files) == 1


def test_explicit_input_must_exist(evidence_dir):
    with pytest.raises(ValueError, match="Evidence file not found"):
        resolve_evidence_inputs([str(evidence_dir / "missing.jsonl")])


def test_explicit_input_extension_checked(evidence_dir):
    with pytest.raises(ValueError, match="Unsupported evidence extension"):
        resolve_evidence_inputs([str(evidence_dir / "notes.txt")])


def test_inputs_and_dir_are_exclusive(evidence_dir):
    with pytest.raises(ValueError, match="not both"):
        resolve_evidence_inputs([str(evidence_dir / "code.json")], str(evidence_dir))


def test_empty_directory(tmp_path):
    with pytest.raises(ValueError, match="No files with extensions"):
        resolve_evidence_inputs(input_dir=str(tmp_path))


def test_nothing_provided():
    with pytest.raises(ValueError, match="No evidence provided"):
        resolve_evidence_inputs()


def test_log_dir_next_to_explicit_file(tmp_path):
    assert resolve_log_dir(tmp_path / "logs" / "run.log") == tmp_path / "logs"
