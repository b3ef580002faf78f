from traitscore.domain.exceptions import (
    BatchProcessingError,
    ConfigurationError,
    EvidenceRecordError,
    InvalidInputError,
    TraitScoreError,
    ValidationError,
)


def test_configuration_error_str_includes_field_and_suggestions():
    err = ConfigurationError("tau out of range", config_field="aggregation.tau")
    err.add_suggestion("Use 0.75")
    assert str(err) == "[aggregation.tau] tau out of range -- Suggestions: Use 0.75"
    assert err.error_code == "CONFIGURATION_ERROR"
    assert err.context["config_field"] == "aggregation.tau"


def test_add_context_chains():
    err = ConfigurationError("bad").add_context("total", 90).add_context("", "ignored")
    assert err.context == {"total": 90}


def test_invalid_input_is_recoverable_validation_error():
    err = InvalidInputError("w is NaN or missing", field_name="w", field_value=float("nan"))
    assert isinstance(err, ValidationError)
    assert isinstance(err, TraitScoreError)
    assert err.recoverable is True
    assert err.error_code == "INVALID_INPUT"
    assert err.context == {"field_name": "w", "field_value": "nan"}


def test_evidence_record_error_context():
    err = EvidenceRecordError("bad record", source="chat.jsonl", line_number=4)
    assert err.context["source"] == "chat.jsonl"
    assert err.context["line_number"] == 4
    assert err.error_code == "INVALID_EVIDENCE_RECORD"


def test_batch_error_defaults():
    err = BatchProcessingError("boom", batch_size=10)
    assert err.context["processing_stage"] == "batch_aggregation"
    assert err.context["batch_size"] == 10
    assert len(err.suggestions) == 2
    assert err.recoverable is False
