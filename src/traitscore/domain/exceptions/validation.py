"""Input validation exceptions."""

from typing import Optional, Any
from .base import TraitScoreError

class ValidationError(TraitScoreError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.field_name = field_name
        if field_name:
            self.add_context('field_name', field_name)
        if field_value is not None:
            self.add_context('field_value', str(field_value))

    def _get_default_error_code(self) -> str:
        return "VALIDATION_ERROR"


class InvalidInputError(ValidationError):
    """Raised when a required numeric input is NaN or missing.

    The aggregator guarantees that a rejected update leaves the prior state
    untouched, so callers may drop the observation and carry on.
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)

    def _get_default_error_code(self) -> str:
        return "INVALID_INPUT"


class EvidenceRecordError(ValidationError):
    """Raised when an evidence record cannot be turned into an observation."""

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        line_number: Optional[int] = None,
        record_index: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if source:
            self.add_context('source', source)
        if line_number is not None:
            self.add_context('line_number', line_number)
        if record_index is not None:
            self.add_context('record_index', record_index)
        self.add_suggestion("Each record needs 'trait', 'rating' and either 'weight' or the four weight factors")

    def _get_default_error_code(self) -> str:
        return "INVALID_EVIDENCE_RECORD"


class ParameterValidationError(ValidationError):
    """Raised when a call parameter is out of range."""
    def __init__(
        self,
        message: str,
        *,
        parameter_name: str,
        parameter_value: Any,
        expected_type: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, field_name=parameter_name, field_value=parameter_value, **kwargs)
        if expected_type:
            self.add_context('expected_type', expected_type)
        self.add_suggestion(f"Check the value and type of parameter '{parameter_name}'")

    def _get_default_error_code(self) -> str:
        return "PARAMETER_VALIDATION_FAILED"
