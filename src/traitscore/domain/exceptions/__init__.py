"""Custom exceptions for the traitscore package."""

# Base exceptions
from .base import (
    TraitScoreError,
    ConfigurationError,
    ResourceError,
    FileSystemError,
)

# Processing exceptions
from .processing import (
    ProcessingError,
    BatchProcessingError,
)

# Validation exceptions
from .validation import (
    ValidationError,
    InvalidInputError,
    EvidenceRecordError,
    ParameterValidationError,
)

__all__ = [
    # Base
    "TraitScoreError",
    "ConfigurationError",
    "ResourceError",
    "FileSystemError",

    # Processing
    "ProcessingError",
    "BatchProcessingError",

    # Validation
    "ValidationError",
    "InvalidInputError",
    "EvidenceRecordError",
    "ParameterValidationError",
]
