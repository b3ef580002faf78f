from typing import Optional, Dict, Any, List
from datetime import datetime
from abc import ABC
import logging

logger = logging.getLogger(__name__)

class TraitScoreError(Exception, ABC):
    """Base exception for all traitscore-related errors."""

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._get_default_error_code()
        self.context: Dict[str, Any] = context or {}
        self.suggestions: List[str] = suggestions or []
        self.recoverable = recoverable
        self.timestamp = datetime.now()

    def _get_default_error_code(self) -> str:
        return "TRAITSCORE_ERROR"

    def add_context(self, key: str, value: Any) -> "TraitScoreError":
        if key:
            self.context[key] = value
        return self

    def add_suggestion(self, suggestion: str) -> "TraitScoreError":
        if suggestion:
            self.suggestions.append(suggestion)
        return self

    def __str__(self) -> str:
        base = self.message or ""
        if self.suggestions:
            return f"{base} -- Suggestions: {'; '.join(self.suggestions)}"
        return base


class ConfigurationError(TraitScoreError):
    """Raised at the configuration boundary, never by the scoring core."""

    def __init__(self, message: str, *, config_field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_field = config_field
        if config_field:
            self.add_context('config_field', config_field)

    def _get_default_error_code(self) -> str:
        return "CONFIGURATION_ERROR"

    def __str__(self) -> str:
        base = self.message or ""
        if self.config_field:
            base = f"[{self.config_field}] {base}"
        if self.suggestions:
            return f"{base} -- Suggestions: {'; '.join(self.suggestions)}"
        return base


class ResourceError(TraitScoreError):
    def _get_default_error_code(self) -> str:
        return "RESOURCE_ERROR"


class FileSystemError(ResourceError):
    def __init__(self, message: str, *, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if path:
            self.add_context('path', path)

    def _get_default_error_code(self) -> str:
        return "FILE_SYSTEM_ERROR"
