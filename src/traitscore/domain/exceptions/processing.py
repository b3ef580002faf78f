"""Batch aggregation and pipeline exceptions."""

from typing import Optional
from .base import TraitScoreError

class ProcessingError(TraitScoreError):
    """Base class for processing pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        batch_id: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if stage:
            self.add_context('processing_stage', stage)
        if batch_id:
            self.add_context('batch_id', batch_id)


class BatchProcessingError(ProcessingError):
    """Raised when aggregating a chunk of evidence fails."""

    def __init__(
        self,
        message: str,
        *,
        batch_size: Optional[int] = None,
        failed_count: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, stage="batch_aggregation", **kwargs)
        if batch_size:
            self.add_context('batch_size', batch_size)
        if failed_count:
            self.add_context('failed_observations', failed_count)

        self.add_suggestion("Try reducing the chunk size")
        self.add_suggestion("Run with --max-workers 1 to aggregate sequentially")

    def _get_default_error_code(self) -> str:
        return "BATCH_PROCESSING_FAILED"
