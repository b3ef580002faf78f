"""Evidence loading and batch aggregation"""

from .batch import BatchAggregator, BatchResult
from .validation import InputValidator

__all__ = [
    "BatchAggregator",
    "BatchResult",
    "InputValidator",
]
