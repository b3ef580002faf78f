"""Iterator utilities for batch aggregation."""

from itertools import islice
from typing import Iterable, Iterator, TypeVar

T = TypeVar('T')

def chunked(items: Iterable[T], size: int) -> Iterator[list[T]]:
    """
    Split observations into consecutive chunks of at most ``size`` items.

    Each chunk is aggregated into its own partial state, so chunk
    boundaries never affect the merged result.
    """
    if size <= 0:
        raise ValueError("chunk size must be positive")
    it = iter(items)
    while chunk := list(islice(it, size)):
        yield chunk
