"""Utility functions and helpers."""

from .itertools import chunked
from .timing import timeit, section_timer
from .logging import setup_logging

__all__ = [
    "chunked",
    "timeit",
    "section_timer",
    "setup_logging",
]
