"""Timing helpers for traitscore runs"""
import logging
import time
from contextlib import contextmanager
from functools import wraps

TIMER_FORMAT = "[timer] %s: %.3f s"

def _now():
    return time.perf_counter()

def _report(logger: logging.Logger, label: str, t0: float) -> None:
    logger.info(TIMER_FORMAT, label, _now() - t0)

@contextmanager
def section_timer(name: str, logger: logging.Logger):
    """Time a named section of a run, e.g. aggregation of all evidence sources"""
    t0 = _now()
    try:
        yield
    finally:
        _report(logger, name, t0)

def timeit(logger: logging.Logger, name: str | None = None):
    """Time every call of the decorated function (pipeline entry points)"""
    def deco(fn):
        label = name or fn.__qualname__
        @wraps(fn)
        def wrapper(*args, **kwargs):
            t0 = _now()
            try:
                return fn(*args, **kwargs)
            finally:
                _report(logger, label, t0)
        return wrapper
    return deco
