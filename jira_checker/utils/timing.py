"""Timing helpers for fetch and validation stages."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Dict, Iterator


@contextmanager
def timed(stage: str, durations: Dict[str, int]) -> Iterator[None]:
    """Record the wall time of the wrapped block as ``durations[stage]`` in ms."""
    started = time.perf_counter()
    try:
        yield
    finally:
        durations[stage] = int((time.perf_counter() - started) * 1000)
