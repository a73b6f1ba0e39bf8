"""Opt-in timing of read passes, switched on with ``PLOTFEED_DEBUG``."""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


def debug_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True when ``PLOTFEED_DEBUG`` holds a truthy value."""
    env = os.environ if environ is None else environ
    return env.get("PLOTFEED_DEBUG", "").strip().lower() in _TRUTHY


@contextmanager
def time_block(label: str, *, log: Optional[logging.Logger] = None) -> Iterator[None]:
    """Log how long the block took at DEBUG level, when debugging is enabled."""
    if not debug_enabled():
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        (log or logger).debug("%s took %.3f ms", label, elapsed_ms)
