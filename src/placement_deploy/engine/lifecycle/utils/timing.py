# -*- coding: utf-8 -*-
import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator

logger = logging.getLogger(__name__)


class PhaseTimer:
    """Accumulates wall-clock durations of named steps."""

    def __init__(self):
        self._totals: Dict[str, float] = {}

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        start = time.monotonic()
        try:
            yield
        finally:
            elapsed = time.monotonic() - start
            self._totals[name] = self._totals.get(name, 0.0) + elapsed
            logger.info(f"{name} took {elapsed:.2f}s")

    def totals(self) -> Dict[str, float]:
        return {name: round(value, 3) for name, value in self._totals.items()}
