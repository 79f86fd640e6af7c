"""
Degradation policy — the single place storage failures are absorbed.

Every model boundary that needs history runs through
:meth:`DegradationPolicy.guard`.  A :class:`StorageUnavailableError`
raised inside is logged, replaced by the model's documented fallback and
recorded by source name; results then report ``degraded_sources`` and a
lowered confidence.  One policy instance lives for one request.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from app.engine.errors import StorageUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DegradationPolicy:
    def __init__(self) -> None:
        self.degraded_sources: list[str] = []

    def guard(self, source: str, compute: Callable[[], T], fallback: Callable[[], T]) -> T:
        """Run *compute*; on storage failure record *source* and return *fallback()*."""
        try:
            return compute()
        except StorageUnavailableError as exc:
            logger.warning("Degrading %s to fallback: %s", source, exc)
            if source not in self.degraded_sources:
                self.degraded_sources.append(source)
            return fallback()

    @property
    def degraded(self) -> bool:
        return bool(self.degraded_sources)

    def is_degraded(self, source: str) -> bool:
        return source in self.degraded_sources
