"""
Per-athlete model cache.

Memoizes the longitudinal models (ACWR, fitness-fatigue, hierarchical,
recovery state) per athlete with a fixed time-to-live.  Workout
completion invalidates every model of that athlete at once, so the next
read always recomputes.

The cache is keyed by athlete and owned by the caller; there is no
process-wide instance.  Concurrent requests for the same athlete may
both recompute on a miss, which is wasteful but correct.  Store failures
degrade to a miss and never reach the caller.
"""

from __future__ import annotations

import datetime
import logging
from typing import Callable, Optional, TypeVar

from app.core.clock import utcnow
from app.engine.errors import StorageUnavailableError
from app.engine.storage import ModelStore
from app.schemas.model_cache import CachedModel, ModelKind, cached_model_adapter

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300

M = TypeVar("M", bound=CachedModel)


class InMemoryModelStore:
    """Dict-backed :class:`~app.engine.storage.ModelStore`."""

    def __init__(self, clock: Callable[[], datetime.datetime] = utcnow) -> None:
        self._clock = clock
        self._entries: dict[tuple[str, ModelKind], tuple[dict, datetime.datetime]] = {}

    def get_cached_model(self, athlete_id: str, kind: ModelKind) -> Optional[CachedModel]:
        entry = self._entries.get((athlete_id, kind))
        if entry is None:
            return None
        payload, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[(athlete_id, kind)]
            return None
        return cached_model_adapter.validate_python(payload)

    def put_cached_model(self, athlete_id: str, kind: ModelKind, model: CachedModel, ttl_seconds: int) -> None:
        expires_at = self._clock() + datetime.timedelta(seconds=ttl_seconds)
        self._entries[(athlete_id, kind)] = (model.model_dump(mode="json"), expires_at)

    def invalidate(self, athlete_id: str) -> None:
        for key in [k for k in self._entries if k[0] == athlete_id]:
            del self._entries[key]


class ModelCache:
    """Get-or-compute front for a model store."""

    def __init__(self, store: ModelStore, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        self.store = store
        self.ttl_seconds = ttl_seconds

    def get(self, athlete_id: str, kind: ModelKind) -> Optional[CachedModel]:
        try:
            model = self.store.get_cached_model(athlete_id, kind)
        except StorageUnavailableError as exc:
            logger.warning("Model cache read failed for %s/%s, treating as miss: %s", athlete_id, kind.value, exc)
            return None
        if model is not None and model.kind != kind.value:
            logger.warning("Cached payload for %s/%s has kind %s, ignoring", athlete_id, kind.value, model.kind)
            return None
        return model

    def put(self, athlete_id: str, kind: ModelKind, model: CachedModel) -> None:
        try:
            self.store.put_cached_model(athlete_id, kind, model, self.ttl_seconds)
        except StorageUnavailableError as exc:
            logger.warning("Model cache write failed for %s/%s: %s", athlete_id, kind.value, exc)

    def get_or_compute(
        self,
        athlete_id: str,
        kind: ModelKind,
        compute: Callable[[], M],
        should_store: Optional[Callable[[M], bool]] = None,
    ) -> M:
        """Cached model of *kind*, computing and storing it on a miss.

        When *should_store* rejects the freshly computed model it is returned
        without being written to the store.
        """
        cached = self.get(athlete_id, kind)
        if cached is not None:
            logger.debug("Model cache hit: %s/%s", athlete_id, kind.value)
            return cached  # type: ignore[return-value]

        logger.debug("Model cache miss: %s/%s, rebuilding", athlete_id, kind.value)
        model = compute()
        if should_store is None or should_store(model):
            self.put(athlete_id, kind, model)
        else:
            logger.debug("Not caching partial %s/%s model", athlete_id, kind.value)
        return model

    def invalidate(self, athlete_id: str) -> bool:
        """Drop every cached model of *athlete_id*.  Returns False if the store failed."""
        try:
            self.store.invalidate(athlete_id)
        except StorageUnavailableError as exc:
            logger.error("Model cache invalidation failed for %s, cache may be stale: %s", athlete_id, exc)
            return False
        logger.info("Invalidated cached models for athlete %s", athlete_id)
        return True
