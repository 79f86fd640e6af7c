"""
Shared API dependencies.

Reusable FastAPI dependencies for athlete identity, storage and the
readiness service.
"""

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from app.core.config import settings
from app.db.session import get_db
from app.db.store import SqlStore
from app.engine.cache import ModelCache
from app.services.readiness_service import ReadinessService, ServiceConfig


def get_athlete_id(x_athlete_id: str = Header(..., alias="X-Athlete-Id")) -> str:
    """Athlete identity supplied by the calling application."""
    athlete_id = x_athlete_id.strip()
    if not athlete_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="X-Athlete-Id header is empty")
    return athlete_id


def get_store(db: Session = Depends(get_db)) -> SqlStore:
    return SqlStore(db)


def get_readiness_service(store: SqlStore = Depends(get_store)) -> ReadinessService:
    config = ServiceConfig.from_settings(settings)
    return ReadinessService(store, ModelCache(store, config.cache_ttl_seconds), config=config)
