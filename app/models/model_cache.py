"""
Model cache database model.

One row per (athlete, model kind) holding the JSON payload of a tagged
cached model and its expiry.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


class CachedModelEntry(SQLModel, table=True):
    """A cached longitudinal model for one athlete."""

    __tablename__ = "model_cache"
    __table_args__ = (UniqueConstraint("athlete_id", "model_kind", name="uq_model_cache_athlete_kind"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    athlete_id: str = Field(nullable=False, max_length=64, index=True)
    model_kind: str = Field(nullable=False, max_length=32)

    payload: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    created_at: datetime.datetime = Field(nullable=False)
    expires_at: datetime.datetime = Field(nullable=False, index=True)
