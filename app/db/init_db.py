"""
Database initialization.

Creates all tables.  Production databases are migrated with Alembic;
this is for local development and SQLite files.
"""

import logging

from sqlmodel import SQLModel

from app.core.logging import setup_logging
from app.db.session import engine

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create every SQLModel table that does not exist yet."""
    # Import all models so SQLModel.metadata has them
    import app.db.base  # noqa: F401

    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("Database initialization complete")


if __name__ == "__main__":
    setup_logging()
    init_db()
