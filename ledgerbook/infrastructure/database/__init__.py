"""
Database initialization and session management.
"""

import logging
from collections.abc import Generator
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from ledgerbook.core.config import get_settings

logger = logging.getLogger(__name__)

DATABASE_URL = get_settings().database_url

if "sqlite" in DATABASE_URL:
    engine = create_engine(DATABASE_URL, echo=False, connect_args={"check_same_thread": False})
else:
    engine = create_engine(DATABASE_URL, echo=False)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency - Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Initialize database - create all tables."""
    from sqlmodel import SQLModel

    from ledgerbook.infrastructure.database import models  # noqa: F401  registers tables

    bind = bind or engine
    url = bind.url
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    SQLModel.metadata.create_all(bind=bind)
    logger.info("Database initialized at %s", url.render_as_string(hide_password=True))


if __name__ == "__main__":
    from ledgerbook.core.logging import setup_logging

    setup_logging()
    init_db()
