"""Utility script to create the database schema."""
from __future__ import annotations

import structlog
from sqlalchemy.exc import SQLAlchemyError

from memberhub.core.logging import configure_logging

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata

logger = structlog.get_logger(__name__)


def create_all() -> None:
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    configure_logging()
    try:
        create_all()
        logger.info("db.tables_created")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
