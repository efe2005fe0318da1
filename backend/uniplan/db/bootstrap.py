from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from uniplan import models  # noqa: F401  registers every table on Base.metadata
from uniplan.db.base import Base
from uniplan.db.session import engine as default_engine

logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine | None = None) -> list[str]:
    """Create missing tables. Returns the names of the tables that were created.

    Column changes on existing tables go through alembic migrations.
    """
    engine = engine or default_engine
    existing = set(inspect(engine).get_table_names())
    Base.metadata.create_all(bind=engine)
    created = sorted(set(Base.metadata.tables) - existing)
    if created:
        logger.info("Created tables: %s", ", ".join(created))
    return created
