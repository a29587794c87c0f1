"""
Dialect-native INSERT ... ON CONFLICT support.

PostgreSQL and SQLite both implement ON CONFLICT DO UPDATE; the
statement class is picked from the session's bound dialect.
"""

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


def dialect_insert(session: AsyncSession, model):
    """Return an upsert-capable insert() for model on the session's dialect."""
    dialect = session.get_bind().dialect.name

    if dialect == "postgresql":
        return pg_insert(model)
    if dialect == "sqlite":
        return sqlite_insert(model)

    raise NotImplementedError(f"Upsert is not supported for dialect '{dialect}'")
