from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def insert_for(db: AsyncSession):
    """Dialect ``insert`` construct for the session's engine, so callers can use ON CONFLICT."""
    if db.get_bind().dialect.name == "postgresql":
        return postgresql.insert
    return sqlite.insert
