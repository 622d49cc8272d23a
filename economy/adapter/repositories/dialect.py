"""Dialect helpers shared by the SQLAlchemy repositories"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel.ext.asyncio.session import AsyncSession


def insert_ignoring_conflicts(session: AsyncSession, model, index_elements: list[str], **values):
    """
    Build ``INSERT ... ON CONFLICT (index_elements) DO NOTHING`` for the
    session's database

    The statement's rowcount is 1 if the row was inserted and 0 if it
    already existed, which makes it an atomic insert-if-absent.
    """
    dialect = session.bind.dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(model.__table__)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model.__table__)
    else:
        raise NotImplementedError(f"insert-if-absent is not supported on {dialect}")
    return stmt.values(**values).on_conflict_do_nothing(index_elements=index_elements)
