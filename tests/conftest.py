import pytest
from unittest.mock import AsyncMock, MagicMock


class ExpiringRow:
    """Stands in for a loaded ORM row whose attributes expire on rollback"""

    def __init__(self, target):
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_expired", False)

    def expire(self):
        object.__setattr__(self, "_expired", True)

    def __getattr__(self, name):
        if object.__getattribute__(self, "_expired"):
            raise RuntimeError(f"'{name}' read from an expired row")
        return getattr(object.__getattribute__(self, "_target"), name)

    def __setattr__(self, name, value):
        if object.__getattribute__(self, "_expired"):
            raise RuntimeError(f"'{name}' written to an expired row")
        setattr(object.__getattribute__(self, "_target"), name, value)


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def expire_on_rollback(mock_uow):
    """Wrap rows so that reading them after uow.rollback() fails like an async session does"""

    def _wrap(*targets):
        rows = [ExpiringRow(target) for target in targets]

        async def _rollback():
            for row in rows:
                row.expire()

        mock_uow.rollback = AsyncMock(side_effect=_rollback)
        return rows[0] if len(rows) == 1 else rows

    return _wrap
