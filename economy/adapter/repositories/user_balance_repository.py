"""SQLAlchemy implementation of UserBalanceRepository

Balance changes are single conditional UPDATE statements. The row lock
taken by the UPDATE (or the database write lock on SQLite) serializes
concurrent debits of the same user, and the WHERE clause makes an
overdraft a no-op instead of a constraint violation.
"""

from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.libs.clock import utc_now
from economy.app.repositories.user_balance_repository import UserBalanceRepository
from economy.domain.user_balance import UserBalance
from .dialect import insert_ignoring_conflicts


class SqlAlchemyUserBalanceRepository(UserBalanceRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str, for_update: bool = False) -> Optional[UserBalance]:
        """
        Retrieve the cached balance with optional row-level locking

        Args:
            user_id: User identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            UserBalance if found, None otherwise
        """
        stmt = (
            select(UserBalance)
            .where(UserBalance.user_id == user_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def ensure_exists(self, user_id: str) -> None:
        now = utc_now()
        stmt = insert_ignoring_conflicts(
            self.session,
            UserBalance,
            ["user_id"],
            user_id=user_id,
            points=0,
            credit_balance=0,
            created_at=now,
            updated_at=now,
        )
        await self.session.execute(stmt)

    async def apply_points_delta(self, user_id: str, delta: int) -> bool:
        stmt = (
            update(UserBalance)
            .where(UserBalance.user_id == user_id, UserBalance.points + delta >= 0)
            .values(points=UserBalance.points + delta, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def apply_credit_delta(self, user_id: str, delta: int) -> bool:
        stmt = (
            update(UserBalance)
            .where(UserBalance.user_id == user_id, UserBalance.credit_balance + delta >= 0)
            .values(credit_balance=UserBalance.credit_balance + delta, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_all(self) -> List[UserBalance]:
        stmt = (
            select(UserBalance)
            .order_by(UserBalance.user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
