"""SQLAlchemy implementation of UserBadgeRepository"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.libs.clock import utc_now
from economy.app.repositories.user_badge_repository import UserBadgeRepository
from economy.domain.base import generate_uuid
from economy.domain.user_badge import UserBadge
from .dialect import insert_ignoring_conflicts


class SqlAlchemyUserBadgeRepository(UserBadgeRepository):
    """
    Badge awards rely on the (user_id, badge_code) unique constraint:
    concurrent awards of the same badge insert exactly one row.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert_if_absent(self, user_id: str, badge_code: str) -> bool:
        stmt = insert_ignoring_conflicts(
            self.session,
            UserBadge,
            ["user_id", "badge_code"],
            id=generate_uuid(),
            user_id=user_id,
            badge_code=badge_code,
            awarded_at=utc_now(),
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_for_user(self, user_id: str) -> List[UserBadge]:
        stmt = (
            select(UserBadge)
            .where(UserBadge.user_id == user_id)
            .order_by(UserBadge.awarded_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
