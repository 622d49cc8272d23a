"""SQLAlchemy implementation of RewardItemRepository

Inventory is reserved with a conditional increment, which is the
compare-and-swap that keeps limited rewards from being oversold.
"""

from typing import List, Optional
from sqlalchemy import or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.libs.clock import utc_now
from economy.app.repositories.reward_item_repository import RewardItemRepository
from economy.domain.reward_item import RewardItem


class SqlAlchemyRewardItemRepository(RewardItemRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, item: RewardItem) -> RewardItem:
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def get(self, item_id: str, for_update: bool = False) -> Optional[RewardItem]:
        """
        Retrieve a reward with optional row-level locking

        Args:
            item_id: Reward ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            RewardItem if found, None otherwise
        """
        stmt = (
            select(RewardItem)
            .where(RewardItem.id == item_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, item: RewardItem) -> RewardItem:
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def list(self, active_only: bool = False) -> List[RewardItem]:
        stmt = select(RewardItem)
        if active_only:
            stmt = stmt.where(RewardItem.is_active == True)  # noqa: E712
        stmt = stmt.order_by(RewardItem.sort_order, RewardItem.name).execution_options(
            populate_existing=True
        )

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def reserve_copy(self, item_id: str) -> bool:
        stmt = (
            update(RewardItem)
            .where(
                RewardItem.id == item_id,
                RewardItem.is_active == True,  # noqa: E712
                or_(
                    RewardItem.copies_available.is_(None),
                    RewardItem.copies_redeemed < RewardItem.copies_available,
                ),
            )
            .values(copies_redeemed=RewardItem.copies_redeemed + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def release_copy(self, item_id: str) -> bool:
        stmt = (
            update(RewardItem)
            .where(RewardItem.id == item_id, RewardItem.copies_redeemed > 0)
            .values(copies_redeemed=RewardItem.copies_redeemed - 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
