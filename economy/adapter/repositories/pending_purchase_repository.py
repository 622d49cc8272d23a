"""SQLAlchemy implementation of PendingPurchaseRepository"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.libs.clock import utc_now
from economy.app.repositories.pending_purchase_repository import PendingPurchaseRepository
from economy.domain.pending_purchase import PendingPurchase, PurchaseStatus


class SqlAlchemyPendingPurchaseRepository(PendingPurchaseRepository):
    """
    SQLAlchemy implementation of PendingPurchaseRepository

    Status changes are compare-and-swap updates on status = CREATED.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, purchase: PendingPurchase) -> PendingPurchase:
        self.session.add(purchase)
        await self.session.flush()
        await self.session.refresh(purchase)
        return purchase

    async def get_by_intent_id(
        self, payment_intent_id: str, for_update: bool = False
    ) -> Optional[PendingPurchase]:
        stmt = (
            select(PendingPurchase)
            .where(PendingPurchase.payment_intent_id == payment_intent_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_confirmed(self, purchase_id: str, confirmed_at: datetime) -> bool:
        stmt = (
            update(PendingPurchase)
            .where(
                PendingPurchase.id == purchase_id,
                PendingPurchase.status == PurchaseStatus.CREATED,
            )
            .values(
                status=PurchaseStatus.CONFIRMED,
                confirmed_at=confirmed_at,
                updated_at=confirmed_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def mark_failed(self, purchase_id: str, reason: str) -> bool:
        stmt = (
            update(PendingPurchase)
            .where(
                PendingPurchase.id == purchase_id,
                PendingPurchase.status == PurchaseStatus.CREATED,
            )
            .values(
                status=PurchaseStatus.FAILED,
                failure_reason=reason,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_stale(self, created_before: datetime, limit: int = 100) -> List[PendingPurchase]:
        stmt = (
            select(PendingPurchase)
            .where(
                PendingPurchase.status == PurchaseStatus.CREATED,
                PendingPurchase.created_at < created_before,
            )
            .order_by(PendingPurchase.created_at)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
