"""SQLAlchemy implementation of PromotionRepository"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import case, func, update
from sqlalchemy.orm import aliased
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.app.repositories.promotion_repository import PromotionRepository
from economy.domain.pricing import PromotionType
from economy.domain.promotion import Promotion, PromotionStatus
from economy.domain.promotion_subject_lock import PromotionSubjectLock, subject_key
from .dialect import insert_ignoring_conflicts


class SqlAlchemyPromotionRepository(PromotionRepository):
    """
    SQLAlchemy implementation of PromotionRepository

    Features:
    - Bulk expiry in a single conditional UPDATE
    - Cancellation guarded on status and start time
    - Per-subject lock rows for promotion purchases
    - Impression and click counters updated in place
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, promotion: Promotion) -> Promotion:
        self.session.add(promotion)
        await self.session.flush()
        await self.session.refresh(promotion)
        return promotion

    async def get(self, promotion_id: str, for_update: bool = False) -> Optional[Promotion]:
        stmt = (
            select(Promotion)
            .where(Promotion.id == promotion_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_owner(
        self,
        owner_id: str,
        status: Optional[PromotionStatus] = None,
        promotion_type: Optional[PromotionType] = None,
    ) -> List[Promotion]:
        stmt = select(Promotion).where(Promotion.owner_id == owner_id)
        if status is not None:
            stmt = stmt.where(Promotion.status == status)
        if promotion_type is not None:
            stmt = stmt.where(Promotion.promotion_type == promotion_type)
        stmt = stmt.order_by(Promotion.created_at.desc()).execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def latest_active_boost_end(self, pitch_id: str, now: datetime) -> Optional[datetime]:
        stmt = select(func.max(Promotion.ends_at)).where(
            Promotion.promotion_type == PromotionType.BOOST,
            Promotion.subject_id == pitch_id,
            Promotion.status == PromotionStatus.ACTIVE,
            Promotion.ends_at > now,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_overlapping_sponsorship(
        self,
        pitch_id: str,
        club_id: str,
        starts_at: datetime,
        ends_at: datetime,
    ) -> Optional[Promotion]:
        stmt = (
            select(Promotion)
            .where(
                Promotion.promotion_type == PromotionType.SPONSORSHIP,
                Promotion.subject_id == pitch_id,
                Promotion.club_id == club_id,
                Promotion.status == PromotionStatus.ACTIVE,
                Promotion.starts_at < ends_at,
                Promotion.ends_at > starts_at,
            )
            .order_by(Promotion.ends_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def expire_due(self, now: datetime) -> int:
        stmt = (
            update(Promotion)
            .where(Promotion.status == PromotionStatus.ACTIVE, Promotion.ends_at <= now)
            .values(status=PromotionStatus.EXPIRED, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def cancel(self, promotion_id: str, now: datetime) -> bool:
        stmt = (
            update(Promotion)
            .where(
                Promotion.id == promotion_id,
                Promotion.status == PromotionStatus.ACTIVE,
                Promotion.starts_at > now,
            )
            .values(status=PromotionStatus.CANCELLED, cancelled_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def lock_subject(
        self,
        promotion_type: PromotionType,
        subject_id: str,
        club_id: Optional[str],
        now: datetime,
    ) -> None:
        key = subject_key(promotion_type, subject_id, club_id)
        await self.session.execute(
            insert_ignoring_conflicts(
                self.session, PromotionSubjectLock, ["subject_key"], subject_key=key, locked_at=now
            )
        )
        # Row lock on PostgreSQL, database write lock on SQLite
        stmt = (
            update(PromotionSubjectLock)
            .where(PromotionSubjectLock.subject_key == key)
            .values(locked_at=now)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def record_impressions(self, club_id: str, now: datetime, limit: int = 10) -> List[Promotion]:
        running = aliased(Promotion)
        served = (
            select(running.id)
            .where(
                running.promotion_type == PromotionType.SPONSORSHIP,
                running.club_id == club_id,
                running.status == PromotionStatus.ACTIVE,
                running.starts_at <= now,
                running.ends_at > now,
            )
            .order_by(running.created_at.desc())
            .limit(limit)
        )
        stmt = (
            update(Promotion)
            .where(Promotion.id.in_(served))
            .values(
                impressions=Promotion.impressions + 1,
                credits_consumed=case(
                    (Promotion.credits_consumed < Promotion.credits_committed, Promotion.credits_consumed + 1),
                    else_=Promotion.credits_consumed,
                ),
            )
            .returning(Promotion.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        served_ids = list(result.scalars().all())
        if not served_ids:
            return []

        stmt = (
            select(Promotion)
            .where(Promotion.id.in_(served_ids))
            .order_by(Promotion.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def record_click(self, promotion_id: str, now: datetime) -> bool:
        stmt = (
            update(Promotion)
            .where(
                Promotion.id == promotion_id,
                Promotion.promotion_type == PromotionType.SPONSORSHIP,
                Promotion.starts_at <= now,
            )
            .values(clicks=Promotion.clicks + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
