"""SQLAlchemy implementation of RedemptionRequestRepository"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.app.repositories.redemption_request_repository import RedemptionRequestRepository
from economy.domain.redemption_request import RedemptionRequest, RedemptionStatus


class SqlAlchemyRedemptionRequestRepository(RedemptionRequestRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, request: RedemptionRequest) -> RedemptionRequest:
        self.session.add(request)
        await self.session.flush()
        await self.session.refresh(request)
        return request

    async def get(self, request_id: str, for_update: bool = False) -> Optional[RedemptionRequest]:
        stmt = (
            select(RedemptionRequest)
            .where(RedemptionRequest.id == request_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(
        self,
        user_id: Optional[str] = None,
        status: Optional[RedemptionStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[RedemptionRequest]:
        stmt = select(RedemptionRequest)
        if user_id is not None:
            stmt = stmt.where(RedemptionRequest.user_id == user_id)
        if status is not None:
            stmt = stmt.where(RedemptionRequest.status == status)
        stmt = (
            stmt.order_by(RedemptionRequest.created_at.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def transition(
        self,
        request_id: str,
        expected: RedemptionStatus,
        new: RedemptionStatus,
        now: datetime,
        reviewed_by: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        values = {"status": new, "updated_at": now}
        if reviewed_by is not None:
            values["reviewed_by"] = reviewed_by
            values["reviewed_at"] = now
        if rejection_reason is not None:
            values["rejection_reason"] = rejection_reason
        if new == RedemptionStatus.FULFILLED:
            values["fulfilled_at"] = now

        stmt = (
            update(RedemptionRequest)
            .where(RedemptionRequest.id == request_id, RedemptionRequest.status == expected)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
