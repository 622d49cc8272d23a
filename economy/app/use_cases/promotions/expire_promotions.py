"""ExpirePromotions Use Case

Closes promotions whose window has ended. Expiry never refunds.
"""

import logging
from datetime import datetime
from typing import Optional
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.repositories.promotion_repository import PromotionRepository
from .dtos import ExpirePromotionsResultDTO

logger = logging.getLogger(__name__)


class ExpirePromotions:

    def __init__(self, uow: UnitOfWork, promotion_repo: PromotionRepository):
        self.uow = uow
        self.promotion_repo = promotion_repo

    async def execute(self, now: Optional[datetime] = None) -> Result[ExpirePromotionsResultDTO]:
        """
        Transition every ACTIVE promotion with ends_at <= now to EXPIRED

        Args:
            now: Reference time (defaults to utc_now)

        Returns:
            Result[ExpirePromotionsResultDTO]: Number of promotions expired
        """
        now = now or utc_now()
        try:
            expired = await self.promotion_repo.expire_due(now)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Promotion expiry failed: {e}")
            return Return.err(
                Error(
                    code="EXPIRE_PROMOTIONS_FAILED",
                    message="Failed to expire promotions",
                    reason=str(e),
                )
            )

        if expired:
            logger.info(f"Expired {expired} promotions")

        return Return.ok(ExpirePromotionsResultDTO(expired=expired, run_at=now))
