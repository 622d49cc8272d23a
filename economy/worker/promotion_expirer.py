"""Promotion Expiry Worker

Moves ACTIVE promotions whose window has ended to EXPIRED.
"""

import asyncio
import logging
from typing import Optional
from economy.adapter.repositories import SqlAlchemyPromotionRepository
from economy.adapter.services import SqlAlchemyUnitOfWork
from economy.app.use_cases.promotions import ExpirePromotions, ExpirePromotionsResultDTO
from economy.config import ApplicationConfig
from .base import PeriodicWorker, run_cli

logger = logging.getLogger(__name__)


class PromotionExpirerWorker(PeriodicWorker):
    name = "PromotionExpirerWorker"
    enabled_setting = "PROMOTION_EXPIRY_ENABLED"
    default_interval = ApplicationConfig.PROMOTION_EXPIRY_INTERVAL_SECONDS

    async def run_once(self) -> Optional[ExpirePromotionsResultDTO]:
        if not self.enabled:
            logger.info("Promotion expiry is disabled, skipping")
            return None

        async with self.async_session_factory() as session:
            use_case = ExpirePromotions(
                uow=SqlAlchemyUnitOfWork(session),
                promotion_repo=SqlAlchemyPromotionRepository(session),
            )
            result = await use_case.execute()

        if result.is_err():
            raise RuntimeError(f"Promotion expiry failed: {result.error.message}")
        return result.value

    def describe(self, result: ExpirePromotionsResultDTO) -> str:
        return f"{result.expired} promotions expired"


if __name__ == "__main__":
    asyncio.run(run_cli(PromotionExpirerWorker, "Promotion Expiry Worker"))
