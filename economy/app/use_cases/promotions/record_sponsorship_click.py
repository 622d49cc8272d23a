"""RecordSponsorshipClick Use Case"""

from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.repositories.promotion_repository import PromotionRepository
from .dtos import SponsorshipClickResponseDTO


class RecordSponsorshipClick:
    """Counts a click on a sponsored pitch. Clicks never touch the ledger."""

    def __init__(self, uow: UnitOfWork, promotion_repo: PromotionRepository):
        self.uow = uow
        self.promotion_repo = promotion_repo

    async def execute(self, promotion_id: str) -> Result[SponsorshipClickResponseDTO]:
        try:
            tracked = await self.promotion_repo.record_click(promotion_id, utc_now())
            if not tracked:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="SPONSORSHIP_NOT_FOUND",
                        message=f"No started sponsorship {promotion_id}",
                    )
                )
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RECORD_CLICK_FAILED",
                    message="Failed to track click",
                    reason=str(e),
                )
            )

        return Return.ok(SponsorshipClickResponseDTO(promotion_id=promotion_id, tracked=True))
