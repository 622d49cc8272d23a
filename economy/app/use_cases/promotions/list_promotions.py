"""List Promotions Use Case"""

from typing import Optional
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return
from economy.app.repositories.promotion_repository import PromotionRepository
from economy.domain.promotion import PromotionStatus
from .dtos import ListPromotionsResponseDTO, PromotionResponseDTO
from .expire_promotions import ExpirePromotions


class ListPromotions:
    """
    Lists an owner's promotions, newest first

    Runs the expiry sweep first so a list never shows an ended promotion
    as ACTIVE, whether or not the background expirer is running.
    """

    def __init__(self, promotion_repo: PromotionRepository, expire_promotions: ExpirePromotions):
        self.promotion_repo = promotion_repo
        self.expire_promotions = expire_promotions

    async def execute(
        self,
        owner_id: str,
        status: Optional[PromotionStatus] = None,
    ) -> Result[ListPromotionsResponseDTO]:
        now = utc_now()
        expired = await self.expire_promotions.execute(now)
        if expired.is_err():
            return Return.err(expired.error)

        promotions = await self.promotion_repo.list_for_owner(owner_id, status)
        return Return.ok(
            ListPromotionsResponseDTO(
                promotions=[PromotionResponseDTO.from_promotion(p, now) for p in promotions],
                total=len(promotions),
            )
        )
