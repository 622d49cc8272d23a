"""GetSponsorshipAnalytics Use Case"""

from economy.libs.clock import utc_now
from economy.libs.result import Result, Return
from economy.app.repositories.promotion_repository import PromotionRepository
from economy.domain.pricing import PromotionType
from .dtos import SponsorshipAnalyticsDTO, SponsorshipAnalyticsResponseDTO


class GetSponsorshipAnalytics:
    """
    Per-sponsorship performance for an owner, newest first

    Reports budget against credits consumed, impressions, clicks,
    click-through rate, cost per impression and per click, and the days
    left in each window.
    """

    def __init__(self, promotion_repo: PromotionRepository):
        self.promotion_repo = promotion_repo

    async def execute(self, owner_id: str) -> Result[SponsorshipAnalyticsResponseDTO]:
        now = utc_now()
        promotions = await self.promotion_repo.list_for_owner(
            owner_id, promotion_type=PromotionType.SPONSORSHIP
        )
        rows = [SponsorshipAnalyticsDTO.from_promotion(p, now) for p in promotions]

        return Return.ok(
            SponsorshipAnalyticsResponseDTO(
                sponsorships=rows,
                total=len(rows),
                total_impressions=sum(r.impressions for r in rows),
                total_clicks=sum(r.clicks for r in rows),
                total_credits_consumed=sum(r.credits_consumed for r in rows),
            )
        )
