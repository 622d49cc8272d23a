"""ServeClubSponsorships Use Case

Returns the sponsorships to show in a club feed and counts the impressions.
"""

import logging
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.repositories.promotion_repository import PromotionRepository
from .dtos import ClubSponsorshipsResponseDTO, PromotionResponseDTO

logger = logging.getLogger(__name__)


class ServeClubSponsorships:
    """
    Use Case: Serve a club's sponsored pitches

    Business Rules:
    1. Only running sponsorships of the club are served, newest first
    2. Every served sponsorship gets one impression, which consumes one
       credit of its committed budget until the budget is used up
    """

    def __init__(self, uow: UnitOfWork, promotion_repo: PromotionRepository, limit: int = 10):
        self.uow = uow
        self.promotion_repo = promotion_repo
        self.limit = limit

    async def execute(self, club_id: str) -> Result[ClubSponsorshipsResponseDTO]:
        now = utc_now()

        try:
            served = await self.promotion_repo.record_impressions(club_id, now, limit=self.limit)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Serving sponsorships for club {club_id} failed: {e}")
            return Return.err(
                Error(
                    code="SERVE_SPONSORSHIPS_FAILED",
                    message="Failed to load sponsored pitches",
                    reason=str(e),
                )
            )

        return Return.ok(
            ClubSponsorshipsResponseDTO(
                club_id=club_id,
                sponsorships=[PromotionResponseDTO.from_promotion(p, now) for p in served],
                impressions_recorded=len(served),
            )
        )
