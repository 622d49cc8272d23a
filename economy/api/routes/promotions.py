"""Promotion Routes

Boosts and club sponsorships paid for with credits.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.adapter.repositories import (
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyPromotionRepository,
    SqlAlchemyUserBalanceRepository,
)
from economy.adapter.services import SqlAlchemyUnitOfWork
from economy.api.auth import Principal, get_current_principal
from economy.api.error import ClientError
from economy.api.schemas.economy_request import BoostRequestSchema, SponsorshipRequestSchema
from economy.app.services import LedgerWriter, NotificationService
from economy.app.use_cases.promotions import (
    CancelPromotion,
    CancelPromotionResponseDTO,
    CreateBoost,
    CreateBoostCommandDTO,
    CreateSponsorship,
    CreateSponsorshipCommandDTO,
    ClubSponsorshipsResponseDTO,
    ExpirePromotions,
    GetSponsorshipAnalytics,
    ListPromotions,
    ListPromotionsResponseDTO,
    PromotionResponseDTO,
    QuotePromotion,
    QuotePromotionResponseDTO,
    RecordSponsorshipClick,
    ServeClubSponsorships,
    SponsorshipAnalyticsResponseDTO,
    SponsorshipClickResponseDTO,
)
from economy.depends import get_notification_service, get_session
from economy.domain.pricing import PromotionType
from economy.domain.promotion import PromotionStatus

router = APIRouter(prefix="/economy/promotions", tags=["Promotions"])

INSUFFICIENT_CREDITS_EXAMPLE = {
    "description": "Insufficient credits",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INSUFFICIENT_CREDITS",
                    "message": "Insufficient credits",
                    "details": {"current": 100, "required": 252, "shortfall": 152}
                }
            }
        }
    }
}


def _ledger_writer(session: AsyncSession) -> LedgerWriter:
    return LedgerWriter(
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyUserBalanceRepository(session),
    )


@router.get("", response_model=ListPromotionsResponseDTO)
async def list_promotions(
    status_filter: Optional[PromotionStatus] = Query(None, alias="status"),
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Caller's promotions, newest first. Lapsed promotions are expired before listing."""
    uow = SqlAlchemyUnitOfWork(session)
    promotion_repo = SqlAlchemyPromotionRepository(session)
    use_case = ListPromotions(promotion_repo, ExpirePromotions(uow, promotion_repo))
    result = await use_case.execute(principal.user_id, status=status_filter)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/quote", response_model=QuotePromotionResponseDTO)
async def quote_promotion(
    promotion_type: PromotionType = Query(...),
    duration_days: int = Query(...),
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Price a promotion against the caller's current credit balance without buying it"""
    result = await QuotePromotion(_ledger_writer(session)).execute(
        principal.user_id, promotion_type, duration_days
    )

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/boosts",
    response_model=PromotionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={402: INSUFFICIENT_CREDITS_EXAMPLE},
)
async def create_boost(
    body: BoostRequestSchema,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Boost a pitch for 1-30 days.

    The full cost is debited up front. If the pitch already has an active
    boost, the new one starts when the latest existing boost ends.

    **Returns:**
    - 201: The created boost
    - 400: Duration outside 1-30 days
    - 402: Not enough credits (details carry current/required/shortfall)
    """
    use_case = CreateBoost(
        uow=SqlAlchemyUnitOfWork(session),
        promotion_repo=SqlAlchemyPromotionRepository(session),
        ledger_writer=_ledger_writer(session),
        notification_service=notification_service,
    )
    result = await use_case.execute(
        CreateBoostCommandDTO(
            owner_id=principal.user_id,
            pitch_id=body.pitch_id,
            duration_days=body.duration_days,
        )
    )

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/sponsorships",
    response_model=PromotionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: INSUFFICIENT_CREDITS_EXAMPLE,
        409: {"description": "Pitch already sponsored in this club for an overlapping window"},
    },
)
async def create_sponsorship(
    body: SponsorshipRequestSchema,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Sponsor a pitch in a club feed for 1-90 days, starting now.

    **Returns:**
    - 201: The created sponsorship
    - 400: Duration outside 1-90 days
    - 402: Not enough credits
    - 409: PROMOTION_CONFLICT with an active sponsorship of the same pitch and club
    """
    use_case = CreateSponsorship(
        uow=SqlAlchemyUnitOfWork(session),
        promotion_repo=SqlAlchemyPromotionRepository(session),
        ledger_writer=_ledger_writer(session),
        notification_service=notification_service,
    )
    result = await use_case.execute(
        CreateSponsorshipCommandDTO(
            owner_id=principal.user_id,
            pitch_id=body.pitch_id,
            club_id=body.club_id,
            duration_days=body.duration_days,
            frequency=body.frequency,
        )
    )

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/sponsorships/analytics", response_model=SponsorshipAnalyticsResponseDTO)
async def sponsorship_analytics(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """
    Performance of the caller's sponsorships, newest first.

    Each row reports budget, credits consumed, impressions, clicks, CTR
    (percent), cost per impression, cost per click and days remaining.
    """
    result = await GetSponsorshipAnalytics(SqlAlchemyPromotionRepository(session)).execute(principal.user_id)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/sponsorships/club/{club_id}", response_model=ClubSponsorshipsResponseDTO)
async def club_sponsorships(
    club_id: str,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Running sponsorships for a club feed. Serving them counts one impression each."""
    use_case = ServeClubSponsorships(SqlAlchemyUnitOfWork(session), SqlAlchemyPromotionRepository(session))
    result = await use_case.execute(club_id)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/sponsorships/{promotion_id}/click", response_model=SponsorshipClickResponseDTO)
async def sponsorship_click(
    promotion_id: str,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Track a click on a sponsored pitch"""
    use_case = RecordSponsorshipClick(SqlAlchemyUnitOfWork(session), SqlAlchemyPromotionRepository(session))
    result = await use_case.execute(promotion_id)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{promotion_id}/cancel", response_model=CancelPromotionResponseDTO)
async def cancel_promotion(
    promotion_id: str,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """Cancel a queued boost that has not started yet; its credits are refunded in full"""
    use_case = CancelPromotion(
        uow=SqlAlchemyUnitOfWork(session),
        promotion_repo=SqlAlchemyPromotionRepository(session),
        ledger_writer=_ledger_writer(session),
        notification_service=notification_service,
    )
    result = await use_case.execute(promotion_id, principal.user_id)

    if result.is_err():
        raise ClientError(result.error)
    return result.value
