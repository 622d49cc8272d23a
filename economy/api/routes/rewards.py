"""Reward catalog and redemption routes (requester side)"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.adapter.repositories import (
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyRedemptionRequestRepository,
    SqlAlchemyRewardItemRepository,
    SqlAlchemyUserBalanceRepository,
)
from economy.adapter.services import SqlAlchemyUnitOfWork
from economy.api.auth import Principal, get_current_principal
from economy.api.error import ClientError
from economy.api.schemas.economy_request import RedemptionRequestSchema
from economy.app.services import LedgerWriter, NotificationService
from economy.app.use_cases.rewards import (
    CancelRedemption,
    ListRedemptions,
    ListRedemptionsResponseDTO,
    ListRewards,
    ListRewardsResponseDTO,
    RedemptionResponseDTO,
    RequestRedemption,
    RequestRedemptionCommandDTO,
)
from economy.depends import get_notification_service, get_session

router = APIRouter(prefix="/economy/rewards", tags=["Rewards"])


def _ledger_writer(session: AsyncSession) -> LedgerWriter:
    return LedgerWriter(
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyUserBalanceRepository(session),
    )


@router.get("", response_model=ListRewardsResponseDTO)
async def list_rewards(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    result = await ListRewards(SqlAlchemyRewardItemRepository(session)).execute(active_only=True)
    return result.value


@router.post(
    "/redemptions",
    response_model=RedemptionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Insufficient points",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_POINTS",
                            "message": "Insufficient points",
                            "details": {"current": 120, "required": 500, "shortfall": 380}
                        }
                    }
                }
            }
        },
        409: {"description": "Reward inactive or out of stock"},
    }
)
async def request_redemption(
    body: RedemptionRequestSchema,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Spend points on a catalog reward.

    Points are debited and one copy is reserved immediately; the request
    then waits for admin review. A declined or cancelled request gives the
    points and the copy back.
    """
    use_case = RequestRedemption(
        uow=SqlAlchemyUnitOfWork(session),
        reward_repo=SqlAlchemyRewardItemRepository(session),
        redemption_repo=SqlAlchemyRedemptionRequestRepository(session),
        ledger_writer=_ledger_writer(session),
        notification_service=notification_service,
    )
    result = await use_case.execute(
        RequestRedemptionCommandDTO(user_id=principal.user_id, reward_item_id=body.reward_item_id)
    )

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/redemptions/me", response_model=ListRedemptionsResponseDTO)
async def my_redemptions(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    use_case = ListRedemptions(SqlAlchemyRedemptionRequestRepository(session))
    result = await use_case.execute(user_id=principal.user_id, limit=limit, offset=offset)
    return result.value


@router.post("/redemptions/{request_id}/cancel", response_model=RedemptionResponseDTO)
async def cancel_redemption(
    request_id: str,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """Withdraw a pending redemption; the points are refunded"""
    use_case = CancelRedemption(
        uow=SqlAlchemyUnitOfWork(session),
        redemption_repo=SqlAlchemyRedemptionRequestRepository(session),
        reward_repo=SqlAlchemyRewardItemRepository(session),
        ledger_writer=_ledger_writer(session),
        notification_service=notification_service,
    )
    result = await use_case.execute(request_id, principal.user_id)

    if result.is_err():
        raise ClientError(result.error)
    return result.value
