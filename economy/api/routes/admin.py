"""Admin Routes

Reward catalog management, redemption review, manual point and badge
grants, and the reconciliation report. Every route requires the admin role.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.adapter.repositories import (
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyRedemptionRequestRepository,
    SqlAlchemyRewardItemRepository,
    SqlAlchemyUserBadgeRepository,
    SqlAlchemyUserBalanceRepository,
)
from economy.adapter.services import SqlAlchemyUnitOfWork
from economy.api.auth import Principal, require_admin
from economy.api.error import ClientError
from economy.api.schemas.economy_request import ReviewRequestSchema
from economy.app.services import LedgerWriter, NotificationService
from economy.app.use_cases.badges import AwardBadge, AwardBadgeCommandDTO, AwardBadgeResponseDTO
from economy.app.use_cases.ledger import (
    AwardPoints,
    AwardPointsCommandDTO,
    AwardPointsResponseDTO,
    ReconcileBalances,
    ReconciliationResultDTO,
)
from economy.app.use_cases.rewards import (
    CreateReward,
    CreateRewardCommandDTO,
    ListRedemptions,
    ListRedemptionsResponseDTO,
    RedemptionResponseDTO,
    ReviewRedemption,
    ReviewRedemptionCommandDTO,
    RewardItemDTO,
    UpdateReward,
    UpdateRewardCommandDTO,
)
from economy.depends import get_notification_service, get_session
from economy.domain.redemption_request import RedemptionStatus

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.post("/rewards", response_model=RewardItemDTO, status_code=status.HTTP_201_CREATED)
async def create_reward(
    body: CreateRewardCommandDTO,
    session: AsyncSession = Depends(get_session),
):
    use_case = CreateReward(SqlAlchemyUnitOfWork(session), SqlAlchemyRewardItemRepository(session))
    result = await use_case.execute(body)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.patch("/rewards/{item_id}", response_model=RewardItemDTO)
async def update_reward(
    item_id: str,
    body: UpdateRewardCommandDTO,
    session: AsyncSession = Depends(get_session),
):
    """
    Partially update a catalog reward.

    Inventory can never drop below the copies already redeemed
    (409 INVALID_INVENTORY).
    """
    use_case = UpdateReward(SqlAlchemyUnitOfWork(session), SqlAlchemyRewardItemRepository(session))
    result = await use_case.execute(item_id, body)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/redemptions", response_model=ListRedemptionsResponseDTO)
async def list_redemptions(
    status_filter: Optional[RedemptionStatus] = Query(None, alias="status"),
    user_id: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    use_case = ListRedemptions(SqlAlchemyRedemptionRequestRepository(session))
    result = await use_case.execute(user_id=user_id, status=status_filter, limit=limit, offset=offset)
    return result.value


@router.post(
    "/redemptions/{request_id}/review",
    response_model=RedemptionResponseDTO,
    responses={
        409: {
            "description": "Transition not allowed from the current status",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_TRANSITION",
                            "message": "Cannot move redemption from FULFILLED to DECLINED",
                            "details": {"current": "FULFILLED", "target": "DECLINED"}
                        }
                    }
                }
            }
        }
    }
)
async def review_redemption(
    request_id: str,
    body: ReviewRequestSchema,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Approve, decline or fulfil a redemption request.

    Declining requires a reason and refunds the points and the reserved copy.
    """
    ledger_writer = LedgerWriter(
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyUserBalanceRepository(session),
    )
    use_case = ReviewRedemption(
        uow=SqlAlchemyUnitOfWork(session),
        redemption_repo=SqlAlchemyRedemptionRequestRepository(session),
        reward_repo=SqlAlchemyRewardItemRepository(session),
        ledger_writer=ledger_writer,
        notification_service=notification_service,
    )
    result = await use_case.execute(
        ReviewRedemptionCommandDTO(
            request_id=request_id,
            action=body.action,
            reviewer_id=principal.user_id,
            reason=body.reason,
        )
    )

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/points/award", response_model=AwardPointsResponseDTO)
async def award_points(
    body: AwardPointsCommandDTO,
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Record a point-earning engagement event for a user.

    Repeating an award with the same event type and reference returns the
    original entry with `idempotent: true`.
    """
    ledger_repo = SqlAlchemyLedgerEntryRepository(session)
    use_case = AwardPoints(
        uow=SqlAlchemyUnitOfWork(session),
        ledger_repo=ledger_repo,
        badge_repo=SqlAlchemyUserBadgeRepository(session),
        ledger_writer=LedgerWriter(ledger_repo, SqlAlchemyUserBalanceRepository(session)),
        notification_service=notification_service,
    )
    result = await use_case.execute(body)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/badges/award", response_model=AwardBadgeResponseDTO)
async def award_badge(
    body: AwardBadgeCommandDTO,
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    use_case = AwardBadge(
        uow=SqlAlchemyUnitOfWork(session),
        badge_repo=SqlAlchemyUserBadgeRepository(session),
        ledger_writer=LedgerWriter(
            SqlAlchemyLedgerEntryRepository(session),
            SqlAlchemyUserBalanceRepository(session),
        ),
        notification_service=notification_service,
    )
    result = await use_case.execute(body)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/reconciliation", response_model=ReconciliationResultDTO)
async def reconciliation_report(session: AsyncSession = Depends(get_session)):
    """Compare cached balances against the ledger projection for every user (read-only)"""
    use_case = ReconcileBalances(
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyUserBalanceRepository(session),
    )
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error)
    return result.value
