"""RequestRedemption Use Case

Spends points on a catalog reward and opens a PENDING request.
"""

import logging
from typing import Optional
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.services.ledger_writer import LedgerWriter
from economy.app.services.notification_service import NotificationService, dispatch_ledger_events
from economy.app.repositories.reward_item_repository import RewardItemRepository
from economy.app.repositories.redemption_request_repository import RedemptionRequestRepository
from economy.domain.ledger_entry import EventType, LedgerEntry, LedgerEntryKind
from economy.domain.redemption_request import RedemptionRequest, RedemptionStatus
from .dtos import RequestRedemptionCommandDTO, RedemptionResponseDTO

logger = logging.getLogger(__name__)


class RequestRedemption:
    """
    Use Case: Redeem points for a reward

    Business Rules:
    1. The reward must exist and be active
    2. A copy is reserved with a conditional increment, so limited
       inventory can never be oversold
    3. points_cost is debited through the ledger writer; the request keeps
       a snapshot of it in points_spent
    4. Reservation, debit and request commit together or not at all
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reward_repo: RewardItemRepository,
        redemption_repo: RedemptionRequestRepository,
        ledger_writer: LedgerWriter,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.reward_repo = reward_repo
        self.redemption_repo = redemption_repo
        self.ledger_writer = ledger_writer
        self.notification_service = notification_service

    async def execute(self, command: RequestRedemptionCommandDTO) -> Result[RedemptionResponseDTO]:
        # Step 1: Load reward
        item = await self.reward_repo.get(command.reward_item_id)
        if item is None:
            return Return.err(
                Error(code="REWARD_NOT_FOUND", message=f"Reward {command.reward_item_id} not found")
            )
        if not item.is_active:
            return Return.err(
                Error(code="REWARD_INACTIVE", message=f"Reward {item.name} is not currently offered")
            )

        # A rollback expires the ORM instance; only these values are used below
        item_id = item.id
        name = item.name
        points_cost = item.points_cost

        request = RedemptionRequest(
            user_id=command.user_id,
            reward_item_id=item_id,
            points_spent=points_cost,
            status=RedemptionStatus.PENDING,
        )

        try:
            # Step 2: Reserve a copy
            if not await self.reward_repo.reserve_copy(item_id):
                await self.uow.rollback()
                logger.warning(f"Reward {item_id} exhausted; redemption by {command.user_id} rejected")
                return Return.err(
                    Error(
                        code="REWARD_UNAVAILABLE",
                        message=f"Reward {name} is out of stock",
                    )
                )
            request.copy_reserved = True

            # Step 3: Debit points
            entry = await self.ledger_writer.post(
                LedgerEntry.create(
                    user_id=command.user_id,
                    kind=LedgerEntryKind.POINT_SPEND,
                    amount=-points_cost,
                    event_type=EventType.REWARD_REDEEMED,
                    related_entity_id=request.id,
                )
            )
            if entry is None:
                await self.uow.rollback()
                current = await self.ledger_writer.point_balance(command.user_id)
                return Return.err(
                    Error(
                        code="INSUFFICIENT_POINTS",
                        message=f"Insufficient points. Required: {points_cost}, Available: {current}",
                        details={
                            "current": current,
                            "required": points_cost,
                            "shortfall": points_cost - current,
                        },
                    )
                )

            # Step 4: Open the request
            created = await self.redemption_repo.create(request)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REQUEST_REDEMPTION_FAILED",
                    message="Failed to request redemption",
                    reason=str(e),
                )
            )

        logger.info(
            f"Redemption {created.id} opened by {command.user_id} for reward {item_id} "
            f"({points_cost} points)"
        )
        await dispatch_ledger_events(self.notification_service, [entry])

        return Return.ok(RedemptionResponseDTO.from_request(created))
