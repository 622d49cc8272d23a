"""CancelRedemption Use Case

Lets a requester withdraw a redemption that has not been reviewed.
"""

import logging
from typing import Optional
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.services.ledger_writer import LedgerWriter
from economy.app.services.notification_service import NotificationService, dispatch_ledger_events
from economy.app.repositories.reward_item_repository import RewardItemRepository
from economy.app.repositories.redemption_request_repository import RedemptionRequestRepository
from economy.domain.redemption_request import RedemptionStatus
from .dtos import RedemptionResponseDTO
from .refund import refund_redemption
from .review_redemption import invalid_transition

logger = logging.getLogger(__name__)


class CancelRedemption:
    """PENDING -> CANCELLED by the requester, with the same reversal as a decline"""

    def __init__(
        self,
        uow: UnitOfWork,
        redemption_repo: RedemptionRequestRepository,
        reward_repo: RewardItemRepository,
        ledger_writer: LedgerWriter,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.redemption_repo = redemption_repo
        self.reward_repo = reward_repo
        self.ledger_writer = ledger_writer
        self.notification_service = notification_service

    async def execute(self, request_id: str, user_id: str) -> Result[RedemptionResponseDTO]:
        request = await self.redemption_repo.get(request_id)
        if request is None:
            return Return.err(
                Error(code="REDEMPTION_NOT_FOUND", message=f"Redemption {request_id} not found")
            )

        if request.user_id != user_id:
            return Return.err(
                Error(code="REDEMPTION_FORBIDDEN", message="Redemption belongs to another user")
            )

        current = RedemptionStatus(request.status)
        if current != RedemptionStatus.PENDING:
            return Return.err(invalid_transition(current, RedemptionStatus.CANCELLED))

        try:
            moved = await self.redemption_repo.transition(
                request.id,
                expected=RedemptionStatus.PENDING,
                new=RedemptionStatus.CANCELLED,
                now=utc_now(),
            )
            if not moved:
                await self.uow.rollback()
                return Return.err(invalid_transition(current, RedemptionStatus.CANCELLED))

            refund_entry = await refund_redemption(self.reward_repo, self.ledger_writer, request)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CANCEL_REDEMPTION_FAILED",
                    message="Failed to cancel redemption",
                    reason=str(e),
                )
            )

        logger.info(f"Redemption {request.id} cancelled by requester {user_id}")
        await dispatch_ledger_events(self.notification_service, [refund_entry])

        updated = await self.redemption_repo.get(request.id)
        return Return.ok(RedemptionResponseDTO.from_request(updated))
