"""ReviewRedemption Use Case

Admin approval workflow for redemption requests.
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
from economy.domain.redemption_request import (
    RedemptionStatus,
    REFUNDING_STATUSES,
    can_transition,
)
from .dtos import ReviewAction, ReviewRedemptionCommandDTO, RedemptionResponseDTO
from .refund import refund_redemption

logger = logging.getLogger(__name__)

ACTION_TARGETS = {
    ReviewAction.APPROVE: RedemptionStatus.APPROVED,
    ReviewAction.DECLINE: RedemptionStatus.DECLINED,
    ReviewAction.FULFILL: RedemptionStatus.FULFILLED,
}


def invalid_transition(current: RedemptionStatus, target: RedemptionStatus) -> Error:
    return Error(
        code="INVALID_TRANSITION",
        message=f"Cannot move redemption from {current.value} to {target.value}",
        details={"current": current.value, "target": target.value},
    )


class ReviewRedemption:
    """
    Use Case: Approve, decline or fulfill a redemption

    Business Rules:
    1. Transitions follow ALLOWED_TRANSITIONS; terminal states never change
    2. The status update is conditional on the status read, so two admins
       acting at once cannot both succeed
    3. DECLINE requires a reason and refunds points_spent plus the reserved
       copy in the same transaction as the status change
    """

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

    async def execute(self, command: ReviewRedemptionCommandDTO) -> Result[RedemptionResponseDTO]:
        target = ACTION_TARGETS[command.action]
        reason = (command.reason or "").strip() or None

        if target == RedemptionStatus.DECLINED and reason is None:
            return Return.err(
                Error(code="REASON_REQUIRED", message="A reason is required to decline a redemption")
            )

        request = await self.redemption_repo.get(command.request_id)
        if request is None:
            return Return.err(
                Error(
                    code="REDEMPTION_NOT_FOUND",
                    message=f"Redemption {command.request_id} not found",
                )
            )

        request_id = request.id
        current = RedemptionStatus(request.status)
        if not can_transition(current, target):
            return Return.err(invalid_transition(current, target))

        refund_entry = None
        try:
            moved = await self.redemption_repo.transition(
                request_id,
                expected=current,
                new=target,
                now=utc_now(),
                reviewed_by=command.reviewer_id,
                rejection_reason=reason if target == RedemptionStatus.DECLINED else None,
            )
            if not moved:
                await self.uow.rollback()
                logger.warning(f"Redemption {request_id} changed concurrently; {command.action.value} rejected")
                return Return.err(invalid_transition(current, target))

            if target in REFUNDING_STATUSES:
                refund_entry = await refund_redemption(self.reward_repo, self.ledger_writer, request)

            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REVIEW_REDEMPTION_FAILED",
                    message="Failed to review redemption",
                    reason=str(e),
                )
            )

        logger.info(
            f"Redemption {request_id} {current.value} -> {target.value} by {command.reviewer_id}"
        )
        await dispatch_ledger_events(self.notification_service, [refund_entry])

        updated = await self.redemption_repo.get(request_id)
        return Return.ok(RedemptionResponseDTO.from_request(updated))
