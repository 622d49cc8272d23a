"""CancelPromotion Use Case

Withdraws a queued promotion before it starts and refunds its credits.
"""

import logging
from datetime import datetime
from typing import Optional
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.services.ledger_writer import LedgerWriter
from economy.app.services.notification_service import NotificationService, dispatch_ledger_events
from economy.app.repositories.ledger_entry_repository import DuplicateLedgerEntryError
from economy.app.repositories.promotion_repository import PromotionRepository
from economy.domain.ledger_entry import EventType, LedgerEntry, LedgerEntryKind
from economy.domain.promotion import PromotionStatus
from .dtos import CancelPromotionResponseDTO, PromotionResponseDTO

logger = logging.getLogger(__name__)


class CancelPromotion:
    """
    Use Case: Cancel a promotion that has not started

    Business Rules:
    1. Only the owner may cancel
    2. Only ACTIVE promotions whose window lies in the future (queued boosts)
    3. The full credits_committed is refunded exactly once
    4. Running promotions are never refunded, not even partially
    """

    def __init__(
        self,
        uow: UnitOfWork,
        promotion_repo: PromotionRepository,
        ledger_writer: LedgerWriter,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.promotion_repo = promotion_repo
        self.ledger_writer = ledger_writer
        self.notification_service = notification_service

    async def execute(
        self,
        promotion_id: str,
        owner_id: str,
        now: Optional[datetime] = None,
    ) -> Result[CancelPromotionResponseDTO]:
        now = now or utc_now()

        promotion = await self.promotion_repo.get(promotion_id)
        if promotion is None:
            return Return.err(
                Error(code="PROMOTION_NOT_FOUND", message=f"Promotion {promotion_id} not found")
            )

        if promotion.owner_id != owner_id:
            return Return.err(
                Error(code="PROMOTION_FORBIDDEN", message="Promotion belongs to another user")
            )

        status = promotion.effective_status(now)
        if status != PromotionStatus.ACTIVE:
            return Return.err(
                Error(
                    code="PROMOTION_NOT_ACTIVE",
                    message=f"Promotion is {status.value} and cannot be cancelled",
                )
            )

        # A rollback expires the ORM instance; only these values are used below
        credits = promotion.credits_committed

        if promotion.starts_at <= now:
            return Return.err(self._already_started(promotion_id))

        try:
            # Conditional on ACTIVE and starts_at > now
            cancelled = await self.promotion_repo.cancel(promotion_id, now)
            if not cancelled:
                await self.uow.rollback()
                return Return.err(self._already_started(promotion_id))

            entry = await self.ledger_writer.post(
                LedgerEntry.create(
                    user_id=owner_id,
                    kind=LedgerEntryKind.CREDIT_REFUND,
                    amount=credits,
                    event_type=EventType.PROMOTION_CANCELLED,
                    related_entity_id=promotion_id,
                    idempotency_key=f"promotion-refund:{promotion_id}",
                )
            )
            await self.uow.commit()

        except DuplicateLedgerEntryError:
            await self.uow.rollback()
            return Return.err(
                Error(code="PROMOTION_NOT_ACTIVE", message="Promotion was already cancelled")
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CANCEL_PROMOTION_FAILED",
                    message="Failed to cancel promotion",
                    reason=str(e),
                )
            )

        logger.info(
            f"Promotion {promotion_id} cancelled by {owner_id}; {credits} credits refunded"
        )
        await dispatch_ledger_events(self.notification_service, [entry])

        refreshed = await self.promotion_repo.get(promotion_id)
        return Return.ok(
            CancelPromotionResponseDTO(
                promotion=PromotionResponseDTO.from_promotion(refreshed or promotion, now),
                credits_refunded=credits,
                credit_balance=await self.ledger_writer.credit_balance(owner_id),
            )
        )

    @staticmethod
    def _already_started(promotion_id: str) -> Error:
        return Error(
            code="PROMOTION_ALREADY_STARTED",
            message=f"Promotion {promotion_id} has already started and cannot be cancelled",
        )
