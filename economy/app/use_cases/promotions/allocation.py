"""Shared debit-and-create path for boosts and sponsorships"""

import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.services.ledger_writer import LedgerWriter
from economy.app.services.notification_service import NotificationService, dispatch_ledger_events
from economy.app.repositories.promotion_repository import PromotionRepository
from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind
from economy.domain.pricing import PromotionType, promotion_cost
from economy.domain.promotion import Promotion, PromotionStatus
from .dtos import PromotionResponseDTO

logger = logging.getLogger(__name__)

# Given (promotion, now), return an Error to abort or None to proceed.
# Runs after the debit, while the promotion's subject lock is held.
ScheduleHook = Callable[[Promotion, datetime], Awaitable[Optional[Error]]]


def invalid_duration(promotion_type: PromotionType, duration_days: int, reason: str) -> Error:
    return Error(
        code="INVALID_DURATION",
        message=f"Unsupported {promotion_type.value.lower()} duration: {duration_days} days",
        reason=reason,
    )


def insufficient_credits(current: int, required: int) -> Error:
    return Error(
        code="INSUFFICIENT_CREDITS",
        message=f"Insufficient credits. Required: {required}, Available: {current}",
        details={"current": current, "required": required, "shortfall": required - current},
    )


async def allocate_promotion(
    uow: UnitOfWork,
    promotion_repo: PromotionRepository,
    ledger_writer: LedgerWriter,
    promotion: Promotion,
    event_type: str,
    schedule: ScheduleHook,
    notification_service: Optional[NotificationService] = None,
    failure_code: str = "CREATE_PROMOTION_FAILED",
) -> Result[PromotionResponseDTO]:
    """
    Price, debit and persist a promotion in one unit of work

    The promotion arrives with type, subject, owner and duration set.
    Pricing, the CREDIT_SPEND entry, scheduling (via the hook) and the
    insert either all commit or none do. The subject lock is taken before
    the owner's balance row, always in that order.
    """
    promotion_type = PromotionType(promotion.promotion_type)

    # Step 1: Price
    try:
        credits_per_day, cost = promotion_cost(promotion_type, promotion.duration_days)
    except ValueError as e:
        return Return.err(invalid_duration(promotion_type, promotion.duration_days, str(e)))

    promotion.credits_per_day = credits_per_day
    promotion.credits_committed = cost
    owner_id = promotion.owner_id
    now = utc_now()

    try:
        # Step 2: Serialize purchases for the same pitch (and club)
        await promotion_repo.lock_subject(promotion_type, promotion.subject_id, promotion.club_id, now)

        # Step 3: Debit
        entry = await ledger_writer.post(
            LedgerEntry.create(
                user_id=owner_id,
                kind=LedgerEntryKind.CREDIT_SPEND,
                amount=-cost,
                event_type=event_type,
                related_entity_id=promotion.id,
            )
        )
        if entry is None:
            await uow.rollback()
            current = await ledger_writer.credit_balance(owner_id)
            return Return.err(insufficient_credits(current, cost))

        # Step 4: Schedule the window
        promotion.starts_at = now
        error = await schedule(promotion, now)
        if error is not None:
            await uow.rollback()
            return Return.err(error)
        promotion.ends_at = promotion.starts_at + timedelta(days=promotion.duration_days)
        promotion.status = PromotionStatus.ACTIVE

        # Step 5: Persist and commit
        created = await promotion_repo.create(promotion)
        await uow.commit()

    except Exception as e:
        await uow.rollback()
        return Return.err(
            Error(
                code=failure_code,
                message=f"Failed to create {promotion_type.value.lower()}",
                reason=str(e),
            )
        )

    logger.info(
        f"{promotion_type.value} {created.id} created for pitch {created.subject_id} "
        f"by {created.owner_id}: {created.duration_days} days x {credits_per_day} = {cost} credits, "
        f"{created.starts_at.isoformat()} -> {created.ends_at.isoformat()}"
    )
    await dispatch_ledger_events(notification_service, [entry])

    return Return.ok(PromotionResponseDTO.from_promotion(created, now))
