"""Reversal of a redemption's side effects (decline / cancel)"""

import logging
from typing import Optional
from economy.app.services.ledger_writer import LedgerWriter
from economy.app.repositories.reward_item_repository import RewardItemRepository
from economy.domain.ledger_entry import EventType, LedgerEntry, LedgerEntryKind
from economy.domain.redemption_request import RedemptionRequest

logger = logging.getLogger(__name__)


async def refund_redemption(
    reward_repo: RewardItemRepository,
    ledger_writer: LedgerWriter,
    request: RedemptionRequest,
) -> Optional[LedgerEntry]:
    """
    Return points_spent to the requester and release the reserved copy

    Must run in the same unit of work as the status change. The refund
    entry is keyed on the request id, so it can never be posted twice.
    """
    entry = await ledger_writer.post(
        LedgerEntry.create(
            user_id=request.user_id,
            kind=LedgerEntryKind.POINT_AWARD,
            amount=request.points_spent,
            event_type=EventType.REWARD_REFUNDED,
            related_entity_id=request.id,
            idempotency_key=f"redemption-refund:{request.id}",
        )
    )
    if request.copy_reserved:
        released = await reward_repo.release_copy(request.reward_item_id)
        if not released:
            logger.warning(
                f"No reserved copy to release for reward {request.reward_item_id} "
                f"(redemption {request.id})"
            )
    return entry
