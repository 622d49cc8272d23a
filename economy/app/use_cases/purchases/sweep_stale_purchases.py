"""SweepStalePurchases Use Case

Settles purchases whose confirmation never arrived.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.repositories.pending_purchase_repository import PendingPurchaseRepository
from .confirm_purchase import ConfirmPurchase
from .dtos import ConfirmPurchaseCommandDTO, SweepPurchasesResultDTO

logger = logging.getLogger(__name__)

_FAILED_OUTCOMES = frozenset({"PAYMENT_SYSTEM_UNAVAILABLE", "PAYMENT_NOT_SUCCEEDED"})


class SweepStalePurchases:
    """
    Use Case: Sweep stale CREATED purchases

    Each stale purchase goes through ConfirmPurchase as a trusted caller,
    so a payment that did succeed is credited exactly as if the user had
    confirmed it. Payments still in flight are left for the next run.
    """

    def __init__(
        self,
        purchase_repo: PendingPurchaseRepository,
        confirm_purchase: ConfirmPurchase,
        ttl_seconds: int = 3600,
        batch_size: int = 100,
    ):
        self.purchase_repo = purchase_repo
        self.confirm_purchase = confirm_purchase
        self.ttl_seconds = ttl_seconds
        self.batch_size = batch_size

    async def execute(self, now: Optional[datetime] = None) -> Result[SweepPurchasesResultDTO]:
        now = now or utc_now()
        cutoff = now - timedelta(seconds=self.ttl_seconds)

        try:
            stale = await self.purchase_repo.list_stale(cutoff, limit=self.batch_size)
        except Exception as e:
            logger.error(f"Stale purchase sweep failed: {e}")
            return Return.err(
                Error(
                    code="SWEEP_PURCHASES_FAILED",
                    message="Failed to load stale purchases",
                    reason=str(e),
                )
            )

        # A rollback inside ConfirmPurchase expires every row loaded by this session
        pending = [(purchase.id, purchase.payment_intent_id) for purchase in stale]

        confirmed = failed = skipped = 0
        for purchase_id, intent_id in pending:
            result = await self.confirm_purchase.execute(
                ConfirmPurchaseCommandDTO(payment_intent_id=intent_id)
            )
            if result.is_ok():
                confirmed += 1
            elif result.error.code in _FAILED_OUTCOMES and not (result.error.details or {}).get("retryable"):
                failed += 1
            else:
                skipped += 1
                logger.info(
                    f"Stale purchase {purchase_id} skipped: {result.error.code}"
                )

        if pending:
            logger.info(
                f"Purchase sweep complete: {len(pending)} checked, {confirmed} confirmed, "
                f"{failed} failed, {skipped} skipped"
            )

        return Return.ok(
            SweepPurchasesResultDTO(
                checked=len(pending),
                confirmed=confirmed,
                failed=failed,
                skipped=skipped,
                run_at=now,
            )
        )
