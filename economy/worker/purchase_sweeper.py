"""Stale Purchase Sweeper

Purchases left in CREATED past the pending TTL are settled against the
payment processor: succeeded payments are credited, terminal failures
are closed, and payments still in flight are left for the next run.
"""

import asyncio
import logging
from typing import Optional
from economy.adapter.repositories import (
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyPendingPurchaseRepository,
    SqlAlchemyUserBalanceRepository,
)
from economy.adapter.services import (
    HttpPaymentGateway,
    SqlAlchemyUnitOfWork,
    create_notification_service,
)
from economy.app.services import LedgerWriter, NotificationService, PaymentGateway
from economy.app.use_cases.purchases import ConfirmPurchase, SweepPurchasesResultDTO, SweepStalePurchases
from economy.config import ApplicationConfig
from .base import PeriodicWorker, run_cli

logger = logging.getLogger(__name__)


class PurchaseSweeperWorker(PeriodicWorker):
    name = "PurchaseSweeperWorker"
    enabled_setting = "PURCHASE_SWEEP_ENABLED"
    default_interval = ApplicationConfig.PURCHASE_SWEEP_INTERVAL_SECONDS

    def __init__(
        self,
        db_uri: Optional[str] = None,
        session_factory=None,
        payment_gateway: Optional[PaymentGateway] = None,
        notification_service: Optional[NotificationService] = None,
        ttl_seconds: Optional[int] = None,
    ):
        super().__init__(db_uri=db_uri, session_factory=session_factory)
        self.payment_gateway = payment_gateway or HttpPaymentGateway(
            base_url=ApplicationConfig.PAYMENT_API_URL,
            api_key=ApplicationConfig.PAYMENT_API_KEY,
            timeout=ApplicationConfig.PAYMENT_TIMEOUT_SECONDS,
        )
        self.notification_service = notification_service or create_notification_service(
            ApplicationConfig.NOTIFICATION_WEBHOOK_URL
        )
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else ApplicationConfig.PURCHASE_PENDING_TTL_SECONDS

    async def run_once(self) -> Optional[SweepPurchasesResultDTO]:
        if not self.enabled:
            logger.info("Purchase sweep is disabled, skipping")
            return None

        async with self.async_session_factory() as session:
            purchase_repo = SqlAlchemyPendingPurchaseRepository(session)
            ledger_repo = SqlAlchemyLedgerEntryRepository(session)
            confirm = ConfirmPurchase(
                uow=SqlAlchemyUnitOfWork(session),
                purchase_repo=purchase_repo,
                ledger_repo=ledger_repo,
                ledger_writer=LedgerWriter(ledger_repo, SqlAlchemyUserBalanceRepository(session)),
                payment_gateway=self.payment_gateway,
                notification_service=self.notification_service,
            )
            result = await SweepStalePurchases(
                purchase_repo=purchase_repo,
                confirm_purchase=confirm,
                ttl_seconds=self.ttl_seconds,
            ).execute()

        if result.is_err():
            raise RuntimeError(f"Purchase sweep failed: {result.error.message}")
        return result.value

    def describe(self, result: SweepPurchasesResultDTO) -> str:
        return (
            f"{result.checked} checked, {result.confirmed} confirmed, "
            f"{result.failed} failed, {result.skipped} skipped"
        )


if __name__ == "__main__":
    asyncio.run(run_cli(PurchaseSweeperWorker, "Stale Purchase Sweeper"))
