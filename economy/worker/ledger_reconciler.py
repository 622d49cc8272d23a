"""Balance Reconciliation Worker

Compares cached user balances against the ledger projection and reports
every mismatch. The ledger is authoritative; nothing is rewritten.
"""

import asyncio
import logging
from typing import Optional
from economy.adapter.repositories import SqlAlchemyLedgerEntryRepository, SqlAlchemyUserBalanceRepository
from economy.app.use_cases.ledger import ReconcileBalances, ReconciliationResultDTO
from economy.config import ApplicationConfig
from .base import PeriodicWorker, run_cli

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker(PeriodicWorker):
    name = "LedgerReconcilerWorker"
    enabled_setting = "RECONCILIATION_ENABLED"
    default_interval = ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS

    async def run_once(self) -> Optional[ReconciliationResultDTO]:
        if not self.enabled:
            logger.info("Balance reconciliation is disabled, skipping")
            return None

        async with self.async_session_factory() as session:
            use_case = ReconcileBalances(
                ledger_repo=SqlAlchemyLedgerEntryRepository(session),
                balance_repo=SqlAlchemyUserBalanceRepository(session),
            )
            result = await use_case.execute()

        if result.is_err():
            raise RuntimeError(f"Reconciliation failed: {result.error.message}")

        response = result.value
        if response.discrepancies_found > 0:
            logger.error(f"ALERT: {response.discrepancies_found} balance discrepancies found!")
            for d in response.discrepancies:
                logger.error(
                    f"  - User {d.user_id}: points cached={d.cached_points} ledger={d.ledger_points}, "
                    f"credits cached={d.cached_credits} ledger={d.ledger_credits}"
                )
        return response

    def describe(self, result: ReconciliationResultDTO) -> str:
        return (
            f"checked {result.total_users_checked} users, "
            f"found {result.discrepancies_found} discrepancies in {result.execution_time_ms}ms"
        )


if __name__ == "__main__":
    asyncio.run(run_cli(LedgerReconcilerWorker, "Balance Reconciliation Worker"))
