"""ReconcileBalances Use Case

Compares every cached balance row against the ledger fold.
"""

import logging
import time
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.repositories.ledger_entry_repository import LedgerEntryRepository
from economy.app.repositories.user_balance_repository import UserBalanceRepository
from economy.domain.balance import project_balance
from .dtos import BalanceDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileBalances:
    """
    Use Case: Reconcile cached balances against the ledger

    Business Rules:
    1. The ledger is authoritative; the cache is what gets checked
    2. Users with ledger entries but no cache row are checked against zero
    3. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        ledger_repo: LedgerEntryRepository,
        balance_repo: UserBalanceRepository,
    ):
        self.ledger_repo = ledger_repo
        self.balance_repo = balance_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = utc_now()

        try:
            logger.info("Starting balance reconciliation")

            # Step 1: Collect every user known to either side
            cached = {balance.user_id: balance for balance in await self.balance_repo.list_all()}
            user_ids = sorted(set(cached) | set(await self.ledger_repo.list_user_ids()))

            logger.info(f"Found {len(user_ids)} users to reconcile")

            # Step 2: Fold each user's ledger and compare
            discrepancies: list[BalanceDiscrepancyDTO] = []
            for user_id in user_ids:
                snapshot = project_balance(user_id, await self.ledger_repo.list_for_user(user_id))
                row = cached.get(user_id)
                cached_points = row.points if row else 0
                cached_credits = row.credit_balance if row else 0

                if cached_points != snapshot.points or cached_credits != snapshot.credit_balance:
                    discrepancies.append(
                        BalanceDiscrepancyDTO(
                            user_id=user_id,
                            cached_points=cached_points,
                            ledger_points=snapshot.points,
                            cached_credits=cached_credits,
                            ledger_credits=snapshot.credit_balance,
                        )
                    )
                    logger.warning(
                        f"Discrepancy found for user {user_id}: "
                        f"points cached={cached_points} ledger={snapshot.points}, "
                        f"credits cached={cached_credits} ledger={snapshot.credit_balance}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {len(user_ids)} users in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {len(user_ids)} users balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationResultDTO(
                    total_users_checked=len(user_ids),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Balance reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile balances",
                    reason=str(e),
                )
            )
