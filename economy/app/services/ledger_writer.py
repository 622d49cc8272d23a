"""Ledger writer

Single write path for balance-affecting changes. Every entry is posted
together with the matching delta on the cached balance row, inside the
caller's unit of work.
"""

import logging
from typing import Optional
from economy.app.repositories.ledger_entry_repository import LedgerEntryRepository
from economy.app.repositories.user_balance_repository import UserBalanceRepository
from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind

logger = logging.getLogger(__name__)


class LedgerWriter:
    """
    Posts ledger entries guarded by the cached balance

    The conditional UPDATE on the user's balance row is both the
    sufficiency check and the per-user serialization point: concurrent
    debits against the same row queue on its lock, and a debit that would
    overdraw changes nothing.
    """

    def __init__(
        self,
        ledger_repo: LedgerEntryRepository,
        balance_repo: UserBalanceRepository,
    ):
        self.ledger_repo = ledger_repo
        self.balance_repo = balance_repo

    async def post(self, entry: LedgerEntry) -> Optional[LedgerEntry]:
        """
        Apply entry.amount to the cached balance and append the entry

        Args:
            entry: Entry built with LedgerEntry.create

        Returns:
            The appended entry, or None if the balance guard rejected it
            (insufficient points or credits). Nothing is written in that case.

        Raises:
            DuplicateLedgerEntryError: The entry's idempotency key already exists
        """
        LedgerEntry.validate_amount(LedgerEntryKind(entry.kind), entry.amount)
        await self.balance_repo.ensure_exists(entry.user_id)

        if entry.is_points:
            applied = await self.balance_repo.apply_points_delta(entry.user_id, entry.amount)
        else:
            applied = await self.balance_repo.apply_credit_delta(entry.user_id, entry.amount)

        if not applied:
            logger.warning(
                f"Ledger guard rejected {LedgerEntryKind(entry.kind).value} of {entry.amount} "
                f"for user {entry.user_id} ({entry.event_type})"
            )
            return None

        return await self.ledger_repo.append(entry)

    async def credit_balance(self, user_id: str) -> int:
        balance = await self.balance_repo.get(user_id)
        return balance.credit_balance if balance else 0

    async def point_balance(self, user_id: str) -> int:
        balance = await self.balance_repo.get(user_id)
        return balance.points if balance else 0
