"""Get Balance Use Case

Projects a user's balance from the ledger.
"""

from typing import Optional
from economy.libs.result import Result, Return
from economy.app.repositories.ledger_entry_repository import LedgerEntryRepository
from economy.domain.balance import project_balance
from economy.domain.reputation import ReputationPolicy
from .dtos import BalanceResponseDTO


class GetBalance:
    """
    Get Balance Use Case

    Read-only. Users with no history get a zero balance rather than an
    error, since every authenticated user implicitly has a balance.
    """

    def __init__(
        self,
        ledger_repo: LedgerEntryRepository,
        reputation_policy: Optional[ReputationPolicy] = None,
    ):
        self.ledger_repo = ledger_repo
        self.reputation_policy = reputation_policy

    async def execute(self, user_id: str) -> Result[BalanceResponseDTO]:
        """
        Execute get balance operation

        Args:
            user_id: The user identifier

        Returns:
            Result[BalanceResponseDTO]: Always ok
        """
        entries = await self.ledger_repo.list_for_user(user_id)
        snapshot = project_balance(user_id, entries, self.reputation_policy)
        return Return.ok(BalanceResponseDTO.from_snapshot(snapshot))
