"""User Balance Repository Interface

Defines the contract for the cached balance rows that guard debits.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from economy.domain.user_balance import UserBalance


class UserBalanceRepository(ABC):
    """
    Repository interface for UserBalance persistence

    Deltas are applied with conditional UPDATEs
    (``WHERE balance + delta >= 0``). A delta that would drive a balance
    negative changes nothing and reports False, which is how debits are
    checked and applied in one atomic step.
    """

    @abstractmethod
    async def get(self, user_id: str, for_update: bool = False) -> Optional[UserBalance]:
        """
        Retrieve the cached balance row of a user

        Args:
            user_id: User identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            UserBalance if the row exists, None otherwise
        """
        pass

    @abstractmethod
    async def ensure_exists(self, user_id: str) -> None:
        """
        Insert a zero balance row for user_id unless one already exists

        Safe under concurrent callers (insert-if-absent).
        """
        pass

    @abstractmethod
    async def apply_points_delta(self, user_id: str, delta: int) -> bool:
        """
        Add delta to the cached point balance if the result stays >= 0

        Returns:
            True if the row was updated, False if the guard rejected it
        """
        pass

    @abstractmethod
    async def apply_credit_delta(self, user_id: str, delta: int) -> bool:
        """
        Add delta to the cached credit balance if the result stays >= 0

        Returns:
            True if the row was updated, False if the guard rejected it
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[UserBalance]:
        pass
