"""Pending Purchase Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from economy.domain.pending_purchase import PendingPurchase


class PendingPurchaseRepository(ABC):

    @abstractmethod
    async def create(self, purchase: PendingPurchase) -> PendingPurchase:
        pass

    @abstractmethod
    async def get_by_intent_id(
        self, payment_intent_id: str, for_update: bool = False
    ) -> Optional[PendingPurchase]:
        """
        Retrieve a purchase by its payment intent reference

        Args:
            payment_intent_id: Opaque payment intent id
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            PendingPurchase if found, None otherwise
        """
        pass

    @abstractmethod
    async def mark_confirmed(self, purchase_id: str, confirmed_at: datetime) -> bool:
        """
        Move a purchase CREATED -> CONFIRMED

        The update is conditional on the current status being CREATED, so
        only one of several concurrent confirmations can win.

        Returns:
            True if this call performed the transition
        """
        pass

    @abstractmethod
    async def mark_failed(self, purchase_id: str, reason: str) -> bool:
        """
        Move a purchase CREATED -> FAILED (conditional, like mark_confirmed)

        Returns:
            True if this call performed the transition
        """
        pass

    @abstractmethod
    async def list_stale(self, created_before: datetime, limit: int = 100) -> List[PendingPurchase]:
        """
        Retrieve CREATED purchases older than created_before, oldest first
        """
        pass
