"""Reward Item Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from economy.domain.reward_item import RewardItem


class RewardItemRepository(ABC):
    """
    Repository interface for RewardItem persistence

    Inventory counters only move through reserve_copy / release_copy,
    which are conditional updates and therefore race-safe.
    """

    @abstractmethod
    async def create(self, item: RewardItem) -> RewardItem:
        pass

    @abstractmethod
    async def get(self, item_id: str, for_update: bool = False) -> Optional[RewardItem]:
        pass

    @abstractmethod
    async def update(self, item: RewardItem) -> RewardItem:
        """
        Persist catalog field changes (name, cost, inventory size, flags)

        Args:
            item: RewardItem with modified fields

        Returns:
            Updated RewardItem
        """
        pass

    @abstractmethod
    async def list(self, active_only: bool = False) -> List[RewardItem]:
        """Retrieve catalog entries ordered by sort_order, then name"""
        pass

    @abstractmethod
    async def reserve_copy(self, item_id: str) -> bool:
        """
        Increment copies_redeemed if inventory remains

        Conditional on ``copies_available IS NULL OR copies_redeemed <
        copies_available`` and ``is_active``.

        Returns:
            True if a copy was reserved, False if the reward is exhausted
        """
        pass

    @abstractmethod
    async def release_copy(self, item_id: str) -> bool:
        """
        Decrement copies_redeemed (never below zero)

        Returns:
            True if a copy was released
        """
        pass
