"""User Badge Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from economy.domain.user_badge import UserBadge


class UserBadgeRepository(ABC):

    @abstractmethod
    async def insert_if_absent(self, user_id: str, badge_code: str) -> bool:
        """
        Record a badge award unless (user_id, badge_code) already exists

        Returns:
            True if this call inserted the badge, False if it was already held
        """
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[UserBadge]:
        pass
