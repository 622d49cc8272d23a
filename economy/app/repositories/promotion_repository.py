"""Promotion Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from economy.domain.pricing import PromotionType
from economy.domain.promotion import Promotion, PromotionStatus


class PromotionRepository(ABC):
    """Repository interface for Promotion persistence"""

    @abstractmethod
    async def create(self, promotion: Promotion) -> Promotion:
        pass

    @abstractmethod
    async def get(self, promotion_id: str, for_update: bool = False) -> Optional[Promotion]:
        pass

    @abstractmethod
    async def list_for_owner(
        self,
        owner_id: str,
        status: Optional[PromotionStatus] = None,
        promotion_type: Optional[PromotionType] = None,
    ) -> List[Promotion]:
        """
        Retrieve an owner's promotions, newest first

        Args:
            owner_id: Paying user
            status: Optional status filter
            promotion_type: Optional BOOST / SPONSORSHIP filter

        Returns:
            List of Promotion
        """
        pass

    @abstractmethod
    async def latest_active_boost_end(self, pitch_id: str, now: datetime) -> Optional[datetime]:
        """
        Latest ends_at among ACTIVE boosts of a pitch that end after now

        Returns:
            The datetime a new boost should queue behind, or None if the
            pitch has no running or queued boost
        """
        pass

    @abstractmethod
    async def find_overlapping_sponsorship(
        self,
        pitch_id: str,
        club_id: str,
        starts_at: datetime,
        ends_at: datetime,
    ) -> Optional[Promotion]:
        """
        Find an ACTIVE sponsorship of (pitch_id, club_id) overlapping a window
        """
        pass

    @abstractmethod
    async def expire_due(self, now: datetime) -> int:
        """
        Transition every ACTIVE promotion with ends_at <= now to EXPIRED

        Returns:
            Number of promotions expired
        """
        pass

    @abstractmethod
    async def cancel(self, promotion_id: str, now: datetime) -> bool:
        """
        Cancel a promotion that is ACTIVE and has not started yet

        Conditional on status = ACTIVE and starts_at > now.

        Returns:
            True if this call cancelled the promotion
        """
        pass

    @abstractmethod
    async def lock_subject(
        self,
        promotion_type: PromotionType,
        subject_id: str,
        club_id: Optional[str],
        now: datetime,
    ) -> None:
        """
        Take the write lock of a promotion subject for the current transaction

        Must be the first write of a promotion purchase. Purchases for the
        same subject then run one after another, so the overlap check and
        the boost queue position are always read from committed state.
        """
        pass

    @abstractmethod
    async def record_impressions(self, club_id: str, now: datetime, limit: int = 10) -> List[Promotion]:
        """
        Serve a club's running sponsorships and count one impression for each

        Picks up to limit ACTIVE sponsorships of the club whose window
        contains now, newest first. Each impression consumes one credit of
        the sponsorship's credits_committed until it is used up. The
        counters are updated before the rows are read back.

        Returns:
            The served sponsorships with their updated counters, newest first
        """
        pass

    @abstractmethod
    async def record_click(self, promotion_id: str, now: datetime) -> bool:
        """
        Count one click on a sponsorship

        Returns:
            True if promotion_id is a sponsorship that has started and the click was counted
        """
        pass
