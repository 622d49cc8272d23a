"""Redemption Request Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from economy.domain.redemption_request import RedemptionRequest, RedemptionStatus


class RedemptionRequestRepository(ABC):

    @abstractmethod
    async def create(self, request: RedemptionRequest) -> RedemptionRequest:
        pass

    @abstractmethod
    async def get(self, request_id: str, for_update: bool = False) -> Optional[RedemptionRequest]:
        pass

    @abstractmethod
    async def list(
        self,
        user_id: Optional[str] = None,
        status: Optional[RedemptionStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[RedemptionRequest]:
        """
        Retrieve redemption requests, newest first

        Args:
            user_id: Optional requester filter
            status: Optional status filter
            limit: Maximum rows
            offset: Rows to skip

        Returns:
            List of RedemptionRequest
        """
        pass

    @abstractmethod
    async def transition(
        self,
        request_id: str,
        expected: RedemptionStatus,
        new: RedemptionStatus,
        now: datetime,
        reviewed_by: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """
        Change status from expected to new in one conditional UPDATE

        Args:
            request_id: Redemption request id
            expected: Status the row must currently have
            new: Target status
            now: Timestamp for updated_at / reviewed_at / fulfilled_at
            reviewed_by: Reviewer id (admin actions)
            rejection_reason: Decline reason

        Returns:
            True if the row was in the expected status and was updated
        """
        pass
