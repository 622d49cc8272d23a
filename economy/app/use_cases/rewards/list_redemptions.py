"""List Redemptions Use Case"""

from typing import Optional
from economy.libs.result import Result, Return
from economy.app.repositories.redemption_request_repository import RedemptionRequestRepository
from economy.domain.redemption_request import RedemptionStatus
from .dtos import ListRedemptionsResponseDTO, RedemptionResponseDTO


class ListRedemptions:
    """Redemption requests newest first, optionally filtered by requester and status"""

    def __init__(self, redemption_repo: RedemptionRequestRepository):
        self.redemption_repo = redemption_repo

    async def execute(
        self,
        user_id: Optional[str] = None,
        status: Optional[RedemptionStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Result[ListRedemptionsResponseDTO]:
        requests = await self.redemption_repo.list(
            user_id=user_id, status=status, limit=limit, offset=offset
        )
        return Return.ok(
            ListRedemptionsResponseDTO(
                redemptions=[RedemptionResponseDTO.from_request(r) for r in requests],
                total=len(requests),
                limit=limit,
                offset=offset,
            )
        )
