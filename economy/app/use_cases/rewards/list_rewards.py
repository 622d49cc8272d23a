"""List Rewards Use Case"""

from economy.libs.result import Result, Return
from economy.app.repositories.reward_item_repository import RewardItemRepository
from .dtos import ListRewardsResponseDTO, RewardItemDTO


class ListRewards:

    def __init__(self, reward_repo: RewardItemRepository):
        self.reward_repo = reward_repo

    async def execute(self, active_only: bool = True) -> Result[ListRewardsResponseDTO]:
        items = await self.reward_repo.list(active_only=active_only)
        return Return.ok(
            ListRewardsResponseDTO(
                rewards=[RewardItemDTO.from_item(item) for item in items],
                total=len(items),
            )
        )
