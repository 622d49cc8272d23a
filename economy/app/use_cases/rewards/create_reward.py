"""CreateReward Use Case"""

import logging
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.repositories.reward_item_repository import RewardItemRepository
from economy.domain.reward_item import RewardItem
from .dtos import CreateRewardCommandDTO, RewardItemDTO

logger = logging.getLogger(__name__)


class CreateReward:

    def __init__(self, uow: UnitOfWork, reward_repo: RewardItemRepository):
        self.uow = uow
        self.reward_repo = reward_repo

    async def execute(self, command: CreateRewardCommandDTO) -> Result[RewardItemDTO]:
        try:
            item = await self.reward_repo.create(
                RewardItem(
                    name=command.name,
                    description=command.description,
                    reward_type=command.reward_type,
                    points_cost=command.points_cost,
                    copies_available=command.copies_available,
                    copies_redeemed=0,
                    is_active=command.is_active,
                    sort_order=command.sort_order,
                )
            )
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_REWARD_FAILED",
                    message="Failed to create reward",
                    reason=str(e),
                )
            )

        logger.info(f"Reward {item.id} created: {item.name} ({item.points_cost} points)")
        return Return.ok(RewardItemDTO.from_item(item))
