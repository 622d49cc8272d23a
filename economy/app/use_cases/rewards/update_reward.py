"""UpdateReward Use Case"""

import logging
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.repositories.reward_item_repository import RewardItemRepository
from .dtos import UpdateRewardCommandDTO, RewardItemDTO

logger = logging.getLogger(__name__)


class UpdateReward:
    """
    Use Case: Edit a catalog reward

    Business Rules:
    1. Only fields present in the command change
    2. Inventory cannot shrink below copies already reserved
    3. Cost changes never touch open redemption requests (points_spent is a snapshot)
    """

    def __init__(self, uow: UnitOfWork, reward_repo: RewardItemRepository):
        self.uow = uow
        self.reward_repo = reward_repo

    async def execute(self, item_id: str, command: UpdateRewardCommandDTO) -> Result[RewardItemDTO]:
        changes = command.model_dump(exclude_unset=True)

        try:
            item = await self.reward_repo.get(item_id, for_update=True)
            if item is None:
                return Return.err(
                    Error(code="REWARD_NOT_FOUND", message=f"Reward {item_id} not found")
                )

            redeemed = item.copies_redeemed
            copies = changes.get("copies_available", item.copies_available)
            if copies is not None and copies < redeemed:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="INVALID_INVENTORY",
                        message=f"Inventory cannot drop below the {redeemed} copies already redeemed",
                        details={"copies_available": copies, "copies_redeemed": redeemed},
                    )
                )

            for field, value in changes.items():
                if value is None and field not in ("description", "copies_available"):
                    continue
                setattr(item, field, value)
            item.updated_at = utc_now()

            updated = await self.reward_repo.update(item)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_REWARD_FAILED",
                    message="Failed to update reward",
                    reason=str(e),
                )
            )

        logger.info(f"Reward {item_id} updated: {', '.join(sorted(changes)) or 'no changes'}")
        return Return.ok(RewardItemDTO.from_item(updated))
