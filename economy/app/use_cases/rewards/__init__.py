"""Reward catalog and redemption use cases"""
from .request_redemption import RequestRedemption
from .review_redemption import ReviewRedemption
from .cancel_redemption import CancelRedemption
from .create_reward import CreateReward
from .update_reward import UpdateReward
from .list_rewards import ListRewards
from .list_redemptions import ListRedemptions
from .dtos import (
    RewardItemDTO,
    ListRewardsResponseDTO,
    CreateRewardCommandDTO,
    UpdateRewardCommandDTO,
    RequestRedemptionCommandDTO,
    ReviewAction,
    ReviewRedemptionCommandDTO,
    RedemptionResponseDTO,
    ListRedemptionsResponseDTO,
)

__all__ = [
    "RequestRedemption",
    "ReviewRedemption",
    "CancelRedemption",
    "CreateReward",
    "UpdateReward",
    "ListRewards",
    "ListRedemptions",
    "RewardItemDTO",
    "ListRewardsResponseDTO",
    "CreateRewardCommandDTO",
    "UpdateRewardCommandDTO",
    "RequestRedemptionCommandDTO",
    "ReviewAction",
    "ReviewRedemptionCommandDTO",
    "RedemptionResponseDTO",
    "ListRedemptionsResponseDTO",
]
