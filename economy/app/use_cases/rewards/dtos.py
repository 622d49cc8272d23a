"""Data Transfer Objects for Reward Use Cases"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field
from economy.domain.redemption_request import RedemptionRequest, RedemptionStatus
from economy.domain.reward_item import RewardItem


class RewardItemDTO(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    reward_type: str
    points_cost: int
    copies_available: Optional[int] = Field(None, description="Total inventory (null = unlimited)")
    copies_redeemed: int
    remaining_copies: Optional[int] = Field(None, description="Copies left (null = unlimited)")
    is_active: bool
    is_available: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_item(cls, item: RewardItem) -> "RewardItemDTO":
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            reward_type=item.reward_type,
            points_cost=item.points_cost,
            copies_available=item.copies_available,
            copies_redeemed=item.copies_redeemed,
            remaining_copies=item.remaining_copies,
            is_active=item.is_active,
            is_available=item.is_available,
            sort_order=item.sort_order,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class ListRewardsResponseDTO(BaseModel):
    rewards: List[RewardItemDTO]
    total: int


class CreateRewardCommandDTO(BaseModel):
    """
    Command DTO for adding a catalog reward

    Used as input to CreateReward use case.
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )

    description: Optional[str] = Field(
        default=None,
        description="Display description"
    )

    reward_type: str = Field(
        default="DIGITAL",
        max_length=32,
        description="Kind of reward (e.g., DIGITAL, PHYSICAL_BOOK, FEATURE)"
    )

    points_cost: int = Field(
        ...,
        gt=0,
        description="Points per redemption (must be > 0)"
    )

    copies_available: Optional[int] = Field(
        default=None,
        ge=0,
        description="Inventory size; omit for unlimited"
    )

    is_active: bool = Field(default=True)

    sort_order: int = Field(default=0)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Signed first edition",
                "reward_type": "PHYSICAL_BOOK",
                "points_cost": 500,
                "copies_available": 10
            }
        }


class UpdateRewardCommandDTO(BaseModel):
    """
    Partial update of a catalog reward

    Only fields explicitly provided are changed. Sending
    copies_available = null makes the inventory unlimited.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    reward_type: Optional[str] = Field(default=None, max_length=32)
    points_cost: Optional[int] = Field(default=None, gt=0)
    copies_available: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class RequestRedemptionCommandDTO(BaseModel):
    user_id: str = Field(..., description="Requesting user")
    reward_item_id: str = Field(..., min_length=1, description="Reward to redeem")


class ReviewAction(str, Enum):
    APPROVE = "APPROVE"
    DECLINE = "DECLINE"
    FULFILL = "FULFILL"


class ReviewRedemptionCommandDTO(BaseModel):
    """
    Command DTO for an admin review action

    Used as input to ReviewRedemption use case.
    """

    request_id: str = Field(
        ...,
        description="Redemption request ID"
    )

    action: ReviewAction = Field(
        ...,
        description="APPROVE, DECLINE or FULFILL"
    )

    reviewer_id: str = Field(
        ...,
        description="Admin performing the review"
    )

    reason: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Required when declining"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "request_id": "3b1f...",
                "action": "DECLINE",
                "reviewer_id": "admin_1",
                "reason": "Out of stock at the warehouse"
            }
        }


class RedemptionResponseDTO(BaseModel):
    id: str
    user_id: str
    reward_item_id: str
    points_spent: int
    status: RedemptionStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    fulfilled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_request(cls, request: RedemptionRequest) -> "RedemptionResponseDTO":
        return cls(
            id=request.id,
            user_id=request.user_id,
            reward_item_id=request.reward_item_id,
            points_spent=request.points_spent,
            status=request.status,
            reviewed_by=request.reviewed_by,
            reviewed_at=request.reviewed_at,
            rejection_reason=request.rejection_reason,
            fulfilled_at=request.fulfilled_at,
            created_at=request.created_at,
            updated_at=request.updated_at,
        )


class ListRedemptionsResponseDTO(BaseModel):
    redemptions: List[RedemptionResponseDTO]
    total: int
    limit: int
    offset: int
