"""Request schemas for the economy API

The caller's identity always comes from the authenticated principal, so
none of these carry a user id.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from economy.app.use_cases.rewards.dtos import ReviewAction
from economy.domain.promotion import SponsorshipFrequency


class PurchaseRequestSchema(BaseModel):
    """
    Request schema for starting a credit purchase

    Used for POST /economy/credits/purchase. Either ``package_code`` or the
    full ``amount``/``bonus``/``price`` triple must identify a catalog package.
    """

    package_code: Optional[str] = Field(
        default=None,
        description="Catalog package code (STARTER, PRO, BUSINESS)"
    )

    amount: Optional[int] = Field(default=None, gt=0, description="Base credits")
    bonus: Optional[int] = Field(default=None, ge=0, description="Bonus credits")
    price: Optional[Decimal] = Field(default=None, gt=0, description="Price in major units")

    @model_validator(mode="after")
    def check_package_selector(self):
        if self.package_code is None and None in (self.amount, self.bonus, self.price):
            raise ValueError("Provide package_code or amount, bonus and price")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "package_code": "PRO"
            }
        }


class ConfirmPurchaseRequestSchema(BaseModel):
    payment_intent_id: str = Field(..., min_length=1, description="Payment intent reference")


class BoostRequestSchema(BaseModel):
    """Used for POST /economy/promotions/boosts"""

    pitch_id: str = Field(..., min_length=1, description="Pitch to boost")
    duration_days: int = Field(..., description="Boost length in days (1-30)")

    class Config:
        json_schema_extra = {
            "example": {
                "pitch_id": "pitch_42",
                "duration_days": 7
            }
        }


class SponsorshipRequestSchema(BaseModel):
    """Used for POST /economy/promotions/sponsorships"""

    pitch_id: str = Field(..., min_length=1, description="Pitch to sponsor")
    club_id: str = Field(..., min_length=1, description="Club whose feed shows the pitch")
    duration_days: int = Field(..., description="Sponsorship length in days (1-90)")
    frequency: SponsorshipFrequency = Field(
        default=SponsorshipFrequency.DAILY,
        description="How often the club feed shows the pitch"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "pitch_id": "pitch_42",
                "club_id": "club_7",
                "duration_days": 14,
                "frequency": "DAILY"
            }
        }


class RedemptionRequestSchema(BaseModel):
    reward_item_id: str = Field(..., min_length=1, description="Reward to redeem")


class ReviewRequestSchema(BaseModel):
    """Used for POST /admin/redemptions/{id}/review"""

    action: ReviewAction = Field(..., description="APPROVE, DECLINE or FULFILL")
    reason: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Required when declining; shown to the requester"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "action": "DECLINE",
                "reason": "Out of stock at the printer"
            }
        }
