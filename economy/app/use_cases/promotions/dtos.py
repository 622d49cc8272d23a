"""Data Transfer Objects for Promotion Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from economy.libs.clock import utc_now
from economy.domain.pricing import PromotionType
from economy.domain.promotion import Promotion, PromotionStatus, SponsorshipFrequency


class CreateBoostCommandDTO(BaseModel):
    """
    Command DTO for boosting a pitch

    Used as input to CreateBoost use case.
    """

    owner_id: str = Field(
        ...,
        description="Paying user"
    )

    pitch_id: str = Field(
        ...,
        min_length=1,
        description="Pitch to boost"
    )

    duration_days: int = Field(
        ...,
        description="Boost length in days (1-30)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "owner_id": "author_1",
                "pitch_id": "pitch_42",
                "duration_days": 7
            }
        }


class CreateSponsorshipCommandDTO(BaseModel):
    """
    Command DTO for sponsoring a pitch in a club

    Used as input to CreateSponsorship use case.
    """

    owner_id: str = Field(
        ...,
        description="Paying user"
    )

    pitch_id: str = Field(
        ...,
        min_length=1,
        description="Sponsored pitch"
    )

    club_id: str = Field(
        ...,
        min_length=1,
        description="Club the pitch is shown in"
    )

    duration_days: int = Field(
        ...,
        description="Sponsorship length in days (1-90)"
    )

    frequency: SponsorshipFrequency = Field(
        default=SponsorshipFrequency.DAILY,
        description="How often the pitch is shown to the club"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "owner_id": "author_1",
                "pitch_id": "pitch_42",
                "club_id": "club_7",
                "duration_days": 14,
                "frequency": "WEEKLY"
            }
        }


class PromotionResponseDTO(BaseModel):
    id: str = Field(..., description="Promotion ID")
    promotion_type: PromotionType
    pitch_id: str
    club_id: Optional[str] = None
    owner_id: str
    duration_days: int
    credits_per_day: int
    credits_committed: int
    frequency: Optional[SponsorshipFrequency] = None
    impressions: int = 0
    clicks: int = 0
    credits_consumed: int = 0
    status: PromotionStatus = Field(..., description="Status with expiry applied")
    is_running: bool = Field(..., description="Window has started and not ended")
    starts_at: datetime
    ends_at: datetime
    created_at: datetime
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_promotion(cls, promotion: Promotion, now: Optional[datetime] = None) -> "PromotionResponseDTO":
        now = now or utc_now()
        return cls(
            id=promotion.id,
            promotion_type=promotion.promotion_type,
            pitch_id=promotion.subject_id,
            club_id=promotion.club_id,
            owner_id=promotion.owner_id,
            duration_days=promotion.duration_days,
            credits_per_day=promotion.credits_per_day,
            credits_committed=promotion.credits_committed,
            frequency=promotion.frequency,
            impressions=promotion.impressions or 0,
            clicks=promotion.clicks or 0,
            credits_consumed=promotion.credits_consumed or 0,
            status=promotion.effective_status(now),
            is_running=promotion.is_running(now),
            starts_at=promotion.starts_at,
            ends_at=promotion.ends_at,
            created_at=promotion.created_at,
            cancelled_at=promotion.cancelled_at,
        )


class ListPromotionsResponseDTO(BaseModel):
    promotions: List[PromotionResponseDTO]
    total: int


class QuotePromotionResponseDTO(BaseModel):
    """Price quote; nothing is reserved"""

    promotion_type: PromotionType
    duration_days: int
    credits_per_day: int
    cost: int = Field(..., description="duration_days * credits_per_day")
    current_balance: int = Field(..., description="Caller's credit balance")
    shortfall: int = Field(..., description="Credits missing (0 if affordable)")
    affordable: bool


class CancelPromotionResponseDTO(BaseModel):
    promotion: PromotionResponseDTO
    credits_refunded: int
    credit_balance: int


class ExpirePromotionsResultDTO(BaseModel):
    expired: int = Field(..., description="Promotions moved to EXPIRED")
    run_at: datetime


class ClubSponsorshipsResponseDTO(BaseModel):
    """Sponsorships served in a club feed; each one counted an impression"""

    club_id: str
    sponsorships: List[PromotionResponseDTO]
    impressions_recorded: int


class SponsorshipClickResponseDTO(BaseModel):
    promotion_id: str
    tracked: bool


class SponsorshipAnalyticsDTO(BaseModel):
    """
    Performance of one sponsorship

    Ratios are 0 when their denominator is 0.
    """

    promotion_id: str
    pitch_id: str
    club_id: Optional[str] = None
    budget: int = Field(..., description="credits_committed")
    credits_consumed: int = Field(..., description="Credits used up by impressions")
    impressions: int
    clicks: int
    ctr: float = Field(..., description="clicks / impressions, in percent")
    cost_per_impression: float
    cost_per_click: float
    status: PromotionStatus
    is_running: bool
    starts_at: datetime
    ends_at: datetime
    days_remaining: int

    @classmethod
    def from_promotion(cls, promotion: Promotion, now: datetime) -> "SponsorshipAnalyticsDTO":
        impressions = promotion.impressions or 0
        clicks = promotion.clicks or 0
        consumed = promotion.credits_consumed or 0
        return cls(
            promotion_id=promotion.id,
            pitch_id=promotion.subject_id,
            club_id=promotion.club_id,
            budget=promotion.credits_committed,
            credits_consumed=consumed,
            impressions=impressions,
            clicks=clicks,
            ctr=(clicks / impressions) * 100 if impressions else 0.0,
            cost_per_impression=consumed / impressions if impressions else 0.0,
            cost_per_click=consumed / clicks if clicks else 0.0,
            status=promotion.effective_status(now),
            is_running=promotion.is_running(now),
            starts_at=promotion.starts_at,
            ends_at=promotion.ends_at,
            days_remaining=promotion.days_remaining(now),
        )


class SponsorshipAnalyticsResponseDTO(BaseModel):
    sponsorships: List[SponsorshipAnalyticsDTO]
    total: int
    total_impressions: int
    total_clicks: int
    total_credits_consumed: int
