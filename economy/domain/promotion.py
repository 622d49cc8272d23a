"""Promotion Domain Entity

Credit-funded, time-bounded visibility for a pitch: either a boost or a
club-targeted sponsorship.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, String
from economy.libs.clock import utc_now
from economy.domain.base import BaseModel, generate_uuid
from economy.domain.pricing import PromotionType


class PromotionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class SponsorshipFrequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class Promotion(BaseModel, table=True):
    """
    Promotion - Boost or sponsorship paid for with credits

    Domain Rules:
    - credits_committed == duration_days * credits_per_day
    - The full cost is debited in the same transaction that creates the row
    - ACTIVE -> EXPIRED once ends_at has passed (no refund)
    - ACTIVE -> CANCELLED only while starts_at is still in the future (refunded)
    - Sponsorships carry club_id and frequency, boosts carry neither
    - Each served sponsorship impression consumes one credit of
      credits_committed; credits_consumed never exceeds it
    """

    __tablename__ = "promotions"
    __table_args__ = (
        Index('ix_promotions_status_ends_at', 'status', 'ends_at'),
        Index('ix_promotions_subject', 'promotion_type', 'subject_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique promotion identifier"
    )

    promotion_type: PromotionType = Field(
        description="BOOST or SPONSORSHIP"
    )

    subject_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Promoted pitch id"
    )

    club_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Sponsored club (sponsorships only)"
    )

    owner_id: str = Field(
        index=True,
        description="User who paid for the promotion"
    )

    duration_days: int = Field(
        description="Length of the promotion window in days"
    )

    credits_per_day: int = Field(
        description="Daily rate of the tier the promotion was bought at"
    )

    credits_committed: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Total credits debited (duration_days * credits_per_day)"
    )

    frequency: Optional[SponsorshipFrequency] = Field(
        default=None,
        description="Display frequency (sponsorships only)"
    )

    impressions: int = Field(
        default=0,
        description="Times the sponsored pitch was served in its club feed"
    )

    clicks: int = Field(
        default=0,
        description="Clicks on the sponsored pitch"
    )

    credits_consumed: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Part of credits_committed used up by impressions"
    )

    status: PromotionStatus = Field(
        default=PromotionStatus.ACTIVE,
        description="ACTIVE, EXPIRED or CANCELLED"
    )

    starts_at: datetime = Field(
        description="Start of the visibility window"
    )

    ends_at: datetime = Field(
        description="End of the visibility window"
    )

    cancelled_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of cancellation"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        description="Last status change timestamp"
    )

    def effective_status(self, now: datetime) -> PromotionStatus:
        """Status with lazy expiry applied"""
        status = PromotionStatus(self.status)
        if status == PromotionStatus.ACTIVE and self.ends_at <= now:
            return PromotionStatus.EXPIRED
        return status

    def is_running(self, now: datetime) -> bool:
        return self.effective_status(now) == PromotionStatus.ACTIVE and self.starts_at <= now

    def overlaps(self, starts_at: datetime, ends_at: datetime) -> bool:
        return self.starts_at < ends_at and starts_at < self.ends_at

    def days_remaining(self, now: datetime) -> int:
        """Whole days left in the window, counting a started day as used"""
        day = 86400
        total = math.ceil((self.ends_at - self.starts_at).total_seconds() / day)
        elapsed = math.ceil((now - self.starts_at).total_seconds() / day)
        return max(0, total - max(0, elapsed))
