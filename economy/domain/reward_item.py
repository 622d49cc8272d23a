"""Reward Item Domain Entity

Catalog item that users redeem with points. Inventory may be finite.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, String, Text
from economy.libs.clock import utc_now
from economy.domain.base import BaseModel, generate_uuid


class RewardItem(BaseModel, table=True):
    """
    Reward Item - Point-priced catalog entry

    Domain Rules:
    - copies_available None means unlimited inventory
    - copies_redeemed <= copies_available when inventory is limited
    - copies_redeemed only changes through conditional updates
    - points_cost changes never affect already-open redemption requests
    """

    __tablename__ = "reward_items"
    __table_args__ = (
        CheckConstraint('points_cost > 0', name='points_cost_positive'),
        CheckConstraint('copies_redeemed >= 0', name='copies_redeemed_non_negative'),
        CheckConstraint(
            'copies_available IS NULL OR copies_redeemed <= copies_available',
            name='copies_within_inventory'
        ),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique reward identifier"
    )

    name: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Display name"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Display description"
    )

    reward_type: str = Field(
        default="DIGITAL",
        sa_column=Column(String(32), nullable=False),
        description="Kind of reward (e.g., DIGITAL, PHYSICAL_BOOK, FEATURE)"
    )

    points_cost: int = Field(
        description="Points debited per redemption"
    )

    copies_available: Optional[int] = Field(
        default=None,
        description="Total inventory (None = unlimited)"
    )

    copies_redeemed: int = Field(
        default=0,
        description="Copies currently reserved or handed out"
    )

    is_active: bool = Field(
        default=True,
        description="Whether the reward can be requested"
    )

    sort_order: int = Field(
        default=0,
        description="Catalog ordering"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        description="Last update timestamp"
    )

    @property
    def is_limited(self) -> bool:
        return self.copies_available is not None

    @property
    def remaining_copies(self) -> Optional[int]:
        if self.copies_available is None:
            return None
        return max(self.copies_available - self.copies_redeemed, 0)

    @property
    def is_available(self) -> bool:
        if not self.is_active:
            return False
        return self.copies_available is None or self.copies_redeemed < self.copies_available
