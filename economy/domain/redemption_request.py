"""Redemption Request Domain Entity

A user's point-funded claim on a reward, moved through an approval
workflow by admins.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import String, Text
from economy.libs.clock import utc_now
from economy.domain.base import BaseModel, generate_uuid


class RedemptionStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"
    FULFILLED = "FULFILLED"
    CANCELLED = "CANCELLED"


ALLOWED_TRANSITIONS: dict[RedemptionStatus, set[RedemptionStatus]] = {
    RedemptionStatus.PENDING: {
        RedemptionStatus.APPROVED,
        RedemptionStatus.DECLINED,
        RedemptionStatus.FULFILLED,
        RedemptionStatus.CANCELLED,
    },
    RedemptionStatus.APPROVED: {RedemptionStatus.FULFILLED},
    RedemptionStatus.DECLINED: set(),
    RedemptionStatus.FULFILLED: set(),
    RedemptionStatus.CANCELLED: set(),
}

# Transitions that hand the points (and reserved copy) back to the user
REFUNDING_STATUSES = frozenset({RedemptionStatus.DECLINED, RedemptionStatus.CANCELLED})


def can_transition(current: RedemptionStatus, new: RedemptionStatus) -> bool:
    return RedemptionStatus(new) in ALLOWED_TRANSITIONS.get(RedemptionStatus(current), set())


def validate_transition(current: RedemptionStatus, new: RedemptionStatus) -> None:
    """Raise when a transition is not allowed by the state machine."""
    if not can_transition(current, new):
        raise ValueError(
            f"Invalid transition: {RedemptionStatus(current).value} -> {RedemptionStatus(new).value}"
        )


class RedemptionRequest(BaseModel, table=True):
    """
    Redemption Request - Reward claim with approval workflow

    Domain Rules:
    - points_spent is a snapshot of the reward cost at request time
    - Points are debited when the request is created (status PENDING)
    - DECLINED / CANCELLED refund points_spent and release the reserved copy
    - FULFILLED, DECLINED and CANCELLED are terminal
    """

    __tablename__ = "redemption_requests"
    __table_args__ = (
        Index('ix_redemption_requests_status', 'status'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique redemption identifier"
    )

    user_id: str = Field(
        index=True,
        description="Requesting user"
    )

    reward_item_id: str = Field(
        foreign_key="reward_items.id",
        index=True,
        description="Requested reward"
    )

    points_spent: int = Field(
        description="Points debited at request time"
    )

    copy_reserved: bool = Field(
        default=False,
        description="Whether a limited-inventory copy was reserved"
    )

    status: RedemptionStatus = Field(
        default=RedemptionStatus.PENDING,
        description="Workflow status"
    )

    reviewed_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Admin who last reviewed the request"
    )

    reviewed_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of the last review"
    )

    rejection_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Reason given when declined"
    )

    fulfilled_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of fulfillment"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="Request timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        description="Last status change timestamp"
    )
