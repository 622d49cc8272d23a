"""Pending Purchase Domain Entity

Tracks a credit purchase from payment-intent creation to confirmation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, String
from economy.libs.clock import utc_now
from economy.domain.base import BaseModel, generate_uuid


class PurchaseStatus(str, Enum):
    """Purchase lifecycle states"""
    CREATED = "CREATED"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


class PendingPurchase(BaseModel, table=True):
    """
    Pending Purchase - Payment-gated credit purchase

    Domain Rules:
    - payment_intent_id is unique (one purchase per intent)
    - Status transitions: CREATED -> CONFIRMED | FAILED, both terminal
    - Only CREATED -> CONFIRMED writes the CREDIT_PURCHASE ledger entry
    - credits_requested includes package bonus credits
    """

    __tablename__ = "pending_purchases"
    __table_args__ = (
        Index('ix_pending_purchases_status_created', 'status', 'created_at'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique purchase identifier"
    )

    user_id: str = Field(
        index=True,
        description="Purchasing user"
    )

    package_code: str = Field(
        sa_column=Column(String(32), nullable=False),
        description="Credit package code (STARTER, PRO, BUSINESS)"
    )

    credits_requested: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Credits to grant on confirmation (base + bonus)"
    )

    price_cents: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Charged price in minor currency units"
    )

    currency: str = Field(
        default="usd",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217, lowercase)"
    )

    payment_intent_id: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True),
        description="Opaque payment intent reference from the processor"
    )

    status: PurchaseStatus = Field(
        default=PurchaseStatus.CREATED,
        description="Purchase status (CREATED, CONFIRMED, FAILED)"
    )

    failure_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Why the purchase failed, if it did"
    )

    confirmed_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of confirmation"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="Purchase creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        description="Last status change timestamp"
    )
