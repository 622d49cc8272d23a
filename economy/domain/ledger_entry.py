"""Ledger Entry Domain Entity

Immutable, append-only record of a single point or credit movement.
The ledger is the only source of truth for balances.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, String
from economy.libs.clock import utc_now
from economy.domain.base import BaseModel, generate_uuid


class LedgerEntryKind(str, Enum):
    """Ledger entry kinds; points and credits are separate namespaces"""
    POINT_AWARD = "POINT_AWARD"
    POINT_SPEND = "POINT_SPEND"
    CREDIT_PURCHASE = "CREDIT_PURCHASE"
    CREDIT_SPEND = "CREDIT_SPEND"
    CREDIT_REFUND = "CREDIT_REFUND"


POINT_KINDS = frozenset({LedgerEntryKind.POINT_AWARD, LedgerEntryKind.POINT_SPEND})
CREDIT_KINDS = frozenset({
    LedgerEntryKind.CREDIT_PURCHASE,
    LedgerEntryKind.CREDIT_SPEND,
    LedgerEntryKind.CREDIT_REFUND,
})

# Kinds whose amount must be strictly positive / strictly negative.
# POINT_AWARD may carry either sign (administrative corrections).
_POSITIVE_KINDS = frozenset({LedgerEntryKind.CREDIT_PURCHASE, LedgerEntryKind.CREDIT_REFUND})
_NEGATIVE_KINDS = frozenset({LedgerEntryKind.POINT_SPEND, LedgerEntryKind.CREDIT_SPEND})


class EventType:
    """Well-known ledger event classifications written by the engine itself"""
    CREDITS_PURCHASED = "CREDITS_PURCHASED"
    BOOST_PURCHASED = "BOOST_PURCHASED"
    SPONSORSHIP_PURCHASED = "SPONSORSHIP_PURCHASED"
    PROMOTION_CANCELLED = "PROMOTION_CANCELLED"
    REWARD_REDEEMED = "REWARD_REDEEMED"
    REWARD_REFUNDED = "REWARD_REFUNDED"
    BADGE_AWARDED = "BADGE_AWARDED"
    ADMIN_ADJUSTMENT = "ADMIN_ADJUSTMENT"


class LedgerEntry(BaseModel, table=True):
    """
    Ledger Entry - Immutable audit record of a balance change

    Domain Rules:
    - Entries are never updated or deleted; corrections are new offsetting entries
    - amount is a signed integer and never zero
    - POINT_SPEND / CREDIT_SPEND are negative, CREDIT_PURCHASE / CREDIT_REFUND positive
    - idempotency_key is unique when present (guards duplicate delivery)
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        Index('ix_ledger_entries_user_created', 'user_id', 'created_at'),
        Index('ix_ledger_entries_user_event', 'user_id', 'event_type'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique entry identifier"
    )

    user_id: str = Field(
        index=True,
        description="Owner of the balance change"
    )

    kind: LedgerEntryKind = Field(
        description="Entry kind (points or credits namespace)"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Signed amount (never zero)"
    )

    event_type: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Free-form classification (e.g., VOTE_CAST, BOOST_PURCHASED)"
    )

    related_entity_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Pitch, promotion, purchase or redemption id"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True),
        description="Unique key for idempotent writes"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="Entry timestamp (immutable)"
    )

    @property
    def is_points(self) -> bool:
        return LedgerEntryKind(self.kind) in POINT_KINDS

    @property
    def is_credits(self) -> bool:
        return LedgerEntryKind(self.kind) in CREDIT_KINDS

    @staticmethod
    def validate_amount(kind: LedgerEntryKind, amount: int) -> None:
        """Raise ValueError if amount violates the sign rules of kind"""
        if amount == 0:
            raise ValueError("Ledger entries cannot have a zero amount")
        if kind in _POSITIVE_KINDS and amount < 0:
            raise ValueError(f"{kind.value} entries must be positive, got {amount}")
        if kind in _NEGATIVE_KINDS and amount > 0:
            raise ValueError(f"{kind.value} entries must be negative, got {amount}")

    @classmethod
    def create(
        cls,
        user_id: str,
        kind: LedgerEntryKind,
        amount: int,
        event_type: str,
        related_entity_id: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> "LedgerEntry":
        """Build a validated entry; the only sanctioned constructor for writes"""
        cls.validate_amount(kind, amount)
        return cls(
            user_id=user_id,
            kind=kind,
            amount=amount,
            event_type=event_type,
            related_entity_id=related_entity_id,
            idempotency_key=idempotency_key,
        )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "6f1c7a4e-1d2b-4c5e-9f00-1a2b3c4d5e6f",
                "user_id": "user_123",
                "kind": "CREDIT_SPEND",
                "amount": -252,
                "event_type": "SPONSORSHIP_PURCHASED",
                "related_entity_id": "promo_456",
                "idempotency_key": None,
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
