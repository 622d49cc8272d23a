"""User Balance Domain Entity

Cached projection of a user's point and credit balances. The ledger is
the source of truth; this row exists so that "check then debit" can be
a single conditional UPDATE and so reads do not have to fold history.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, BigInteger
from economy.libs.clock import utc_now
from economy.domain.base import BaseModel


class UserBalance(BaseModel, table=True):
    """
    User Balance - Cached point/credit projection per user

    Domain Rules:
    - One row per user (user_id is the primary key)
    - points and credit_balance are never negative
    - Only LedgerWriter changes these columns, always alongside a ledger entry
    - Must reconcile with the ledger fold at any time
    """

    __tablename__ = "user_balances"
    __table_args__ = (
        CheckConstraint('points >= 0', name='points_non_negative'),
        CheckConstraint('credit_balance >= 0', name='credit_balance_non_negative'),
    )

    user_id: str = Field(
        primary_key=True,
        description="User identifier from the identity provider"
    )

    points: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Cached point balance"
    )

    credit_balance: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Cached credit balance"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="Row creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        description="Last balance change timestamp"
    )
