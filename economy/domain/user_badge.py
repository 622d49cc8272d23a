"""User Badge Domain Entity

Records that a badge was awarded. The (user_id, badge_code) pair is
unique, which is what makes awarding idempotent.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import String, UniqueConstraint
from economy.libs.clock import utc_now
from economy.domain.base import BaseModel, generate_uuid


class UserBadge(BaseModel, table=True):

    __tablename__ = "user_badges"
    __table_args__ = (
        UniqueConstraint('user_id', 'badge_code', name='uq_user_badges_user_code'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    user_id: str = Field(
        index=True,
        description="Badge holder"
    )

    badge_code: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Code from the badge catalog"
    )

    awarded_at: datetime = Field(
        default_factory=utc_now,
        description="Award timestamp"
    )
