"""Promotion Subject Lock

One row per promoted subject (a pitch for boosts, a pitch in a club for
sponsorships). Creating a promotion updates its subject's row first, so
concurrent purchases for the same subject queue on that row lock no
matter which users pay for them.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String
from economy.libs.clock import utc_now
from economy.domain.base import BaseModel
from economy.domain.pricing import PromotionType


def subject_key(promotion_type: PromotionType, subject_id: str, club_id: Optional[str] = None) -> str:
    """Lock key: BOOST:<pitch> or SPONSORSHIP:<pitch>:<club>"""
    promotion_type = PromotionType(promotion_type)
    if promotion_type == PromotionType.SPONSORSHIP:
        return f"{promotion_type.value}:{subject_id}:{club_id}"
    return f"{promotion_type.value}:{subject_id}"


class PromotionSubjectLock(BaseModel, table=True):

    __tablename__ = "promotion_subject_locks"

    subject_key: str = Field(
        sa_column=Column(String(600), primary_key=True),
        description="Promotion type, pitch and (for sponsorships) club"
    )

    locked_at: datetime = Field(
        default_factory=utc_now,
        description="Last time a promotion purchase took the lock"
    )
