"""Data Transfer Objects for Badge Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from economy.domain.badges import BadgeCategory, BadgeProgress


class BadgeProgressDTO(BaseModel):
    code: str = Field(..., description="Badge code")
    name: str = Field(..., description="Display name")
    description: str = Field(..., description="How to earn the badge")
    category: BadgeCategory = Field(..., description="READER, HOST or AUTHOR")
    current: int = Field(..., description="Progress, capped at required")
    required: int = Field(..., description="Events needed")
    bonus_points: int = Field(..., description="Points granted on award")
    is_earned: bool = Field(..., description="Threshold reached or already awarded")
    awarded_at: Optional[datetime] = Field(None, description="When the badge was recorded")

    @classmethod
    def from_progress(cls, progress: BadgeProgress, awarded_at: Optional[datetime] = None) -> "BadgeProgressDTO":
        badge = progress.badge
        return cls(
            code=badge.code,
            name=badge.name,
            description=badge.description,
            category=badge.category,
            current=progress.current,
            required=badge.required,
            bonus_points=badge.bonus_points,
            is_earned=progress.is_earned,
            awarded_at=awarded_at,
        )


class BadgeProgressResponseDTO(BaseModel):
    user_id: str
    badges: List[BadgeProgressDTO]
    earned_count: int = Field(..., description="Number of earned badges")


class AwardBadgeCommandDTO(BaseModel):
    user_id: str = Field(..., description="Badge recipient")
    badge_code: str = Field(..., description="Code from the badge catalog")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_123",
                "badge_code": "BOOKWORM"
            }
        }


class AwardBadgeResponseDTO(BaseModel):
    user_id: str
    badge_code: str
    awarded: bool = Field(..., description="False if the user already held the badge")
    bonus_points: int = Field(0, description="Bonus points granted by this call")
