"""Badge use cases"""
from .get_badge_progress import GetBadgeProgress
from .award_badge import AwardBadge, grant_badge
from .dtos import (
    BadgeProgressDTO,
    BadgeProgressResponseDTO,
    AwardBadgeCommandDTO,
    AwardBadgeResponseDTO,
)

__all__ = [
    "GetBadgeProgress",
    "AwardBadge",
    "grant_badge",
    "BadgeProgressDTO",
    "BadgeProgressResponseDTO",
    "AwardBadgeCommandDTO",
    "AwardBadgeResponseDTO",
]
