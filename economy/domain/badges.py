"""Badge catalog and progress evaluation

Badges are derived from counts of engagement events in the ledger.
Evaluation here is pure; persisting an award is the job of the
AwardBadge use case.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional


class BadgeCategory(str, Enum):
    READER = "READER"
    HOST = "HOST"
    AUTHOR = "AUTHOR"


@dataclass(frozen=True)
class BadgeDefinition:
    code: str
    name: str
    description: str
    category: BadgeCategory
    event_type: str
    required: int
    bonus_points: int = 0


BADGE_CATALOG: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        code="FIRST_VOTE", name="First Vote",
        description="Cast your first vote in a club poll",
        category=BadgeCategory.READER, event_type="VOTE_CAST", required=1,
    ),
    BadgeDefinition(
        code="BOOKWORM", name="Bookworm",
        description="Vote in 10 club polls",
        category=BadgeCategory.READER, event_type="VOTE_CAST", required=10, bonus_points=25,
    ),
    BadgeDefinition(
        code="SOCIABLE", name="Sociable",
        description="Post 20 messages in club rooms",
        category=BadgeCategory.READER, event_type="MESSAGE_POSTED", required=20, bonus_points=10,
    ),
    BadgeDefinition(
        code="LOYAL_MEMBER", name="Loyal Member",
        description="Join 3 book clubs",
        category=BadgeCategory.READER, event_type="CLUB_JOINED", required=3, bonus_points=10,
    ),
    BadgeDefinition(
        code="HOST_STARTER", name="Host Starter",
        description="Create your first book club",
        category=BadgeCategory.HOST, event_type="CLUB_CREATED", required=1,
    ),
    BadgeDefinition(
        code="DECISIVE", name="Decisive",
        description="Close 3 polls as a host",
        category=BadgeCategory.HOST, event_type="POLL_CLOSED", required=3, bonus_points=15,
    ),
    BadgeDefinition(
        code="AUTHOR_LAUNCH", name="Author Launch",
        description="Publish your first pitch",
        category=BadgeCategory.AUTHOR, event_type="PITCH_CREATED", required=1,
    ),
    BadgeDefinition(
        code="FAN_FAVORITE", name="Fan Favorite",
        description="Have a pitch selected by 3 clubs",
        category=BadgeCategory.AUTHOR, event_type="PITCH_SELECTED", required=3, bonus_points=50,
    ),
    BadgeDefinition(
        code="SWAP_VERIFIED", name="Swap Verified",
        description="Complete your first verified book swap",
        category=BadgeCategory.READER, event_type="SWAP_VERIFIED", required=1,
    ),
    BadgeDefinition(
        code="SWAP_MASTER", name="Swap Master",
        description="Complete 5 verified book swaps",
        category=BadgeCategory.READER, event_type="SWAP_VERIFIED", required=5, bonus_points=25,
    ),
    BadgeDefinition(
        code="BOOK_REVIEWER", name="Book Reviewer",
        description="Write your first verified review",
        category=BadgeCategory.READER, event_type="REVIEW_VERIFIED", required=1,
    ),
    BadgeDefinition(
        code="CRITIC", name="Critic",
        description="Write 10 verified reviews",
        category=BadgeCategory.READER, event_type="REVIEW_VERIFIED", required=10, bonus_points=25,
    ),
)

_BADGES_BY_CODE = {badge.code: badge for badge in BADGE_CATALOG}


def get_badge(code: str) -> Optional[BadgeDefinition]:
    return _BADGES_BY_CODE.get(code.upper())


@dataclass(frozen=True)
class BadgeProgress:
    badge: BadgeDefinition
    current: int
    is_earned: bool
    is_awarded: bool

    @property
    def required(self) -> int:
        return self.badge.required


def evaluate_badges(
    event_counts: Mapping[str, int],
    awarded: Iterable[str] = (),
) -> list[BadgeProgress]:
    """
    Compute progress for every catalog badge

    Args:
        event_counts: Number of POINT_AWARD entries per event type
        awarded: Badge codes already persisted for the user

    Returns:
        One BadgeProgress per catalog entry, in catalog order. current is
        capped at the badge's required count.
    """
    awarded = set(awarded)
    progress = []
    for badge in BADGE_CATALOG:
        count = event_counts.get(badge.event_type, 0)
        is_awarded = badge.code in awarded
        progress.append(
            BadgeProgress(
                badge=badge,
                current=min(count, badge.required),
                is_earned=is_awarded or count >= badge.required,
                is_awarded=is_awarded,
            )
        )
    return progress


def newly_earned(event_counts: Mapping[str, int], awarded: Iterable[str]) -> list[BadgeDefinition]:
    """Badges whose threshold is reached but that are not yet persisted"""
    return [
        p.badge for p in evaluate_badges(event_counts, awarded)
        if p.is_earned and not p.is_awarded
    ]
