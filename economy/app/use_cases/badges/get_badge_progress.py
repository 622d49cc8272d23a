"""Get Badge Progress Use Case"""

from economy.libs.result import Result, Return
from economy.app.repositories.ledger_entry_repository import LedgerEntryRepository
from economy.app.repositories.user_badge_repository import UserBadgeRepository
from economy.domain.badges import evaluate_badges
from .dtos import BadgeProgressDTO, BadgeProgressResponseDTO


class GetBadgeProgress:
    """
    Read-only badge evaluation

    Counts come from the ledger; persisted awards are overlaid so a
    badge stays earned even if the catalog threshold later changes.
    """

    def __init__(self, ledger_repo: LedgerEntryRepository, badge_repo: UserBadgeRepository):
        self.ledger_repo = ledger_repo
        self.badge_repo = badge_repo

    async def execute(self, user_id: str) -> Result[BadgeProgressResponseDTO]:
        counts = await self.ledger_repo.count_point_awards_by_event_type(user_id)
        held = {badge.badge_code: badge.awarded_at for badge in await self.badge_repo.list_for_user(user_id)}

        progress = evaluate_badges(counts, held.keys())
        badges = [BadgeProgressDTO.from_progress(p, held.get(p.badge.code)) for p in progress]

        return Return.ok(
            BadgeProgressResponseDTO(
                user_id=user_id,
                badges=badges,
                earned_count=sum(1 for b in badges if b.is_earned),
            )
        )
