"""AwardBadge Use Case

Persists a badge award and grants its bonus points exactly once.
"""

import logging
from typing import Optional, Tuple
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.services.ledger_writer import LedgerWriter
from economy.app.services.notification_service import NotificationService, dispatch_ledger_events
from economy.app.repositories.user_badge_repository import UserBadgeRepository
from economy.domain.badges import BadgeDefinition, get_badge
from economy.domain.ledger_entry import EventType, LedgerEntry, LedgerEntryKind
from .dtos import AwardBadgeCommandDTO, AwardBadgeResponseDTO

logger = logging.getLogger(__name__)


async def grant_badge(
    badge_repo: UserBadgeRepository,
    writer: LedgerWriter,
    user_id: str,
    badge: BadgeDefinition,
) -> Tuple[bool, Optional[LedgerEntry]]:
    """
    Insert the badge if absent and post its bonus

    Runs inside the caller's unit of work and does not commit.

    Returns:
        (inserted, bonus entry or None)
    """
    inserted = await badge_repo.insert_if_absent(user_id, badge.code)
    if not inserted:
        return False, None

    bonus_entry = None
    if badge.bonus_points > 0:
        bonus_entry = await writer.post(
            LedgerEntry.create(
                user_id=user_id,
                kind=LedgerEntryKind.POINT_AWARD,
                amount=badge.bonus_points,
                event_type=EventType.BADGE_AWARDED,
                related_entity_id=badge.code,
                idempotency_key=f"badge:{user_id}:{badge.code}",
            )
        )

    logger.info(f"Badge {badge.code} awarded to user {user_id} (bonus={badge.bonus_points})")
    return True, bonus_entry


class AwardBadge:
    """
    Use Case: Award a badge to a user

    Business Rules:
    1. (user_id, badge_code) is unique; awarding twice is a no-op
    2. Only the call that inserts the badge grants the bonus points
    3. Badge row and bonus entry commit together
    """

    def __init__(
        self,
        uow: UnitOfWork,
        badge_repo: UserBadgeRepository,
        ledger_writer: LedgerWriter,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.badge_repo = badge_repo
        self.ledger_writer = ledger_writer
        self.notification_service = notification_service

    async def execute(self, command: AwardBadgeCommandDTO) -> Result[AwardBadgeResponseDTO]:
        badge = get_badge(command.badge_code)
        if badge is None:
            return Return.err(
                Error(
                    code="UNKNOWN_BADGE",
                    message=f"Unknown badge code: {command.badge_code}",
                )
            )

        try:
            inserted, bonus_entry = await grant_badge(
                self.badge_repo, self.ledger_writer, command.user_id, badge
            )
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="AWARD_BADGE_FAILED",
                    message="Failed to award badge",
                    reason=str(e),
                )
            )

        if not inserted:
            logger.warning(f"User {command.user_id} already holds badge {badge.code}")

        await dispatch_ledger_events(self.notification_service, [bonus_entry])

        return Return.ok(
            AwardBadgeResponseDTO(
                user_id=command.user_id,
                badge_code=badge.code,
                awarded=inserted,
                bonus_points=badge.bonus_points if bonus_entry else 0,
            )
        )
