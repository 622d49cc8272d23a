"""AwardPoints Use Case

Grants engagement points (or applies an administrative correction) and
awards any badges the new total unlocks.
"""

import logging
from typing import List, Optional
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.services.ledger_writer import LedgerWriter
from economy.app.services.notification_service import NotificationService, dispatch_ledger_events
from economy.app.repositories.ledger_entry_repository import (
    LedgerEntryRepository,
    DuplicateLedgerEntryError,
)
from economy.app.repositories.user_badge_repository import UserBadgeRepository
from economy.app.use_cases.badges.award_badge import grant_badge
from economy.domain.badges import newly_earned
from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind
from economy.domain.point_rules import ENGAGEMENT_EVENT_TYPES, points_for
from .dtos import AwardPointsCommandDTO, AwardPointsResponseDTO, LedgerEntryDTO

logger = logging.getLogger(__name__)


class AwardPoints:
    """
    Use Case: Award points for platform activity

    Business Rules:
    1. Amount defaults to the event's point value; unknown events need an explicit amount
    2. With ref_type + ref_id the award is idempotent per (user, event, reference)
    3. Negative corrections cannot take the point balance below zero
    4. Badges newly reached by the award are granted in the same transaction

    Flow:
    1. Resolve amount
    2. Check idempotency (return existing entry if found)
    3. Post the entry through the ledger writer
    4. Evaluate and grant newly earned badges
    5. Commit, then publish ledger events
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger_repo: LedgerEntryRepository,
        badge_repo: UserBadgeRepository,
        ledger_writer: LedgerWriter,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.ledger_repo = ledger_repo
        self.badge_repo = badge_repo
        self.ledger_writer = ledger_writer
        self.notification_service = notification_service

    async def execute(self, command: AwardPointsCommandDTO) -> Result[AwardPointsResponseDTO]:
        event_type = command.event_type.upper()

        # Step 1: Resolve amount
        amount = command.amount if command.amount is not None else points_for(event_type)
        if amount is None:
            return Return.err(
                Error(
                    code="UNKNOWN_EVENT_TYPE",
                    message=f"Unknown event type: {event_type}",
                    reason="Provide an explicit amount for events without a default point value",
                )
            )
        if amount == 0:
            return Return.err(
                Error(code="INVALID_AMOUNT", message="Point awards cannot be zero")
            )

        idempotency_key = None
        if command.ref_type and command.ref_id:
            idempotency_key = f"award:{command.user_id}:{event_type}:{command.ref_type}:{command.ref_id}"

        try:
            # Step 2: Idempotency check
            if idempotency_key:
                existing = await self.ledger_repo.get_by_idempotency_key(idempotency_key)
                if existing:
                    return Return.ok(await self._idempotent_response(existing))

            # Step 3: Post entry
            entry = LedgerEntry.create(
                user_id=command.user_id,
                kind=LedgerEntryKind.POINT_AWARD,
                amount=amount,
                event_type=event_type,
                related_entity_id=command.ref_id,
                idempotency_key=idempotency_key,
            )
            posted = await self.ledger_writer.post(entry)

            if posted is None:
                await self.uow.rollback()
                current = await self.ledger_writer.point_balance(command.user_id)
                return Return.err(
                    Error(
                        code="INSUFFICIENT_POINTS",
                        message=f"Insufficient points. Required: {-amount}, Available: {current}",
                        details={"current": current, "required": -amount, "shortfall": -amount - current},
                    )
                )

            # Step 4: Badges unlocked by this award
            committed: List[Optional[LedgerEntry]] = [posted]
            badges_awarded: List[str] = []
            if amount > 0 and event_type in ENGAGEMENT_EVENT_TYPES:
                counts = await self.ledger_repo.count_point_awards_by_event_type(command.user_id)
                held = [badge.badge_code for badge in await self.badge_repo.list_for_user(command.user_id)]
                for badge in newly_earned(counts, held):
                    inserted, bonus_entry = await grant_badge(
                        self.badge_repo, self.ledger_writer, command.user_id, badge
                    )
                    if inserted:
                        badges_awarded.append(badge.code)
                        committed.append(bonus_entry)

            points = await self.ledger_writer.point_balance(command.user_id)

            # Step 5: Commit
            await self.uow.commit()

        except DuplicateLedgerEntryError:
            # Lost a race against an identical award
            await self.uow.rollback()
            existing = await self.ledger_repo.get_by_idempotency_key(idempotency_key)
            if existing is None:
                return Return.err(
                    Error(code="AWARD_POINTS_FAILED", message="Failed to award points")
                )
            return Return.ok(await self._idempotent_response(existing))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="AWARD_POINTS_FAILED",
                    message="Failed to award points",
                    reason=str(e),
                )
            )

        logger.info(
            f"Awarded {amount} points to user {command.user_id} for {event_type}"
            + (f" (badges: {', '.join(badges_awarded)})" if badges_awarded else "")
        )
        await dispatch_ledger_events(self.notification_service, committed)

        return Return.ok(
            AwardPointsResponseDTO(
                entry=LedgerEntryDTO.from_entry(posted),
                idempotent=False,
                badges_awarded=badges_awarded,
                points=points,
            )
        )

    async def _idempotent_response(self, entry: LedgerEntry) -> AwardPointsResponseDTO:
        logger.warning(f"Duplicate point award ignored: {entry.idempotency_key}")
        return AwardPointsResponseDTO(
            entry=LedgerEntryDTO.from_entry(entry),
            idempotent=True,
            badges_awarded=[],
            points=await self.ledger_writer.point_balance(entry.user_id),
        )
