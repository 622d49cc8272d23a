"""CreateSponsorship Use Case

Sponsors a pitch inside a specific club, paid in credits.
"""

from datetime import datetime, timedelta
from typing import Optional
from economy.libs.result import Result, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.services.ledger_writer import LedgerWriter
from economy.app.services.notification_service import NotificationService
from economy.app.repositories.promotion_repository import PromotionRepository
from economy.domain.ledger_entry import EventType
from economy.domain.pricing import PromotionType
from economy.domain.promotion import Promotion
from .allocation import allocate_promotion
from .dtos import CreateSponsorshipCommandDTO, PromotionResponseDTO


class CreateSponsorship:
    """
    Use Case: Purchase a club sponsorship

    Business Rules:
    1. cost = duration_days * tier rate (1-7 days: 20/day, 8-14: 18/day, 15-90: 15/day)
    2. Credits are debited atomically with creation; insufficient balance aborts
    3. A (pitch, club) pair holds at most one ACTIVE sponsorship per window;
       overlaps are rejected, not queued
    """

    def __init__(
        self,
        uow: UnitOfWork,
        promotion_repo: PromotionRepository,
        ledger_writer: LedgerWriter,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.promotion_repo = promotion_repo
        self.ledger_writer = ledger_writer
        self.notification_service = notification_service

    async def execute(self, command: CreateSponsorshipCommandDTO) -> Result[PromotionResponseDTO]:
        promotion = Promotion(
            promotion_type=PromotionType.SPONSORSHIP,
            subject_id=command.pitch_id,
            club_id=command.club_id,
            owner_id=command.owner_id,
            duration_days=command.duration_days,
            frequency=command.frequency,
        )
        return await allocate_promotion(
            uow=self.uow,
            promotion_repo=self.promotion_repo,
            ledger_writer=self.ledger_writer,
            promotion=promotion,
            event_type=EventType.SPONSORSHIP_PURCHASED,
            schedule=self._reject_overlap,
            notification_service=self.notification_service,
            failure_code="CREATE_SPONSORSHIP_FAILED",
        )

    async def _reject_overlap(self, promotion: Promotion, now: datetime) -> Optional[Error]:
        ends_at = promotion.starts_at + timedelta(days=promotion.duration_days)
        existing = await self.promotion_repo.find_overlapping_sponsorship(
            promotion.subject_id, promotion.club_id, promotion.starts_at, ends_at
        )
        if existing is None:
            return None
        return Error(
            code="PROMOTION_CONFLICT",
            message=f"Pitch {promotion.subject_id} is already sponsored in club {promotion.club_id}",
            reason=f"Sponsorship {existing.id} runs until {existing.ends_at.isoformat()}",
            details={"conflicting_promotion_id": existing.id},
        )
