"""CreateBoost Use Case

Boosts a pitch for a number of days, paid in credits.
"""

from datetime import datetime
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
from .dtos import CreateBoostCommandDTO, PromotionResponseDTO


class CreateBoost:
    """
    Use Case: Purchase a pitch boost

    Business Rules:
    1. cost = duration_days * tier rate (1-7 days: 7/day, 8-14: 6/day, 15-30: 5/day)
    2. Credits are debited atomically with creation; insufficient balance aborts
    3. Boosts stack: a pitch that already has a running or queued boost gets
       the new one queued behind the latest end
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

    async def execute(self, command: CreateBoostCommandDTO) -> Result[PromotionResponseDTO]:
        promotion = Promotion(
            promotion_type=PromotionType.BOOST,
            subject_id=command.pitch_id,
            owner_id=command.owner_id,
            duration_days=command.duration_days,
        )
        return await allocate_promotion(
            uow=self.uow,
            promotion_repo=self.promotion_repo,
            ledger_writer=self.ledger_writer,
            promotion=promotion,
            event_type=EventType.BOOST_PURCHASED,
            schedule=self._queue_behind_existing,
            notification_service=self.notification_service,
            failure_code="CREATE_BOOST_FAILED",
        )

    async def _queue_behind_existing(self, promotion: Promotion, now: datetime) -> Optional[Error]:
        latest_end = await self.promotion_repo.latest_active_boost_end(promotion.subject_id, now)
        if latest_end is not None and latest_end > now:
            promotion.starts_at = latest_end
        return None
