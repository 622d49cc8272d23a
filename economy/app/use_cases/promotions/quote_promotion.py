"""Quote Promotion Use Case"""

from economy.libs.result import Result, Return
from economy.app.services.ledger_writer import LedgerWriter
from economy.domain.pricing import PromotionType, promotion_cost
from .allocation import invalid_duration
from .dtos import QuotePromotionResponseDTO


class QuotePromotion:
    """Read-only price quote against the caller's current credit balance"""

    def __init__(self, ledger_writer: LedgerWriter):
        self.ledger_writer = ledger_writer

    async def execute(
        self,
        owner_id: str,
        promotion_type: PromotionType,
        duration_days: int,
    ) -> Result[QuotePromotionResponseDTO]:
        promotion_type = PromotionType(promotion_type)
        try:
            credits_per_day, cost = promotion_cost(promotion_type, duration_days)
        except ValueError as e:
            return Return.err(invalid_duration(promotion_type, duration_days, str(e)))

        current = await self.ledger_writer.credit_balance(owner_id)
        shortfall = max(cost - current, 0)

        return Return.ok(
            QuotePromotionResponseDTO(
                promotion_type=promotion_type,
                duration_days=duration_days,
                credits_per_day=credits_per_day,
                cost=cost,
                current_balance=current,
                shortfall=shortfall,
                affordable=shortfall == 0,
            )
        )
