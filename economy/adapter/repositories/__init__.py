from .ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from .user_balance_repository import SqlAlchemyUserBalanceRepository
from .pending_purchase_repository import SqlAlchemyPendingPurchaseRepository
from .promotion_repository import SqlAlchemyPromotionRepository
from .reward_item_repository import SqlAlchemyRewardItemRepository
from .redemption_request_repository import SqlAlchemyRedemptionRequestRepository
from .user_badge_repository import SqlAlchemyUserBadgeRepository

__all__ = [
    "SqlAlchemyLedgerEntryRepository",
    "SqlAlchemyUserBalanceRepository",
    "SqlAlchemyPendingPurchaseRepository",
    "SqlAlchemyPromotionRepository",
    "SqlAlchemyRewardItemRepository",
    "SqlAlchemyRedemptionRequestRepository",
    "SqlAlchemyUserBadgeRepository",
]
