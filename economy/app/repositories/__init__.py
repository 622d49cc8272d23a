from .ledger_entry_repository import LedgerEntryRepository, DuplicateLedgerEntryError
from .user_balance_repository import UserBalanceRepository
from .pending_purchase_repository import PendingPurchaseRepository
from .promotion_repository import PromotionRepository
from .reward_item_repository import RewardItemRepository
from .redemption_request_repository import RedemptionRequestRepository
from .user_badge_repository import UserBadgeRepository

__all__ = [
    "LedgerEntryRepository",
    "DuplicateLedgerEntryError",
    "UserBalanceRepository",
    "PendingPurchaseRepository",
    "PromotionRepository",
    "RewardItemRepository",
    "RedemptionRequestRepository",
    "UserBadgeRepository",
]
