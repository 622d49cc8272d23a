from .base import BaseModel, generate_uuid
from .ledger_entry import LedgerEntry, LedgerEntryKind, EventType, POINT_KINDS, CREDIT_KINDS
from .user_balance import UserBalance
from .pending_purchase import PendingPurchase, PurchaseStatus
from .pricing import PromotionType, CreditPackage, CREDIT_PACKAGES
from .promotion import Promotion, PromotionStatus, SponsorshipFrequency
from .promotion_subject_lock import PromotionSubjectLock, subject_key
from .reward_item import RewardItem
from .redemption_request import RedemptionRequest, RedemptionStatus, ALLOWED_TRANSITIONS
from .user_badge import UserBadge
from .badges import BadgeDefinition, BadgeProgress, BADGE_CATALOG
from .balance import BalanceSnapshot, project_balance

__all__ = [
    "BaseModel",
    "generate_uuid",
    "LedgerEntry",
    "LedgerEntryKind",
    "EventType",
    "POINT_KINDS",
    "CREDIT_KINDS",
    "UserBalance",
    "PendingPurchase",
    "PurchaseStatus",
    "PromotionType",
    "CreditPackage",
    "CREDIT_PACKAGES",
    "Promotion",
    "PromotionStatus",
    "SponsorshipFrequency",
    "PromotionSubjectLock",
    "subject_key",
    "RewardItem",
    "RedemptionRequest",
    "RedemptionStatus",
    "ALLOWED_TRANSITIONS",
    "UserBadge",
    "BadgeDefinition",
    "BadgeProgress",
    "BADGE_CATALOG",
    "BalanceSnapshot",
    "project_balance",
]
