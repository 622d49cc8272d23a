"""Wire use cases against real repositories for a given session"""

from economy.adapter.repositories import (
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyPendingPurchaseRepository,
    SqlAlchemyPromotionRepository,
    SqlAlchemyRedemptionRequestRepository,
    SqlAlchemyRewardItemRepository,
    SqlAlchemyUserBadgeRepository,
    SqlAlchemyUserBalanceRepository,
)
from economy.adapter.services import SqlAlchemyUnitOfWork
from economy.app.services import LedgerWriter
from economy.app.use_cases.badges import AwardBadge
from economy.app.use_cases.ledger import AwardPoints, GetBalance, ReconcileBalances
from economy.app.use_cases.promotions import (
    CancelPromotion,
    CreateBoost,
    CreateSponsorship,
    GetSponsorshipAnalytics,
    RecordSponsorshipClick,
    ServeClubSponsorships,
)
from economy.app.use_cases.purchases import ConfirmPurchase, InitiatePurchase
from economy.app.use_cases.rewards import CreateReward, RequestRedemption, ReviewRedemption


def ledger_writer(session):
    return LedgerWriter(SqlAlchemyLedgerEntryRepository(session), SqlAlchemyUserBalanceRepository(session))


def initiate_purchase(session, gateway):
    return InitiatePurchase(
        uow=SqlAlchemyUnitOfWork(session),
        purchase_repo=SqlAlchemyPendingPurchaseRepository(session),
        payment_gateway=gateway,
    )


def confirm_purchase(session, gateway):
    return ConfirmPurchase(
        uow=SqlAlchemyUnitOfWork(session),
        purchase_repo=SqlAlchemyPendingPurchaseRepository(session),
        ledger_repo=SqlAlchemyLedgerEntryRepository(session),
        ledger_writer=ledger_writer(session),
        payment_gateway=gateway,
    )


def create_boost(session):
    return CreateBoost(
        uow=SqlAlchemyUnitOfWork(session),
        promotion_repo=SqlAlchemyPromotionRepository(session),
        ledger_writer=ledger_writer(session),
    )


def create_sponsorship(session):
    return CreateSponsorship(
        uow=SqlAlchemyUnitOfWork(session),
        promotion_repo=SqlAlchemyPromotionRepository(session),
        ledger_writer=ledger_writer(session),
    )


def cancel_promotion(session):
    return CancelPromotion(
        uow=SqlAlchemyUnitOfWork(session),
        promotion_repo=SqlAlchemyPromotionRepository(session),
        ledger_writer=ledger_writer(session),
    )


def serve_club_sponsorships(session):
    return ServeClubSponsorships(SqlAlchemyUnitOfWork(session), SqlAlchemyPromotionRepository(session))


def record_sponsorship_click(session):
    return RecordSponsorshipClick(SqlAlchemyUnitOfWork(session), SqlAlchemyPromotionRepository(session))


def sponsorship_analytics(session):
    return GetSponsorshipAnalytics(SqlAlchemyPromotionRepository(session))


def create_reward(session):
    return CreateReward(SqlAlchemyUnitOfWork(session), SqlAlchemyRewardItemRepository(session))


def request_redemption(session):
    return RequestRedemption(
        uow=SqlAlchemyUnitOfWork(session),
        reward_repo=SqlAlchemyRewardItemRepository(session),
        redemption_repo=SqlAlchemyRedemptionRequestRepository(session),
        ledger_writer=ledger_writer(session),
    )


def review_redemption(session):
    return ReviewRedemption(
        uow=SqlAlchemyUnitOfWork(session),
        redemption_repo=SqlAlchemyRedemptionRequestRepository(session),
        reward_repo=SqlAlchemyRewardItemRepository(session),
        ledger_writer=ledger_writer(session),
    )


def award_points(session):
    return AwardPoints(
        uow=SqlAlchemyUnitOfWork(session),
        ledger_repo=SqlAlchemyLedgerEntryRepository(session),
        badge_repo=SqlAlchemyUserBadgeRepository(session),
        ledger_writer=ledger_writer(session),
    )


def award_badge(session):
    return AwardBadge(
        uow=SqlAlchemyUnitOfWork(session),
        badge_repo=SqlAlchemyUserBadgeRepository(session),
        ledger_writer=ledger_writer(session),
    )


def get_balance(session):
    return GetBalance(SqlAlchemyLedgerEntryRepository(session))


def reconcile(session):
    return ReconcileBalances(SqlAlchemyLedgerEntryRepository(session), SqlAlchemyUserBalanceRepository(session))
