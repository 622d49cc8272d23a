"""Promotion use cases"""
from .create_boost import CreateBoost
from .create_sponsorship import CreateSponsorship
from .quote_promotion import QuotePromotion
from .expire_promotions import ExpirePromotions
from .list_promotions import ListPromotions
from .cancel_promotion import CancelPromotion
from .serve_club_sponsorships import ServeClubSponsorships
from .record_sponsorship_click import RecordSponsorshipClick
from .get_sponsorship_analytics import GetSponsorshipAnalytics
from .dtos import (
    CreateBoostCommandDTO,
    CreateSponsorshipCommandDTO,
    PromotionResponseDTO,
    ListPromotionsResponseDTO,
    QuotePromotionResponseDTO,
    CancelPromotionResponseDTO,
    ExpirePromotionsResultDTO,
    ClubSponsorshipsResponseDTO,
    SponsorshipClickResponseDTO,
    SponsorshipAnalyticsDTO,
    SponsorshipAnalyticsResponseDTO,
)

__all__ = [
    "CreateBoost",
    "CreateSponsorship",
    "QuotePromotion",
    "ExpirePromotions",
    "ListPromotions",
    "CancelPromotion",
    "ServeClubSponsorships",
    "RecordSponsorshipClick",
    "GetSponsorshipAnalytics",
    "CreateBoostCommandDTO",
    "CreateSponsorshipCommandDTO",
    "PromotionResponseDTO",
    "ListPromotionsResponseDTO",
    "QuotePromotionResponseDTO",
    "CancelPromotionResponseDTO",
    "ExpirePromotionsResultDTO",
    "ClubSponsorshipsResponseDTO",
    "SponsorshipClickResponseDTO",
    "SponsorshipAnalyticsDTO",
    "SponsorshipAnalyticsResponseDTO",
]
