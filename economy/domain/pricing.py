"""Credit packages and promotion rate tiers

Longer promotion commitments carry a lower daily rate.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class CreditPackage:
    code: str
    label: str
    credits: int
    bonus: int
    price_cents: int

    @property
    def total_credits(self) -> int:
        return self.credits + self.bonus

    @property
    def price(self) -> Decimal:
        return (Decimal(self.price_cents) / 100).quantize(Decimal("0.01"))


CREDIT_PACKAGES: tuple[CreditPackage, ...] = (
    CreditPackage(code="STARTER", label="Starter", credits=100, bonus=0, price_cents=999),
    CreditPackage(code="PRO", label="Pro", credits=500, bonus=50, price_cents=3999),
    CreditPackage(code="BUSINESS", label="Business", credits=1000, bonus=150, price_cents=6999),
)


def to_cents(price: Decimal) -> int:
    return int((Decimal(price) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def find_credit_package(
    code: Optional[str] = None,
    amount: Optional[int] = None,
    bonus: Optional[int] = None,
    price: Optional[Decimal] = None,
) -> Optional[CreditPackage]:
    """
    Resolve a catalog package by code, or by its exact (amount, bonus, price)

    Clients do not get to name their own price: anything that does not
    match a catalog entry resolves to None.
    """
    if code:
        return next((p for p in CREDIT_PACKAGES if p.code == code.upper()), None)
    if amount is None or price is None:
        return None
    price_cents = to_cents(price)
    for package in CREDIT_PACKAGES:
        if (
            package.credits == amount
            and package.bonus == (bonus or 0)
            and package.price_cents == price_cents
        ):
            return package
    return None


class PromotionType(str, Enum):
    BOOST = "BOOST"
    SPONSORSHIP = "SPONSORSHIP"


@dataclass(frozen=True)
class RateTier:
    min_days: int
    max_days: int
    credits_per_day: int


PROMOTION_RATE_TIERS: dict[PromotionType, tuple[RateTier, ...]] = {
    PromotionType.BOOST: (
        RateTier(min_days=1, max_days=7, credits_per_day=7),
        RateTier(min_days=8, max_days=14, credits_per_day=6),
        RateTier(min_days=15, max_days=30, credits_per_day=5),
    ),
    PromotionType.SPONSORSHIP: (
        RateTier(min_days=1, max_days=7, credits_per_day=20),
        RateTier(min_days=8, max_days=14, credits_per_day=18),
        RateTier(min_days=15, max_days=90, credits_per_day=15),
    ),
}


def rate_tier_for(promotion_type: PromotionType, duration_days: int) -> Optional[RateTier]:
    """Return the rate band covering duration_days, or None if out of range"""
    for tier in PROMOTION_RATE_TIERS[PromotionType(promotion_type)]:
        if tier.min_days <= duration_days <= tier.max_days:
            return tier
    return None


def promotion_cost(promotion_type: PromotionType, duration_days: int) -> tuple[int, int]:
    """
    Return (credits_per_day, total_cost) for a promotion

    Raises:
        ValueError: duration_days is outside every band
    """
    tier = rate_tier_for(promotion_type, duration_days)
    if tier is None:
        raise ValueError(
            f"Unsupported {PromotionType(promotion_type).value} duration: {duration_days} days"
        )
    return tier.credits_per_day, tier.credits_per_day * duration_days
