"""Unit tests for credit packages and promotion pricing"""

from decimal import Decimal

import pytest

from economy.domain.pricing import (
    PromotionType,
    find_credit_package,
    promotion_cost,
    rate_tier_for,
    to_cents,
)


class TestCreditPackages:

    def test_lookup_by_code_is_case_insensitive(self):
        package = find_credit_package(code="pro")

        assert package.code == "PRO"
        assert package.total_credits == 550
        assert package.price == Decimal("39.99")

    def test_lookup_by_exact_triple(self):
        package = find_credit_package(amount=500, bonus=50, price=Decimal("39.99"))

        assert package.code == "PRO"

    def test_client_chosen_price_does_not_match(self):
        assert find_credit_package(amount=500, bonus=50, price=Decimal("0.99")) is None

    def test_unknown_code(self):
        assert find_credit_package(code="GOLD") is None

    def test_to_cents_rounds_half_up(self):
        assert to_cents(Decimal("9.995")) == 1000
        assert to_cents(Decimal("39.99")) == 3999


class TestPromotionCost:

    @pytest.mark.parametrize(
        "days,per_day,total",
        [(1, 7, 7), (7, 7, 49), (8, 6, 48), (14, 6, 84), (15, 5, 75), (30, 5, 150)],
    )
    def test_boost_tiers(self, days, per_day, total):
        assert promotion_cost(PromotionType.BOOST, days) == (per_day, total)

    @pytest.mark.parametrize(
        "days,per_day,total",
        [(7, 20, 140), (14, 18, 252), (30, 15, 450), (90, 15, 1350)],
    )
    def test_sponsorship_tiers(self, days, per_day, total):
        assert promotion_cost(PromotionType.SPONSORSHIP, days) == (per_day, total)

    @pytest.mark.parametrize(
        "promotion_type,days",
        [
            (PromotionType.BOOST, 0),
            (PromotionType.BOOST, 31),
            (PromotionType.SPONSORSHIP, -1),
            (PromotionType.SPONSORSHIP, 91),
        ],
    )
    def test_out_of_range_duration(self, promotion_type, days):
        assert rate_tier_for(promotion_type, days) is None
        with pytest.raises(ValueError):
            promotion_cost(promotion_type, days)
