"""Integration tests for the credit and reward flows against SQLite

Each step runs in its own session, the way separate requests would.
"""

from datetime import timedelta
import pytest

from economy.adapter.repositories import (
    SqlAlchemyPendingPurchaseRepository,
    SqlAlchemyRewardItemRepository,
)
from economy.app.use_cases.badges import AwardBadgeCommandDTO
from economy.app.use_cases.ledger import AwardPointsCommandDTO
from economy.app.use_cases.promotions import CreateBoostCommandDTO, CreateSponsorshipCommandDTO
from economy.app.use_cases.purchases import ConfirmPurchaseCommandDTO, InitiatePurchaseCommandDTO
from economy.app.use_cases.rewards import (
    CreateRewardCommandDTO,
    RequestRedemptionCommandDTO,
    ReviewAction,
    ReviewRedemptionCommandDTO,
)
from economy.domain.pending_purchase import PurchaseStatus
from economy.domain.promotion import PromotionStatus
from economy.domain.redemption_request import RedemptionStatus
from economy.libs.clock import utc_now
from tests.integration import builders


async def balance_of(session_factory, user_id):
    async with session_factory() as session:
        return (await builders.get_balance(session).execute(user_id)).value


async def assert_reconciled(session_factory):
    async with session_factory() as session:
        report = (await builders.reconcile(session).execute()).value
    assert report.discrepancies_found == 0, report.discrepancies


@pytest.mark.asyncio
class TestCreditPurchaseFlow:

    async def test_pro_package_credits_once(self, session_factory, payment_gateway):
        """
        Given: A PRO purchase whose payment succeeded
        When: It is confirmed twice
        Then: 550 credits are granted once and the second call is ALREADY_PROCESSED
        """
        async with session_factory() as session:
            started = await builders.initiate_purchase(session, payment_gateway).execute(
                InitiatePurchaseCommandDTO(user_id="author_1", package_code="PRO")
            )
        assert started.is_ok()
        assert started.value.credits == 550
        assert started.value.price_cents == 3999

        intent_id = started.value.payment_intent_id
        payment_gateway.set_status(intent_id, "succeeded")

        async with session_factory() as session:
            first = await builders.confirm_purchase(session, payment_gateway).execute(
                ConfirmPurchaseCommandDTO(payment_intent_id=intent_id, user_id="author_1")
            )
        async with session_factory() as session:
            second = await builders.confirm_purchase(session, payment_gateway).execute(
                ConfirmPurchaseCommandDTO(payment_intent_id=intent_id, user_id="author_1")
            )

        assert first.is_ok()
        assert first.value.credit_balance == 550
        assert second.error.code == "ALREADY_PROCESSED"
        assert (await balance_of(session_factory, "author_1")).credit_balance == 550
        await assert_reconciled(session_factory)

    async def test_declined_payment_closes_purchase(self, session_factory, payment_gateway):
        async with session_factory() as session:
            started = await builders.initiate_purchase(session, payment_gateway).execute(
                InitiatePurchaseCommandDTO(user_id="author_1", package_code="STARTER")
            )
        intent_id = started.value.payment_intent_id
        payment_gateway.set_status(intent_id, "canceled")

        async with session_factory() as session:
            result = await builders.confirm_purchase(session, payment_gateway).execute(
                ConfirmPurchaseCommandDTO(payment_intent_id=intent_id)
            )

        assert result.error.code == "PAYMENT_NOT_SUCCEEDED"
        assert result.error.details["retryable"] is False
        async with session_factory() as session:
            purchase = await SqlAlchemyPendingPurchaseRepository(session).get_by_intent_id(intent_id)
        assert purchase.status == PurchaseStatus.FAILED
        assert (await balance_of(session_factory, "author_1")).credit_balance == 0


@pytest.mark.asyncio
class TestPromotionFlow:

    async def test_sponsorship_exact_balance(self, session_factory, grant):
        """
        Given: One author holds exactly 252 credits and another holds 251
        When: Each buys a 14 day sponsorship
        Then: The first succeeds and ends at zero, the second is refused with nothing written
        """
        await grant("author_1", credits=252)
        await grant("author_2", credits=251)

        async with session_factory() as session:
            ok = await builders.create_sponsorship(session).execute(
                CreateSponsorshipCommandDTO(
                    owner_id="author_1", pitch_id="pitch_1", club_id="club_1", duration_days=14
                )
            )
        async with session_factory() as session:
            refused = await builders.create_sponsorship(session).execute(
                CreateSponsorshipCommandDTO(
                    owner_id="author_2", pitch_id="pitch_2", club_id="club_1", duration_days=14
                )
            )

        assert ok.is_ok()
        assert ok.value.credits_per_day == 18
        assert ok.value.credits_committed == 252
        assert refused.error.code == "INSUFFICIENT_CREDITS"
        assert refused.error.details == {"current": 251, "required": 252, "shortfall": 1}
        assert (await balance_of(session_factory, "author_1")).credit_balance == 0
        assert (await balance_of(session_factory, "author_2")).credit_balance == 251
        await assert_reconciled(session_factory)

    async def test_overlapping_sponsorship_is_refused_without_charge(self, session_factory, grant):
        await grant("author_1", credits=1000)
        command = CreateSponsorshipCommandDTO(
            owner_id="author_1", pitch_id="pitch_1", club_id="club_1", duration_days=7
        )

        async with session_factory() as session:
            first = await builders.create_sponsorship(session).execute(command)
        async with session_factory() as session:
            second = await builders.create_sponsorship(session).execute(command)

        assert first.is_ok()
        assert second.error.code == "PROMOTION_CONFLICT"
        assert (await balance_of(session_factory, "author_1")).credit_balance == 1000 - 140

    async def test_queued_boost_cancel_refunds(self, session_factory, grant):
        """
        Given: A running 7 day boost and a second boost queued behind it
        When: The queued boost is cancelled
        Then: Its 42 credits come back and the running boost cannot be cancelled
        """
        await grant("author_1", credits=100)

        async with session_factory() as session:
            running = await builders.create_boost(session).execute(
                CreateBoostCommandDTO(owner_id="author_1", pitch_id="pitch_1", duration_days=7)
            )
        async with session_factory() as session:
            queued = await builders.create_boost(session).execute(
                CreateBoostCommandDTO(owner_id="author_1", pitch_id="pitch_1", duration_days=6)
            )

        assert running.value.credits_committed == 49
        assert queued.value.credits_committed == 42
        assert queued.value.starts_at == running.value.ends_at
        assert (await balance_of(session_factory, "author_1")).credit_balance == 9

        async with session_factory() as session:
            cancelled = await builders.cancel_promotion(session).execute(queued.value.id, "author_1")
        async with session_factory() as session:
            refused = await builders.cancel_promotion(session).execute(running.value.id, "author_1")

        assert cancelled.value.credits_refunded == 42
        assert cancelled.value.credit_balance == 51
        assert cancelled.value.promotion.status == PromotionStatus.CANCELLED
        assert refused.error.code == "PROMOTION_ALREADY_STARTED"
        await assert_reconciled(session_factory)

    async def test_cancel_twice_refunds_once(self, session_factory, grant):
        await grant("author_1", credits=100)
        async with session_factory() as session:
            await builders.create_boost(session).execute(
                CreateBoostCommandDTO(owner_id="author_1", pitch_id="pitch_1", duration_days=3)
            )
        async with session_factory() as session:
            queued = await builders.create_boost(session).execute(
                CreateBoostCommandDTO(owner_id="author_1", pitch_id="pitch_1", duration_days=3)
            )

        async with session_factory() as session:
            await builders.cancel_promotion(session).execute(queued.value.id, "author_1")
        async with session_factory() as session:
            again = await builders.cancel_promotion(session).execute(
                queued.value.id, "author_1", now=utc_now() + timedelta(seconds=1)
            )

        assert again.error.code == "PROMOTION_NOT_ACTIVE"
        assert (await balance_of(session_factory, "author_1")).credit_balance == 100 - 21

    async def test_sponsorship_impressions_clicks_and_analytics(self, session_factory, grant):
        """
        Given: A 7 day sponsorship in club_7 (140 credits)
        When: The club feed is served three times and the pitch is clicked once
        Then: Analytics report 3 impressions, 1 click and 3 credits consumed,
              and the ledger is untouched by tracking
        """
        await grant("author_1", credits=140)
        async with session_factory() as session:
            sponsorship = await builders.create_sponsorship(session).execute(
                CreateSponsorshipCommandDTO(
                    owner_id="author_1", pitch_id="pitch_1", club_id="club_7", duration_days=7
                )
            )
        sponsorship_id = sponsorship.value.id

        for _ in range(3):
            async with session_factory() as session:
                served = await builders.serve_club_sponsorships(session).execute("club_7")
            assert [s.id for s in served.value.sponsorships] == [sponsorship_id]
        async with session_factory() as session:
            other_club = await builders.serve_club_sponsorships(session).execute("club_8")
        async with session_factory() as session:
            clicked = await builders.record_sponsorship_click(session).execute(sponsorship_id)
        async with session_factory() as session:
            missing = await builders.record_sponsorship_click(session).execute("nope")

        assert served.value.sponsorships[0].impressions == 3
        assert other_club.value.sponsorships == []
        assert clicked.value.tracked
        assert missing.error.code == "SPONSORSHIP_NOT_FOUND"

        async with session_factory() as session:
            analytics = (await builders.sponsorship_analytics(session).execute("author_1")).value
        row = analytics.sponsorships[0]
        assert (row.budget, row.credits_consumed, row.impressions, row.clicks) == (140, 3, 3, 1)
        assert row.ctr == pytest.approx(100 / 3)
        assert row.cost_per_click == pytest.approx(3.0)
        assert row.days_remaining == 6
        assert (await balance_of(session_factory, "author_1")).credit_balance == 0
        await assert_reconciled(session_factory)


@pytest.mark.asyncio
class TestRedemptionFlow:

    async def _reward(self, session_factory, copies):
        async with session_factory() as session:
            result = await builders.create_reward(session).execute(
                CreateRewardCommandDTO(
                    name="Signed first edition",
                    reward_type="PHYSICAL_BOOK",
                    points_cost=500,
                    copies_available=copies,
                )
            )
        return result.value

    async def test_decline_restores_points_and_copy(self, session_factory, grant):
        """
        Given: A reader redeemed the last copy of a 500 point reward
        When: An admin declines the request
        Then: The points and the copy are both returned
        """
        reward = await self._reward(session_factory, copies=1)
        await grant("reader_1", points=600)

        async with session_factory() as session:
            requested = await builders.request_redemption(session).execute(
                RequestRedemptionCommandDTO(user_id="reader_1", reward_item_id=reward.id)
            )
        assert requested.value.status == RedemptionStatus.PENDING
        assert (await balance_of(session_factory, "reader_1")).points == 100

        async with session_factory() as session:
            declined = await builders.review_redemption(session).execute(
                ReviewRedemptionCommandDTO(
                    request_id=requested.value.id,
                    action=ReviewAction.DECLINE,
                    reviewer_id="admin_1",
                    reason="Damaged in storage",
                )
            )

        assert declined.value.status == RedemptionStatus.DECLINED
        assert declined.value.rejection_reason == "Damaged in storage"
        assert (await balance_of(session_factory, "reader_1")).points == 600
        async with session_factory() as session:
            item = await SqlAlchemyRewardItemRepository(session).get(reward.id)
        assert item.copies_redeemed == 0
        await assert_reconciled(session_factory)

    async def test_insufficient_points_keeps_inventory(self, session_factory, grant):
        reward = await self._reward(session_factory, copies=1)
        await grant("reader_1", points=499)

        async with session_factory() as session:
            result = await builders.request_redemption(session).execute(
                RequestRedemptionCommandDTO(user_id="reader_1", reward_item_id=reward.id)
            )

        assert result.error.code == "INSUFFICIENT_POINTS"
        async with session_factory() as session:
            item = await SqlAlchemyRewardItemRepository(session).get(reward.id)
        assert item.copies_redeemed == 0


@pytest.mark.asyncio
class TestPointsAndBadges:

    async def test_first_vote_badge_and_idempotent_award(self, session_factory):
        command = AwardPointsCommandDTO(
            user_id="reader_1", event_type="VOTE_CAST", ref_type="poll", ref_id="poll_1"
        )

        async with session_factory() as session:
            first = await builders.award_points(session).execute(command)
        async with session_factory() as session:
            replay = await builders.award_points(session).execute(command)

        assert first.value.badges_awarded == ["FIRST_VOTE"]
        assert first.value.points == 3
        assert replay.value.idempotent is True
        assert replay.value.points == 3

    async def test_badge_award_is_idempotent(self, session_factory):
        command = AwardBadgeCommandDTO(user_id="reader_1", badge_code="BOOKWORM")

        async with session_factory() as session:
            first = await builders.award_badge(session).execute(command)
        async with session_factory() as session:
            second = await builders.award_badge(session).execute(command)

        assert first.value.awarded is True
        assert first.value.bonus_points == 25
        assert second.value.awarded is False
        assert second.value.bonus_points == 0
        assert (await balance_of(session_factory, "reader_1")).points == 25
        await assert_reconciled(session_factory)
