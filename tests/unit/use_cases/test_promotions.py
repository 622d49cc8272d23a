"""Unit tests for promotion use cases

Tests cover:
- Tiered pricing and the atomic debit
- Boost stacking behind an existing boost
- Sponsorship overlap conflicts
- Queued-boost cancellation and refunds
- Quotes and expiry
"""

import pytest
from datetime import datetime, timedelta
from economy.libs.clock import utc_now
from unittest.mock import AsyncMock, MagicMock

from economy.app.use_cases.promotions import (
    CancelPromotion,
    CreateBoost,
    CreateBoostCommandDTO,
    CreateSponsorship,
    CreateSponsorshipCommandDTO,
    ExpirePromotions,
    QuotePromotion,
)
from economy.domain.ledger_entry import LedgerEntryKind
from economy.domain.pricing import PromotionType
from economy.domain.promotion import Promotion, PromotionStatus, SponsorshipFrequency


@pytest.fixture
def mock_promotion_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda promotion: promotion)
    repo.latest_active_boost_end = AsyncMock(return_value=None)
    repo.find_overlapping_sponsorship = AsyncMock(return_value=None)
    repo.cancel = AsyncMock(return_value=True)
    repo.expire_due = AsyncMock(return_value=0)
    repo.lock_subject = AsyncMock()
    return repo


@pytest.fixture
def mock_writer():
    writer = MagicMock()
    writer.post = AsyncMock(side_effect=lambda entry: entry)
    writer.credit_balance = AsyncMock(return_value=100)
    return writer


@pytest.fixture
def create_boost(mock_uow, mock_promotion_repo, mock_writer):
    return CreateBoost(uow=mock_uow, promotion_repo=mock_promotion_repo, ledger_writer=mock_writer)


@pytest.fixture
def create_sponsorship(mock_uow, mock_promotion_repo, mock_writer):
    return CreateSponsorship(uow=mock_uow, promotion_repo=mock_promotion_repo, ledger_writer=mock_writer)


def queued_boost(owner_id="author_1", starts_in=timedelta(days=3)):
    now = utc_now()
    return Promotion(
        id="promo_1",
        promotion_type=PromotionType.BOOST,
        subject_id="pitch_42",
        owner_id=owner_id,
        duration_days=7,
        credits_per_day=7,
        credits_committed=49,
        status=PromotionStatus.ACTIVE,
        starts_at=now + starts_in,
        ends_at=now + starts_in + timedelta(days=7),
    )


@pytest.mark.asyncio
class TestCreateBoost:

    async def test_boost_debits_tier_cost(self, create_boost, mock_writer, mock_promotion_repo, mock_uow):
        result = await create_boost.execute(
            CreateBoostCommandDTO(owner_id="author_1", pitch_id="pitch_42", duration_days=10)
        )

        assert result.is_ok()
        promotion = result.value
        assert promotion.credits_per_day == 6
        assert promotion.credits_committed == 60
        assert promotion.is_running
        assert promotion.ends_at - promotion.starts_at == timedelta(days=10)

        debit = mock_writer.post.call_args.args[0]
        assert debit.kind == LedgerEntryKind.CREDIT_SPEND
        assert debit.amount == -60
        assert debit.event_type == "BOOST_PURCHASED"
        assert debit.related_entity_id == promotion.id
        mock_uow.commit.assert_called_once()

    async def test_boost_queues_behind_existing(self, create_boost, mock_promotion_repo):
        """
        Given: The pitch already has a boost ending in 5 days
        When: another boost is bought
        Then: the new boost starts when the existing one ends
        """
        latest_end = utc_now() + timedelta(days=5)
        mock_promotion_repo.latest_active_boost_end = AsyncMock(return_value=latest_end)

        result = await create_boost.execute(
            CreateBoostCommandDTO(owner_id="author_1", pitch_id="pitch_42", duration_days=7)
        )

        assert result.value.starts_at == latest_end
        assert result.value.ends_at == latest_end + timedelta(days=7)
        assert result.value.is_running is False

    async def test_insufficient_credits(self, create_boost, mock_writer, mock_promotion_repo, mock_uow):
        mock_writer.post = AsyncMock(return_value=None)
        mock_writer.credit_balance = AsyncMock(return_value=40)

        result = await create_boost.execute(
            CreateBoostCommandDTO(owner_id="author_1", pitch_id="pitch_42", duration_days=7)
        )

        assert result.error.code == "INSUFFICIENT_CREDITS"
        assert result.error.details == {"current": 40, "required": 49, "shortfall": 9}
        mock_promotion_repo.create.assert_not_called()
        mock_uow.rollback.assert_called()

    @pytest.mark.parametrize("days", [0, 31, -3])
    async def test_invalid_duration(self, create_boost, mock_writer, days):
        result = await create_boost.execute(
            CreateBoostCommandDTO(owner_id="author_1", pitch_id="pitch_42", duration_days=days)
        )

        assert result.error.code == "INVALID_DURATION"
        mock_writer.post.assert_not_called()

    async def test_subject_lock_is_taken_before_debit(self, create_boost, mock_promotion_repo, mock_writer):
        """
        Given: Two owners boosting the same pitch at once
        When: a boost is bought
        Then: the pitch lock is taken first, so queue positions are read one purchase at a time
        """
        calls = []
        mock_promotion_repo.lock_subject = AsyncMock(side_effect=lambda *args: calls.append("lock"))
        mock_writer.post = AsyncMock(side_effect=lambda entry: calls.append("debit") or entry)
        mock_promotion_repo.latest_active_boost_end = AsyncMock(
            side_effect=lambda *args: calls.append("queue") or None
        )

        result = await create_boost.execute(
            CreateBoostCommandDTO(owner_id="author_2", pitch_id="pitch_42", duration_days=7)
        )

        assert result.is_ok()
        assert calls == ["lock", "debit", "queue"]
        args = mock_promotion_repo.lock_subject.call_args.args
        assert args[:3] == (PromotionType.BOOST, "pitch_42", None)

    async def test_lock_failure_aborts_purchase(self, create_boost, mock_promotion_repo, mock_writer, mock_uow):
        mock_promotion_repo.lock_subject = AsyncMock(side_effect=RuntimeError("lock timeout"))

        result = await create_boost.execute(
            CreateBoostCommandDTO(owner_id="author_1", pitch_id="pitch_42", duration_days=7)
        )

        assert result.error.code == "CREATE_BOOST_FAILED"
        mock_writer.post.assert_not_called()
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
class TestCreateSponsorship:

    async def test_two_week_sponsorship_costs_252(self, create_sponsorship, mock_writer, mock_promotion_repo):
        result = await create_sponsorship.execute(
            CreateSponsorshipCommandDTO(
                owner_id="author_1", pitch_id="pitch_42", club_id="club_7", duration_days=14
            )
        )

        assert result.is_ok()
        assert result.value.credits_committed == 252
        assert result.value.frequency == SponsorshipFrequency.DAILY
        assert result.value.club_id == "club_7"
        assert mock_writer.post.call_args.args[0].event_type == "SPONSORSHIP_PURCHASED"
        args = mock_promotion_repo.lock_subject.call_args.args
        assert args[:3] == (PromotionType.SPONSORSHIP, "pitch_42", "club_7")

    async def test_overlap_conflict_rolls_back_debit(
        self, create_sponsorship, mock_promotion_repo, mock_uow
    ):
        existing = queued_boost()
        existing.promotion_type = PromotionType.SPONSORSHIP
        mock_promotion_repo.find_overlapping_sponsorship = AsyncMock(return_value=existing)

        result = await create_sponsorship.execute(
            CreateSponsorshipCommandDTO(
                owner_id="author_1", pitch_id="pitch_42", club_id="club_7", duration_days=7
            )
        )

        assert result.error.code == "PROMOTION_CONFLICT"
        assert result.error.details == {"conflicting_promotion_id": "promo_1"}
        mock_promotion_repo.create.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestCancelPromotion:

    @pytest.fixture
    def cancel_use_case(self, mock_uow, mock_promotion_repo, mock_writer):
        return CancelPromotion(uow=mock_uow, promotion_repo=mock_promotion_repo, ledger_writer=mock_writer)

    async def test_queued_boost_is_refunded(self, cancel_use_case, mock_promotion_repo, mock_writer, mock_uow):
        promotion = queued_boost()
        mock_promotion_repo.get = AsyncMock(return_value=promotion)

        result = await cancel_use_case.execute("promo_1", "author_1")

        assert result.is_ok()
        assert result.value.credits_refunded == 49
        refund = mock_writer.post.call_args.args[0]
        assert refund.kind == LedgerEntryKind.CREDIT_REFUND
        assert refund.amount == 49
        assert refund.idempotency_key == "promotion-refund:promo_1"
        mock_uow.commit.assert_called_once()

    async def test_running_promotion_is_not_refunded(self, cancel_use_case, mock_promotion_repo, mock_writer):
        mock_promotion_repo.get = AsyncMock(return_value=queued_boost(starts_in=timedelta(days=-1)))

        result = await cancel_use_case.execute("promo_1", "author_1")

        assert result.error.code == "PROMOTION_ALREADY_STARTED"
        mock_writer.post.assert_not_called()

    async def test_other_owner(self, cancel_use_case, mock_promotion_repo):
        mock_promotion_repo.get = AsyncMock(return_value=queued_boost())

        result = await cancel_use_case.execute("promo_1", "someone_else")

        assert result.error.code == "PROMOTION_FORBIDDEN"

    async def test_already_cancelled(self, cancel_use_case, mock_promotion_repo):
        promotion = queued_boost()
        promotion.status = PromotionStatus.CANCELLED
        mock_promotion_repo.get = AsyncMock(return_value=promotion)

        result = await cancel_use_case.execute("promo_1", "author_1")

        assert result.error.code == "PROMOTION_NOT_ACTIVE"

    async def test_missing(self, cancel_use_case, mock_promotion_repo):
        mock_promotion_repo.get = AsyncMock(return_value=None)

        result = await cancel_use_case.execute("promo_x", "author_1")

        assert result.error.code == "PROMOTION_NOT_FOUND"

    async def test_lost_cancel_race_does_not_read_expired_promotion(
        self, cancel_use_case, mock_promotion_repo, mock_writer, expire_on_rollback
    ):
        """
        Given: The promotion row expires when the session rolls back
        When: the conditional cancel matches no row because the boost just started
        Then: PROMOTION_ALREADY_STARTED names the promotion and nothing is refunded
        """
        mock_promotion_repo.get = AsyncMock(return_value=expire_on_rollback(queued_boost()))
        mock_promotion_repo.cancel = AsyncMock(return_value=False)

        result = await cancel_use_case.execute("promo_1", "author_1")

        assert result.error.code == "PROMOTION_ALREADY_STARTED"
        assert "promo_1" in result.error.message
        mock_writer.post.assert_not_called()


@pytest.mark.asyncio
class TestQuoteAndExpire:

    async def test_quote_reports_shortfall(self, mock_writer):
        result = await QuotePromotion(mock_writer).execute("author_1", PromotionType.SPONSORSHIP, 14)

        quote = result.value
        assert quote.cost == 252
        assert quote.current_balance == 100
        assert quote.shortfall == 152
        assert quote.affordable is False

    async def test_quote_rejects_bad_duration(self, mock_writer):
        result = await QuotePromotion(mock_writer).execute("author_1", PromotionType.BOOST, 45)

        assert result.error.code == "INVALID_DURATION"

    async def test_expire_commits_count(self, mock_uow, mock_promotion_repo):
        mock_promotion_repo.expire_due = AsyncMock(return_value=3)
        now = datetime(2024, 6, 1)

        result = await ExpirePromotions(mock_uow, mock_promotion_repo).execute(now)

        assert result.value.expired == 3
        mock_promotion_repo.expire_due.assert_called_once_with(now)
        mock_uow.commit.assert_called_once()
