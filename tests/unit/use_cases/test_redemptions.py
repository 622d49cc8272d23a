"""Unit tests for reward redemption use cases

Tests cover:
- RequestRedemption: inventory reservation, point debit, failure rollback
- ReviewRedemption: state machine, decline refunds, concurrent review
- CancelRedemption: requester withdrawal
- UpdateReward: inventory floor
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from economy.app.use_cases.rewards import (
    CancelRedemption,
    RequestRedemption,
    RequestRedemptionCommandDTO,
    ReviewAction,
    ReviewRedemption,
    ReviewRedemptionCommandDTO,
    UpdateReward,
    UpdateRewardCommandDTO,
)
from economy.domain.ledger_entry import LedgerEntryKind
from economy.domain.redemption_request import RedemptionRequest, RedemptionStatus
from economy.domain.reward_item import RewardItem


def make_item(**overrides):
    values = dict(id="reward_1", name="Signed copy", points_cost=500, copies_available=3, copies_redeemed=0)
    values.update(overrides)
    return RewardItem(**values)


def make_request(status=RedemptionStatus.PENDING, user_id="reader_1"):
    return RedemptionRequest(
        id="redemption_1",
        user_id=user_id,
        reward_item_id="reward_1",
        points_spent=500,
        status=status,
        copy_reserved=True,
    )


@pytest.fixture
def mock_reward_repo():
    repo = MagicMock()
    repo.get = AsyncMock(return_value=make_item())
    repo.reserve_copy = AsyncMock(return_value=True)
    repo.release_copy = AsyncMock(return_value=True)
    repo.update = AsyncMock(side_effect=lambda item: item)
    return repo


@pytest.fixture
def mock_redemption_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda request: request)
    repo.get = AsyncMock(return_value=make_request())
    repo.transition = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def mock_writer():
    writer = MagicMock()
    writer.post = AsyncMock(side_effect=lambda entry: entry)
    writer.point_balance = AsyncMock(return_value=120)
    return writer


@pytest.fixture
def request_use_case(mock_uow, mock_reward_repo, mock_redemption_repo, mock_writer):
    return RequestRedemption(mock_uow, mock_reward_repo, mock_redemption_repo, mock_writer)


@pytest.fixture
def review_use_case(mock_uow, mock_redemption_repo, mock_reward_repo, mock_writer):
    return ReviewRedemption(mock_uow, mock_redemption_repo, mock_reward_repo, mock_writer)


@pytest.mark.asyncio
class TestRequestRedemption:

    async def test_reserves_copy_and_debits_points(
        self, request_use_case, mock_reward_repo, mock_writer, mock_uow
    ):
        result = await request_use_case.execute(
            RequestRedemptionCommandDTO(user_id="reader_1", reward_item_id="reward_1")
        )

        assert result.is_ok()
        assert result.value.status == RedemptionStatus.PENDING
        assert result.value.points_spent == 500
        mock_reward_repo.reserve_copy.assert_called_once_with("reward_1")
        debit = mock_writer.post.call_args.args[0]
        assert debit.kind == LedgerEntryKind.POINT_SPEND
        assert debit.amount == -500
        assert debit.related_entity_id == result.value.id
        mock_uow.commit.assert_called_once()

    async def test_out_of_stock(self, request_use_case, mock_reward_repo, mock_writer):
        mock_reward_repo.reserve_copy = AsyncMock(return_value=False)

        result = await request_use_case.execute(
            RequestRedemptionCommandDTO(user_id="reader_1", reward_item_id="reward_1")
        )

        assert result.error.code == "REWARD_UNAVAILABLE"
        mock_writer.post.assert_not_called()

    async def test_out_of_stock_message_survives_rollback(
        self, request_use_case, mock_reward_repo, expire_on_rollback
    ):
        """
        Given: The reward row expires when the session rolls back
        When: the last copy was taken by another request
        Then: REWARD_UNAVAILABLE still names the reward
        """
        mock_reward_repo.get = AsyncMock(return_value=expire_on_rollback(make_item()))
        mock_reward_repo.reserve_copy = AsyncMock(return_value=False)

        result = await request_use_case.execute(
            RequestRedemptionCommandDTO(user_id="reader_1", reward_item_id="reward_1")
        )

        assert result.error.code == "REWARD_UNAVAILABLE"
        assert result.error.message == "Reward Signed copy is out of stock"

    async def test_insufficient_points_survives_rollback(
        self, request_use_case, mock_reward_repo, mock_writer, expire_on_rollback
    ):
        mock_reward_repo.get = AsyncMock(return_value=expire_on_rollback(make_item()))
        mock_writer.post = AsyncMock(return_value=None)

        result = await request_use_case.execute(
            RequestRedemptionCommandDTO(user_id="reader_1", reward_item_id="reward_1")
        )

        assert result.error.code == "INSUFFICIENT_POINTS"
        assert result.error.details["required"] == 500

    async def test_insufficient_points_releases_reservation(
        self, request_use_case, mock_writer, mock_redemption_repo, mock_uow
    ):
        """
        Given: The copy was reserved but the point debit is rejected
        When: execute finishes
        Then: the transaction is rolled back, undoing the reservation
        """
        mock_writer.post = AsyncMock(return_value=None)

        result = await request_use_case.execute(
            RequestRedemptionCommandDTO(user_id="reader_1", reward_item_id="reward_1")
        )

        assert result.error.code == "INSUFFICIENT_POINTS"
        assert result.error.details == {"current": 120, "required": 500, "shortfall": 380}
        mock_redemption_repo.create.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_inactive_reward(self, request_use_case, mock_reward_repo):
        mock_reward_repo.get = AsyncMock(return_value=make_item(is_active=False))

        result = await request_use_case.execute(
            RequestRedemptionCommandDTO(user_id="reader_1", reward_item_id="reward_1")
        )

        assert result.error.code == "REWARD_INACTIVE"
        mock_reward_repo.reserve_copy.assert_not_called()

    async def test_unknown_reward(self, request_use_case, mock_reward_repo):
        mock_reward_repo.get = AsyncMock(return_value=None)

        result = await request_use_case.execute(
            RequestRedemptionCommandDTO(user_id="reader_1", reward_item_id="nope")
        )

        assert result.error.code == "REWARD_NOT_FOUND"


@pytest.mark.asyncio
class TestReviewRedemption:

    async def test_decline_refunds_points_and_copy(
        self, review_use_case, mock_redemption_repo, mock_reward_repo, mock_writer, mock_uow
    ):
        result = await review_use_case.execute(
            ReviewRedemptionCommandDTO(
                request_id="redemption_1",
                action=ReviewAction.DECLINE,
                reviewer_id="admin_1",
                reason="Out of stock at the printer",
            )
        )

        assert result.is_ok()
        transition = mock_redemption_repo.transition.call_args
        assert transition.kwargs["expected"] == RedemptionStatus.PENDING
        assert transition.kwargs["new"] == RedemptionStatus.DECLINED
        assert transition.kwargs["rejection_reason"] == "Out of stock at the printer"

        refund = mock_writer.post.call_args.args[0]
        assert refund.kind == LedgerEntryKind.POINT_AWARD
        assert refund.amount == 500
        assert refund.event_type == "REWARD_REFUNDED"
        assert refund.idempotency_key == "redemption-refund:redemption_1"
        mock_reward_repo.release_copy.assert_called_once_with("reward_1")
        mock_uow.commit.assert_called_once()

    async def test_decline_requires_reason(self, review_use_case, mock_redemption_repo):
        result = await review_use_case.execute(
            ReviewRedemptionCommandDTO(
                request_id="redemption_1", action=ReviewAction.DECLINE, reviewer_id="admin_1", reason="   "
            )
        )

        assert result.error.code == "REASON_REQUIRED"
        mock_redemption_repo.get.assert_not_called()

    async def test_approve_does_not_refund(self, review_use_case, mock_writer):
        result = await review_use_case.execute(
            ReviewRedemptionCommandDTO(request_id="redemption_1", action=ReviewAction.APPROVE, reviewer_id="admin_1")
        )

        assert result.is_ok()
        mock_writer.post.assert_not_called()

    async def test_fulfilled_cannot_be_declined(self, review_use_case, mock_redemption_repo, mock_writer):
        mock_redemption_repo.get = AsyncMock(return_value=make_request(RedemptionStatus.FULFILLED))

        result = await review_use_case.execute(
            ReviewRedemptionCommandDTO(
                request_id="redemption_1", action=ReviewAction.DECLINE, reviewer_id="admin_1", reason="late"
            )
        )

        assert result.error.code == "INVALID_TRANSITION"
        assert result.error.details == {"current": "FULFILLED", "target": "DECLINED"}
        mock_redemption_repo.transition.assert_not_called()
        mock_writer.post.assert_not_called()

    async def test_concurrent_review_loses(self, review_use_case, mock_redemption_repo, mock_writer, mock_uow):
        mock_redemption_repo.transition = AsyncMock(return_value=False)

        result = await review_use_case.execute(
            ReviewRedemptionCommandDTO(
                request_id="redemption_1", action=ReviewAction.DECLINE, reviewer_id="admin_2", reason="dup"
            )
        )

        assert result.error.code == "INVALID_TRANSITION"
        mock_writer.post.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_concurrent_review_does_not_read_expired_request(
        self, review_use_case, mock_redemption_repo, expire_on_rollback
    ):
        """
        Given: The request row expires when the session rolls back
        When: another admin moved the request first
        Then: the loser gets INVALID_TRANSITION rather than REVIEW_REDEMPTION_FAILED
        """
        mock_redemption_repo.get = AsyncMock(return_value=expire_on_rollback(make_request()))
        mock_redemption_repo.transition = AsyncMock(return_value=False)

        result = await review_use_case.execute(
            ReviewRedemptionCommandDTO(request_id="redemption_1", action=ReviewAction.APPROVE, reviewer_id="admin_2")
        )

        assert result.error.code == "INVALID_TRANSITION"
        assert result.error.details == {"current": "PENDING", "target": "APPROVED"}


@pytest.mark.asyncio
class TestCancelRedemption:

    @pytest.fixture
    def cancel_use_case(self, mock_uow, mock_redemption_repo, mock_reward_repo, mock_writer):
        return CancelRedemption(mock_uow, mock_redemption_repo, mock_reward_repo, mock_writer)

    async def test_requester_cancel_refunds(self, cancel_use_case, mock_writer, mock_redemption_repo):
        result = await cancel_use_case.execute("redemption_1", "reader_1")

        assert result.is_ok()
        assert mock_writer.post.call_args.args[0].amount == 500
        assert mock_redemption_repo.transition.call_args.kwargs["new"] == RedemptionStatus.CANCELLED

    async def test_only_requester_may_cancel(self, cancel_use_case, mock_writer):
        result = await cancel_use_case.execute("redemption_1", "reader_2")

        assert result.error.code == "REDEMPTION_FORBIDDEN"
        mock_writer.post.assert_not_called()

    async def test_approved_cannot_be_cancelled(self, cancel_use_case, mock_redemption_repo):
        mock_redemption_repo.get = AsyncMock(return_value=make_request(RedemptionStatus.APPROVED))

        result = await cancel_use_case.execute("redemption_1", "reader_1")

        assert result.error.code == "INVALID_TRANSITION"


@pytest.mark.asyncio
class TestUpdateReward:

    async def test_inventory_cannot_drop_below_redeemed(self, mock_uow, mock_reward_repo):
        mock_reward_repo.get = AsyncMock(return_value=make_item(copies_redeemed=2))

        result = await UpdateReward(mock_uow, mock_reward_repo).execute(
            "reward_1", UpdateRewardCommandDTO(copies_available=1)
        )

        assert result.error.code == "INVALID_INVENTORY"
        assert result.error.details == {"copies_available": 1, "copies_redeemed": 2}
        mock_reward_repo.update.assert_not_called()

    async def test_inventory_error_survives_rollback(self, mock_uow, mock_reward_repo, expire_on_rollback):
        mock_reward_repo.get = AsyncMock(return_value=expire_on_rollback(make_item(copies_redeemed=2)))

        result = await UpdateReward(mock_uow, mock_reward_repo).execute(
            "reward_1", UpdateRewardCommandDTO(copies_available=0)
        )

        assert result.error.code == "INVALID_INVENTORY"
        assert result.error.details == {"copies_available": 0, "copies_redeemed": 2}

    async def test_partial_update(self, mock_uow, mock_reward_repo):
        result = await UpdateReward(mock_uow, mock_reward_repo).execute(
            "reward_1", UpdateRewardCommandDTO(points_cost=650)
        )

        assert result.is_ok()
        assert result.value.points_cost == 650
        assert result.value.copies_available == 3
        mock_uow.commit.assert_called_once()

    async def test_null_inventory_means_unlimited(self, mock_uow, mock_reward_repo):
        result = await UpdateReward(mock_uow, mock_reward_repo).execute(
            "reward_1", UpdateRewardCommandDTO(copies_available=None)
        )

        assert result.value.copies_available is None
        assert result.value.remaining_copies is None
