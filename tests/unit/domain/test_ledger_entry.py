"""Unit tests for LedgerEntry sign rules and namespaces"""

import pytest

from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind


class TestLedgerEntryCreate:

    def test_credit_spend_is_negative(self):
        entry = LedgerEntry.create(
            user_id="user_1",
            kind=LedgerEntryKind.CREDIT_SPEND,
            amount=-252,
            event_type="SPONSORSHIP_PURCHASED",
        )

        assert entry.amount == -252
        assert entry.is_credits
        assert not entry.is_points
        assert entry.id is not None

    @pytest.mark.parametrize(
        "kind,amount",
        [
            (LedgerEntryKind.POINT_SPEND, 10),
            (LedgerEntryKind.CREDIT_SPEND, 5),
            (LedgerEntryKind.CREDIT_PURCHASE, -100),
            (LedgerEntryKind.CREDIT_REFUND, -42),
        ],
    )
    def test_wrong_sign_is_rejected(self, kind, amount):
        with pytest.raises(ValueError):
            LedgerEntry.create(user_id="user_1", kind=kind, amount=amount, event_type="X")

    @pytest.mark.parametrize("kind", list(LedgerEntryKind))
    def test_zero_is_rejected_for_every_kind(self, kind):
        with pytest.raises(ValueError, match="zero"):
            LedgerEntry.create(user_id="user_1", kind=kind, amount=0, event_type="X")

    def test_point_award_accepts_negative_correction(self):
        entry = LedgerEntry.create(
            user_id="user_1",
            kind=LedgerEntryKind.POINT_AWARD,
            amount=-20,
            event_type="ADMIN_ADJUSTMENT",
        )

        assert entry.amount == -20
        assert entry.is_points

    def test_idempotency_key_is_kept(self):
        entry = LedgerEntry.create(
            user_id="user_1",
            kind=LedgerEntryKind.CREDIT_PURCHASE,
            amount=550,
            event_type="CREDITS_PURCHASED",
            idempotency_key="purchase:pi_1",
        )

        assert entry.idempotency_key == "purchase:pi_1"
