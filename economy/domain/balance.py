"""Balance projection

Balances are never stored as ground truth. They are folded from the
ledger; the cached UserBalance row only exists so debits can be
guarded atomically and must always reconcile with this fold.
"""

from dataclasses import dataclass
from typing import Iterable, Optional
from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind, POINT_KINDS, CREDIT_KINDS
from economy.domain.reputation import ReputationPolicy, TieredReputationPolicy


@dataclass(frozen=True)
class BalanceSnapshot:
    user_id: str
    points: int
    reputation: int
    credit_balance: int


def project_balance(
    user_id: str,
    entries: Iterable[LedgerEntry],
    policy: Optional[ReputationPolicy] = None,
) -> BalanceSnapshot:
    """Fold a user's ledger entries into a balance snapshot"""
    policy = policy or TieredReputationPolicy()
    entries = list(entries)

    points = 0
    credits = 0
    for entry in entries:
        if entry.user_id != user_id:
            raise ValueError(f"Entry {entry.id} belongs to {entry.user_id}, not {user_id}")
        kind = LedgerEntryKind(entry.kind)
        if kind in POINT_KINDS:
            points += entry.amount
        elif kind in CREDIT_KINDS:
            credits += entry.amount

    return BalanceSnapshot(
        user_id=user_id,
        points=points,
        reputation=policy.score(entries),
        credit_balance=credits,
    )
