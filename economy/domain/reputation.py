"""Reputation scoring

Reputation is a secondary score derived from ledger history. It is kept
behind a small interface so the business rule can be swapped without
touching the projector.
"""

from abc import ABC, abstractmethod
from typing import Iterable
from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind
from economy.domain.point_rules import ENGAGEMENT_EVENT_TYPES

REPUTATION_THRESHOLDS: tuple[int, ...] = (25, 100, 250, 500, 1000)
REPUTATION_LABELS: tuple[str, ...] = (
    "NEWCOMER",
    "BEGINNER",
    "INTERMEDIATE",
    "ADVANCED",
    "EXPERT",
    "LEGENDARY",
)


class ReputationPolicy(ABC):
    """Pure function from a user's ledger history to a reputation score"""

    @abstractmethod
    def score(self, entries: Iterable[LedgerEntry]) -> int:
        pass


class TieredReputationPolicy(ReputationPolicy):
    """
    Tier 0-5 from lifetime engagement points

    Only positive POINT_AWARD entries for engagement events count, so
    spending points, refunds, badge bonuses and corrections never move
    reputation down.
    """

    def __init__(
        self,
        thresholds: tuple[int, ...] = REPUTATION_THRESHOLDS,
        event_types: frozenset[str] = ENGAGEMENT_EVENT_TYPES,
    ):
        self.thresholds = thresholds
        self.event_types = event_types

    def earned_points(self, entries: Iterable[LedgerEntry]) -> int:
        return sum(
            entry.amount
            for entry in entries
            if LedgerEntryKind(entry.kind) == LedgerEntryKind.POINT_AWARD
            and entry.amount > 0
            and entry.event_type in self.event_types
        )

    def score(self, entries: Iterable[LedgerEntry]) -> int:
        earned = self.earned_points(entries)
        return sum(1 for threshold in self.thresholds if earned >= threshold)


def reputation_label(reputation: int) -> str:
    return REPUTATION_LABELS[max(0, min(reputation, len(REPUTATION_LABELS) - 1))]
