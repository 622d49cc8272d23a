"""Ledger use cases"""
from .get_balance import GetBalance
from .list_ledger_entries import ListLedgerEntries
from .award_points import AwardPoints
from .reconcile_balances import ReconcileBalances
from .dtos import (
    BalanceResponseDTO,
    LedgerEntryDTO,
    ListLedgerEntriesResponseDTO,
    AwardPointsCommandDTO,
    AwardPointsResponseDTO,
    BalanceDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "GetBalance",
    "ListLedgerEntries",
    "AwardPoints",
    "ReconcileBalances",
    "BalanceResponseDTO",
    "LedgerEntryDTO",
    "ListLedgerEntriesResponseDTO",
    "AwardPointsCommandDTO",
    "AwardPointsResponseDTO",
    "BalanceDiscrepancyDTO",
    "ReconciliationResultDTO",
]
