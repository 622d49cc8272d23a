"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from economy.domain.balance import BalanceSnapshot
from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind
from economy.domain.reputation import reputation_label


class BalanceResponseDTO(BaseModel):
    """
    Response DTO for a user's balance

    Folded from the ledger, never read from the cache.
    """

    user_id: str = Field(..., description="User identifier")
    points: int = Field(..., description="Spendable points")
    reputation: int = Field(..., description="Reputation tier (0-5)")
    reputation_label: str = Field(..., description="Reputation tier name")
    credit_balance: int = Field(..., description="Spendable credits")

    @classmethod
    def from_snapshot(cls, snapshot: BalanceSnapshot) -> "BalanceResponseDTO":
        return cls(
            user_id=snapshot.user_id,
            points=snapshot.points,
            reputation=snapshot.reputation,
            reputation_label=reputation_label(snapshot.reputation),
            credit_balance=snapshot.credit_balance,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_123",
                "points": 140,
                "reputation": 2,
                "reputation_label": "INTERMEDIATE",
                "credit_balance": 550
            }
        }


class LedgerEntryDTO(BaseModel):
    id: str
    kind: LedgerEntryKind
    amount: int
    event_type: str
    related_entity_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> "LedgerEntryDTO":
        return cls(
            id=entry.id,
            kind=entry.kind,
            amount=entry.amount,
            event_type=entry.event_type,
            related_entity_id=entry.related_entity_id,
            created_at=entry.created_at,
        )


class ListLedgerEntriesResponseDTO(BaseModel):
    """Paginated ledger history, newest first"""

    entries: List[LedgerEntryDTO] = Field(..., description="Page of entries")
    total: int = Field(..., description="Total matching entries")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Entries skipped")


class AwardPointsCommandDTO(BaseModel):
    """
    Command DTO for awarding (or correcting) points

    Used as input to AwardPoints use case.
    """

    user_id: str = Field(
        ...,
        description="User receiving the points"
    )

    event_type: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Engagement event (e.g., VOTE_CAST) or ADMIN_ADJUSTMENT"
    )

    amount: Optional[int] = Field(
        default=None,
        description="Explicit amount; defaults to the event's point value. Negative for corrections"
    )

    ref_type: Optional[str] = Field(
        default=None,
        description="Type of the source entity (e.g., 'poll', 'swap')"
    )

    ref_id: Optional[str] = Field(
        default=None,
        description="ID of the source entity; with ref_type makes the award idempotent"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_123",
                "event_type": "VOTE_CAST",
                "ref_type": "poll",
                "ref_id": "poll_42"
            }
        }


class AwardPointsResponseDTO(BaseModel):
    entry: LedgerEntryDTO = Field(..., description="The award entry")
    idempotent: bool = Field(False, description="True if the award had already been recorded")
    badges_awarded: List[str] = Field(default_factory=list, description="Badge codes earned by this award")
    points: int = Field(..., description="Point balance after the award")


class BalanceDiscrepancyDTO(BaseModel):
    """Mismatch between the cached balance row and the ledger fold"""

    user_id: str
    cached_points: int
    ledger_points: int
    cached_credits: int
    ledger_credits: int


class ReconciliationResultDTO(BaseModel):
    """Result of a reconciliation run"""

    total_users_checked: int = Field(..., description="Number of users compared")
    discrepancies_found: int = Field(..., description="Number of mismatching users")
    discrepancies: List[BalanceDiscrepancyDTO] = Field(default_factory=list)
    reconciliation_time: datetime = Field(..., description="When the run started")
    execution_time_ms: int = Field(..., description="Duration of the run")
