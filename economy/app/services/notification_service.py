"""Notification Service Interface

Defines the contract for publishing ledger deltas to downstream
consumers (activity feeds, email digests, analytics).
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional
from pydantic import BaseModel, Field
from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind

logger = logging.getLogger(__name__)


class LedgerEvent(BaseModel):
    """Ledger delta published after a successful commit"""

    entry_id: str = Field(..., description="Ledger entry ID")
    user_id: str = Field(..., description="Affected user")
    kind: LedgerEntryKind = Field(..., description="Entry kind")
    amount: int = Field(..., description="Signed amount")
    event_type: str = Field(..., description="Event classification")
    related_entity_id: Optional[str] = Field(None, description="Related entity")
    created_at: datetime = Field(..., description="Entry timestamp")

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> "LedgerEvent":
        return cls(
            entry_id=entry.id,
            user_id=entry.user_id,
            kind=entry.kind,
            amount=entry.amount,
            event_type=entry.event_type,
            related_entity_id=entry.related_entity_id,
            created_at=entry.created_at,
        )


class NotificationService(ABC):
    """
    Abstract notification service for ledger deltas

    Implementations can publish via:
    - Logging
    - Webhook (HTTP POST)
    - Message queue
    """

    @abstractmethod
    async def send_ledger_event(self, event: LedgerEvent) -> bool:
        """
        Publish a ledger delta

        Args:
            event: LedgerEvent to publish

        Returns:
            True if the event was delivered, False otherwise
        """
        pass


async def dispatch_ledger_events(
    service: Optional[NotificationService],
    entries: Iterable[Optional[LedgerEntry]],
) -> None:
    """
    Send one LedgerEvent per committed entry

    Called after commit. Delivery failures are logged and never
    propagate into the use case result.
    """
    if service is None:
        return
    for entry in entries:
        if entry is None:
            continue
        try:
            await service.send_ledger_event(LedgerEvent.from_entry(entry))
        except Exception as e:
            logger.error(f"Failed to publish ledger event for entry {entry.id}: {e}")
