"""Ledger Entry Repository Interface

Defines the contract for the append-only ledger store.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind


class DuplicateLedgerEntryError(Exception):
    """An entry with the same idempotency key was already appended"""

    def __init__(self, idempotency_key: Optional[str]):
        super().__init__(f"Duplicate ledger entry for idempotency key {idempotency_key}")
        self.idempotency_key = idempotency_key


class LedgerEntryRepository(ABC):
    """
    Repository interface for LedgerEntry persistence

    append() is the only mutation. There is deliberately no update or
    delete: corrections are new offsetting entries.
    """

    @abstractmethod
    async def append(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Persist a new ledger entry

        Args:
            entry: Validated LedgerEntry (see LedgerEntry.create)

        Returns:
            The persisted entry

        Raises:
            DuplicateLedgerEntryError: idempotency_key already exists
        """
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[LedgerEntry]:
        """
        Retrieve every entry of a user, oldest first

        Args:
            user_id: User identifier

        Returns:
            Entries ordered by (created_at, id)
        """
        pass

    @abstractmethod
    async def get_page_for_user(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        kind: Optional[LedgerEntryKind] = None,
    ) -> Tuple[List[LedgerEntry], int]:
        """
        Retrieve a page of a user's entries, newest first

        Args:
            user_id: User identifier
            limit: Maximum entries to return
            offset: Entries to skip
            kind: Optional kind filter

        Returns:
            Tuple of (entries, total matching count)
        """
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[LedgerEntry]:
        pass

    @abstractmethod
    async def count_point_awards_by_event_type(self, user_id: str) -> Dict[str, int]:
        """
        Count a user's positive POINT_AWARD entries grouped by event type

        Returns:
            Mapping of event_type to number of entries
        """
        pass

    @abstractmethod
    async def list_user_ids(self) -> List[str]:
        """Return every user id that has at least one entry"""
        pass
