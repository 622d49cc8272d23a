"""
List Ledger Entries Use Case

Retrieves a user's ledger history with pagination.
"""
from typing import Optional
from economy.libs.result import Result, Return
from economy.app.repositories.ledger_entry_repository import LedgerEntryRepository
from economy.domain.ledger_entry import LedgerEntryKind
from .dtos import LedgerEntryDTO, ListLedgerEntriesResponseDTO


class ListLedgerEntries:
    """Entries are ordered newest first"""

    def __init__(self, ledger_repo: LedgerEntryRepository):
        self.ledger_repo = ledger_repo

    async def execute(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        kind: Optional[LedgerEntryKind] = None,
    ) -> Result[ListLedgerEntriesResponseDTO]:
        entries, total = await self.ledger_repo.get_page_for_user(
            user_id=user_id,
            limit=limit,
            offset=offset,
            kind=kind,
        )

        return Return.ok(
            ListLedgerEntriesResponseDTO(
                entries=[LedgerEntryDTO.from_entry(entry) for entry in entries],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
