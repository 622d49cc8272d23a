"""SQLAlchemy implementation of LedgerEntryRepository

Append-only persistence for ledger entries. The unique constraint on
idempotency_key is what turns duplicate deliveries into no-ops.
"""

from typing import Dict, List, Optional, Tuple
from sqlalchemy import distinct, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.app.repositories.ledger_entry_repository import (
    LedgerEntryRepository,
    DuplicateLedgerEntryError,
)
from economy.domain.ledger_entry import LedgerEntry, LedgerEntryKind


class SqlAlchemyLedgerEntryRepository(LedgerEntryRepository):
    """
    SQLAlchemy implementation of LedgerEntryRepository

    Features:
    - Idempotency enforcement via unique idempotency_key constraint
    - No update or delete paths
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Persist a ledger entry

        Raises:
            DuplicateLedgerEntryError: idempotency_key already exists. The
                session must be rolled back by the caller.
        """
        self.session.add(entry)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DuplicateLedgerEntryError(entry.idempotency_key) from e
        await self.session.refresh(entry)
        return entry

    async def list_for_user(self, user_id: str) -> List[LedgerEntry]:
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.user_id == user_id)
            .order_by(LedgerEntry.created_at, LedgerEntry.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_page_for_user(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        kind: Optional[LedgerEntryKind] = None,
    ) -> Tuple[List[LedgerEntry], int]:
        """
        Retrieve a page of entries, newest first, with the total count

        Args:
            user_id: User identifier
            limit: Maximum number of entries
            offset: Entries to skip
            kind: Optional kind filter

        Returns:
            Tuple of (entries, total)
        """
        conditions = [LedgerEntry.user_id == user_id]
        if kind is not None:
            conditions.append(LedgerEntry.kind == kind)

        count_stmt = select(func.count()).select_from(LedgerEntry).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(LedgerEntry)
            .where(*conditions)
            .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[LedgerEntry]:
        stmt = select(LedgerEntry).where(LedgerEntry.idempotency_key == idempotency_key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_point_awards_by_event_type(self, user_id: str) -> Dict[str, int]:
        stmt = (
            select(LedgerEntry.event_type, func.count())
            .where(
                LedgerEntry.user_id == user_id,
                LedgerEntry.kind == LedgerEntryKind.POINT_AWARD,
                LedgerEntry.amount > 0,
            )
            .group_by(LedgerEntry.event_type)
        )
        result = await self.session.execute(stmt)
        return {event_type: count for event_type, count in result.all()}

    async def list_user_ids(self) -> List[str]:
        stmt = select(distinct(LedgerEntry.user_id)).order_by(LedgerEntry.user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
