"""Balance and ledger history routes"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.adapter.repositories import SqlAlchemyLedgerEntryRepository
from economy.api.auth import Principal, get_current_principal
from economy.api.error import ClientError
from economy.app.use_cases.ledger import (
    BalanceResponseDTO,
    GetBalance,
    ListLedgerEntries,
    ListLedgerEntriesResponseDTO,
)
from economy.depends import get_session
from economy.domain.ledger_entry import LedgerEntryKind

router = APIRouter(prefix="/economy", tags=["Economy"])


@router.get("/balance", response_model=BalanceResponseDTO)
async def get_balance(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """
    Current points, reputation tier and credit balance of the caller.

    The figures are projected from the ledger, so they always agree with
    `GET /economy/ledger`.
    """
    use_case = GetBalance(SqlAlchemyLedgerEntryRepository(session))
    result = await use_case.execute(principal.user_id)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/ledger", response_model=ListLedgerEntriesResponseDTO)
async def list_ledger(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    kind: Optional[LedgerEntryKind] = Query(None, description="Only entries of this kind"),
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Caller's ledger entries, newest first"""
    use_case = ListLedgerEntries(SqlAlchemyLedgerEntryRepository(session))
    result = await use_case.execute(principal.user_id, limit=limit, offset=offset, kind=kind)

    if result.is_err():
        raise ClientError(result.error)
    return result.value
