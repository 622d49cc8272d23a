from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.adapter.repositories import SqlAlchemyLedgerEntryRepository, SqlAlchemyUserBadgeRepository
from economy.api.auth import Principal, get_current_principal
from economy.api.error import ClientError
from economy.app.use_cases.badges import BadgeProgressResponseDTO, GetBadgeProgress
from economy.depends import get_session

router = APIRouter(prefix="/economy/badges", tags=["Badges"])


@router.get("", response_model=BadgeProgressResponseDTO)
async def badge_progress(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Every catalog badge with the caller's progress toward it"""
    use_case = GetBadgeProgress(
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyUserBadgeRepository(session),
    )
    result = await use_case.execute(principal.user_id)

    if result.is_err():
        raise ClientError(result.error)
    return result.value
