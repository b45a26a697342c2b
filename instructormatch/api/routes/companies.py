from __future__ import annotations

from fastapi import APIRouter, Depends, status
from instructormatch.api.deps import get_current_account, get_db_session
from instructormatch.api.errors import to_http_exception
from instructormatch.api.schemas.profiles import CompanyCreate, CompanyResponse, CompanyUpdate
from instructormatch.domain import MarketplaceError
from instructormatch.domain.services.profiles import ProfileService
from instructormatch.infrastructure.db.models import UserModel
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/companies", tags=["Companies"])


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(
    payload: CompanyCreate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> CompanyResponse:
    """Create the caller's company profile (one per user)."""
    service = ProfileService(session)
    try:
        company = await service.create_company(user_id=account.id, data=payload.model_dump())
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return CompanyResponse.model_validate(company)


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: str,
    payload: CompanyUpdate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> CompanyResponse:
    """Update fields of the caller's company profile in place."""
    service = ProfileService(session)
    try:
        company = await service.update_company(
            company_id=company_id,
            user_id=account.id,
            updates=payload.model_dump(exclude_unset=True),
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return CompanyResponse.model_validate(company)
