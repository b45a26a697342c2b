"""Current-user routes: session user lookup and one-time account type setup."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from instructormatch.api.deps import get_current_account, get_db_session
from instructormatch.api.errors import to_http_exception
from instructormatch.api.schemas.profiles import (
    AuthUserResponse,
    CompanyProfileOut,
    CompanyResponse,
    InstructorProfileOut,
    InstructorResponse,
    NoProfileOut,
    UserResponse,
    UserSetupRequest,
)
from instructormatch.domain import CompanyProfile, InstructorProfile, MarketplaceError, Profile
from instructormatch.domain.services.profiles import ProfileService
from instructormatch.infrastructure.db.models import UserModel
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()
router = APIRouter(prefix="/api", tags=["authentication"])


def _profile_out(profile: Profile) -> CompanyProfileOut | InstructorProfileOut | NoProfileOut:
    match profile:
        case CompanyProfile(company=company):
            return CompanyProfileOut(data=CompanyResponse.model_validate(company))
        case InstructorProfile(instructor=instructor):
            return InstructorProfileOut(data=InstructorResponse.model_validate(instructor))
        case _:
            return NoProfileOut()


@router.get(
    "/auth/user",
    response_model=AuthUserResponse,
    summary="Get current user",
    description="Return the authenticated user together with their company or instructor profile.",
)
async def get_auth_user(
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> AuthUserResponse:
    profile = await ProfileService(session).resolve_profile(account)
    return AuthUserResponse(
        **UserResponse.model_validate(account).model_dump(),
        profile=_profile_out(profile),
    )


@router.put(
    "/user/setup",
    response_model=UserResponse,
    summary="Choose account type",
    description="Set the account type to company or instructor. It cannot be changed later.",
)
async def setup_user(
    payload: UserSetupRequest,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    service = ProfileService(session)
    try:
        record = await service.setup_user_type(user_id=account.id, user_type=payload.user_type)
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc

    return UserResponse.model_validate(record)
