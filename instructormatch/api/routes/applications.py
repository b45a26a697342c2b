from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from instructormatch.api.deps import get_current_account, get_db_session
from instructormatch.api.errors import to_http_exception
from instructormatch.api.schemas.applications import (
    ApplicationCreate,
    ApplicationDecision,
    ApplicationResponse,
    ApplicationWithInstructor,
    ApplicationWithRequest,
)
from instructormatch.domain import MarketplaceError
from instructormatch.domain.services.applications import ApplicationService
from instructormatch.infrastructure.db.models import ApplicationStatus, UserModel
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/applications", tags=["Applications"])


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    payload: ApplicationCreate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> ApplicationResponse:
    """
    Apply to an open training request.

    - Requires an instructor profile
    - `proposedRate` must fall within the request budget (inclusive)
    """
    service = ApplicationService(session)
    try:
        application = await service.submit_application(
            user_id=account.id,
            request_id=payload.request_id,
            proposed_rate=payload.proposed_rate,
            cover_letter=payload.cover_letter,
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return ApplicationResponse.model_validate(application)


@router.get(
    "",
    response_model=list[ApplicationWithInstructor] | list[ApplicationWithRequest],
)
async def list_applications(
    request_id: str | None = Query(None, alias="requestId"),
    instructor_id: str | None = Query(None, alias="instructorId"),
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> list[ApplicationWithInstructor] | list[ApplicationWithRequest]:
    """List by `requestId` (with applicant) or by `instructorId` (with request), newest first."""
    service = ApplicationService(session)
    if request_id:
        applications = await service.list_by_request(request_id)
        return [ApplicationWithInstructor.model_validate(item) for item in applications]
    if instructor_id:
        applications = await service.list_by_instructor(instructor_id)
        return [ApplicationWithRequest.model_validate(item) for item in applications]
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="requestId or instructorId required",
    )


@router.put("/{application_id}", response_model=ApplicationResponse)
async def decide_application(
    application_id: str,
    payload: ApplicationDecision,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> ApplicationResponse:
    service = ApplicationService(session)
    try:
        application = await service.decide(
            application_id=application_id,
            status=ApplicationStatus(payload.status),
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return ApplicationResponse.model_validate(application)
