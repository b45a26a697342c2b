from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from instructormatch.api.deps import get_current_account, get_db_session
from instructormatch.api.errors import to_http_exception
from instructormatch.api.schemas.training_requests import (
    TrainingRequestCreate,
    TrainingRequestResponse,
    TrainingRequestUpdate,
)
from instructormatch.domain import MarketplaceError
from instructormatch.domain.services.training_requests import TrainingRequestService
from instructormatch.infrastructure.db.models import UserModel
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/training-requests", tags=["Training Requests"])


@router.post("", response_model=TrainingRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_training_request(
    payload: TrainingRequestCreate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> TrainingRequestResponse:
    """
    Post a training request for the caller's company.

    - Requires a company profile
    - Notifies every verified instructor whose rate range overlaps the budget
    """
    service = TrainingRequestService(session)
    try:
        request = await service.create_request(user_id=account.id, data=payload.model_dump())
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return TrainingRequestResponse.model_validate(request)


@router.get("", response_model=list[TrainingRequestResponse])
async def list_training_requests(
    request_type: str | None = Query(None, alias="type"),
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> list[TrainingRequestResponse]:
    """``type=company`` lists the caller's own requests; otherwise every open request."""
    service = TrainingRequestService(session)
    if request_type == "company":
        requests = await service.list_for_company_user(account.id)
    else:
        requests = await service.list_open()
    return [TrainingRequestResponse.model_validate(request) for request in requests]


@router.put("/{request_id}", response_model=TrainingRequestResponse)
async def update_training_request(
    request_id: str,
    payload: TrainingRequestUpdate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> TrainingRequestResponse:
    """Edit request fields or move its status forward."""
    service = TrainingRequestService(session)
    try:
        request = await service.update_request(
            request_id=request_id,
            user_id=account.id,
            updates=payload.model_dump(exclude_unset=True),
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return TrainingRequestResponse.model_validate(request)
