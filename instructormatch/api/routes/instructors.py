from __future__ import annotations

from decimal import Decimal, InvalidOperation

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from instructormatch.api.deps import get_current_account, get_db_session
from instructormatch.api.errors import to_http_exception
from instructormatch.api.schemas.profiles import (
    InstructorCreate,
    InstructorResponse,
    InstructorUpdate,
)
from instructormatch.domain import MarketplaceError
from instructormatch.domain.services.matching import MatchingService
from instructormatch.domain.services.profiles import ProfileService
from instructormatch.infrastructure.db.models import UserModel
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/instructors", tags=["Instructors"])
logger = structlog.get_logger()


def _parse_budget(value: str) -> Decimal:
    try:
        budget = Decimal(value)
    except InvalidOperation as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Budget must be a number"
        ) from exc
    if not budget.is_finite() or budget < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Budget must be a non-negative number"
        )
    return budget


@router.post("", response_model=InstructorResponse, status_code=status.HTTP_201_CREATED)
async def create_instructor(
    payload: InstructorCreate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> InstructorResponse:
    """Create the caller's instructor profile; verification starts as pending."""
    service = ProfileService(session)
    try:
        instructor = await service.create_instructor(
            user_id=account.id, data=payload.model_dump()
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return InstructorResponse.model_validate(instructor)


@router.get("/search", response_model=list[InstructorResponse])
async def search_instructors(
    min_budget: str | None = Query(None, alias="minBudget"),
    max_budget: str | None = Query(None, alias="maxBudget"),
    session: AsyncSession = Depends(get_db_session),
) -> list[InstructorResponse]:
    """Verified instructors whose rate range overlaps the budget, highest rated first."""
    if not min_budget or not max_budget:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Budget range required")

    low = _parse_budget(min_budget)
    high = _parse_budget(max_budget)
    if low > high:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="minBudget must not exceed maxBudget",
        )

    instructors = await MatchingService(session).find_eligible_instructors(low, high)
    logger.info(
        "instructor_search",
        min_budget=str(low),
        max_budget=str(high),
        results=len(instructors),
    )
    return [InstructorResponse.model_validate(instructor) for instructor in instructors]


@router.get("/{instructor_id}", response_model=InstructorResponse)
async def get_instructor(
    instructor_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> InstructorResponse:
    """Public instructor profile."""
    try:
        instructor = await ProfileService(session).get_instructor(instructor_id)
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return InstructorResponse.model_validate(instructor)


@router.put("/{instructor_id}", response_model=InstructorResponse)
async def update_instructor(
    instructor_id: str,
    payload: InstructorUpdate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> InstructorResponse:
    service = ProfileService(session)
    try:
        instructor = await service.update_instructor(
            instructor_id=instructor_id,
            user_id=account.id,
            updates=payload.model_dump(exclude_unset=True),
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return InstructorResponse.model_validate(instructor)
