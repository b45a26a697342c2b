from __future__ import annotations

from fastapi import APIRouter, Depends, status
from instructormatch.api.deps import get_current_account, get_db_session
from instructormatch.api.errors import to_http_exception
from instructormatch.api.schemas.reviews import ReviewCreate, ReviewResponse
from instructormatch.domain import MarketplaceError
from instructormatch.domain.services.reviews import ReviewService
from instructormatch.infrastructure.db.models import UserModel
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: ReviewCreate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> ReviewResponse:
    """Review the other party of a completed contract and refresh the instructor rating."""
    service = ReviewService(session)
    try:
        review = await service.create_review(
            reviewer_id=account.id,
            contract_id=payload.contract_id,
            reviewee_id=payload.reviewee_id,
            rating=payload.rating,
            comment=payload.comment,
            is_public=payload.is_public,
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return ReviewResponse.model_validate(review)


@router.get("/instructor/{instructor_id}", response_model=list[ReviewResponse])
async def list_instructor_reviews(
    instructor_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> list[ReviewResponse]:
    try:
        reviews = await ReviewService(session).list_for_instructor(instructor_id)
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return [ReviewResponse.model_validate(review) for review in reviews]
