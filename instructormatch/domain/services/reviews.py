"""Reviews and the instructor rating they drive.

The rating is recomputed from scratch as the mean of every review the
instructor's user ever received. Insert, recompute and update run in one
transaction with the instructor row locked so concurrent reviews cannot lose
an update.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

import structlog
from instructormatch.domain.errors import NotFoundError, ValidationError
from instructormatch.infrastructure.db.models import (
    Contract,
    ContractStatus,
    Instructor,
    Review,
    UserModel,
)
from sqlalchemy import select

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5
RATING_PLACES = Decimal("0.01")


def average_rating(ratings: Iterable[int]) -> Decimal:
    """Arithmetic mean rounded half-up to two places; 0 when there are no ratings."""
    values = list(ratings)
    if not values:
        return Decimal("0.00")
    mean = Decimal(sum(values)) / Decimal(len(values))
    return mean.quantize(RATING_PLACES, rounding=ROUND_HALF_UP)


class ReviewService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_review(
        self,
        *,
        reviewer_id: str,
        contract_id: str,
        reviewee_id: str,
        rating: int,
        comment: str | None = None,
        is_public: bool = True,
    ) -> Review:
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        contract = await self.session.get(Contract, contract_id)
        if contract is None:
            raise NotFoundError(f"Contract {contract_id} not found")
        if contract.status != ContractStatus.COMPLETED:
            raise ValidationError("Reviews can only be left on completed contracts")
        if await self.session.get(UserModel, reviewee_id) is None:
            raise NotFoundError(f"User {reviewee_id} not found")

        review = Review(
            contract_id=contract_id,
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            rating=rating,
            comment=comment,
            is_public=is_public,
        )
        try:
            self.session.add(review)
            await self.session.flush()
            new_rating = await self._recompute_rating(reviewee_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await logger.ainfo(
            "review_created",
            review_id=review.id,
            contract_id=contract_id,
            reviewee_id=reviewee_id,
            rating=rating,
            instructor_rating=str(new_rating) if new_rating is not None else None,
        )
        return review

    async def list_for_instructor(self, instructor_id: str) -> list[Review]:
        instructor = await self.session.get(Instructor, instructor_id)
        if instructor is None:
            raise NotFoundError(f"Instructor {instructor_id} not found")

        stmt: Select[tuple[Review]] = (
            select(Review)
            .where(Review.reviewee_id == instructor.user_id)
            .order_by(Review.created_at.desc(), Review.id)
        )
        return list((await self.session.scalars(stmt)).all())

    async def _recompute_rating(self, reviewee_id: str) -> Decimal | None:
        """Lock the reviewee's instructor row and store the mean of all their reviews."""
        lock_stmt = (
            select(Instructor)
            .where(Instructor.user_id == reviewee_id)
            .with_for_update()
        )
        instructor = await self.session.scalar(lock_stmt)
        if instructor is None:
            return None

        ratings = (
            await self.session.scalars(select(Review.rating).where(Review.reviewee_id == reviewee_id))
        ).all()
        instructor.rating = average_rating(ratings)
        logger.debug(
            "rating_recomputed",
            instructor_id=instructor.id,
            review_count=len(ratings),
            rating=str(instructor.rating),
        )
        return instructor.rating
