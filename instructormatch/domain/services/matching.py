"""Budget-range matching between training requests and verified instructors."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import structlog
from instructormatch.domain.services.notifications import NotificationService
from instructormatch.infrastructure.db.models import Instructor, TrainingRequest
from sqlalchemy import select

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)

OPPORTUNITY_TITLE = "New Training Opportunity"


def notification_key(request_id: str, instructor_id: str) -> str:
    return f"{request_id}:{instructor_id}"


class MatchingService:
    """Select instructors whose acceptable rate range overlaps a budget."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_eligible_instructors(
        self, min_budget: Decimal, max_budget: Decimal
    ) -> list[Instructor]:
        """Return verified instructors overlapping ``[min_budget, max_budget]``, best rated first."""
        stmt: Select[tuple[Instructor]] = (
            select(Instructor)
            .where(
                Instructor.is_verified == True,  # noqa: E712
                Instructor.min_hourly_rate <= max_budget,
                Instructor.desired_hourly_rate >= min_budget,
            )
            .order_by(Instructor.rating.desc(), Instructor.created_at, Instructor.id)
        )
        instructors = list((await self.session.scalars(stmt)).all())
        logger.debug(
            "instructors_matched",
            min_budget=str(min_budget),
            max_budget=str(max_budget),
            match_count=len(instructors),
        )
        return instructors

    async def notify_matched_instructors(self, request: TrainingRequest) -> int:
        """Append one notification per eligible instructor; returns how many were written.

        The caller commits. Each notification carries the key
        ``"{request_id}:{instructor_id}"`` so replaying the fan-out is a no-op.
        """
        instructors = await self.find_eligible_instructors(request.min_budget, request.max_budget)
        notifications = NotificationService(self.session)

        written = 0
        for instructor in instructors:
            created = await notifications.create_notification(
                user_id=instructor.user_id,
                title=OPPORTUNITY_TITLE,
                message=(
                    f'A new training request for "{request.title}" matches your rate range.'
                ),
                idempotency_key=notification_key(request.id, instructor.id),
            )
            if created is not None:
                written += 1

        logger.info(
            "training_request_fanout",
            request_id=request.id,
            matched=len(instructors),
            notified=written,
        )
        return written
