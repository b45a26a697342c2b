"""Training request registry.

Companies post budget-bounded requests. Creating one fans out notifications to
every matching instructor inside the same transaction, and status only ever
moves forward.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

import structlog
from instructormatch.domain.errors import ForbiddenError, NotFoundError, ValidationError
from instructormatch.domain.services.matching import MatchingService
from instructormatch.infrastructure.db.models import (
    Company,
    Instructor,
    RequestStatus,
    TrainingRequest,
)
from sqlalchemy import select

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)

ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.OPEN: frozenset({RequestStatus.IN_PROGRESS, RequestStatus.CANCELLED}),
    RequestStatus.IN_PROGRESS: frozenset({RequestStatus.COMPLETED, RequestStatus.CANCELLED}),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.CANCELLED: frozenset(),
}

# Columns a company may edit directly; status and instructor selection go through transitions.
EDITABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "training_type",
        "duration",
        "min_budget",
        "max_budget",
        "location",
        "is_remote",
        "preferred_start_date",
    }
)
NULLABLE_FIELDS = frozenset({"location", "preferred_start_date"})


def ensure_budget_range(min_budget: Decimal, max_budget: Decimal) -> None:
    if min_budget >= max_budget:
        raise ValidationError("Minimum budget must be lower than maximum budget")


def ensure_transition(current: RequestStatus, target: RequestStatus) -> None:
    """Raise unless ``current -> target`` moves the request forward (same status is a no-op)."""
    if current == target:
        return
    if target not in ALLOWED_TRANSITIONS[current]:
        raise ValidationError(
            f"Cannot move training request from {current.value} to {target.value}"
        )


class TrainingRequestService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_request(self, *, user_id: str, data: dict[str, Any]) -> TrainingRequest:
        company = await self._company_for_user(user_id)
        if company is None:
            raise ValidationError("Company profile required")

        fields = {key: value for key, value in data.items() if key in EDITABLE_FIELDS}
        ensure_budget_range(fields["min_budget"], fields["max_budget"])

        request = TrainingRequest(company_id=company.id, status=RequestStatus.OPEN, **fields)
        try:
            self.session.add(request)
            await self.session.flush()
            notified = await MatchingService(self.session).notify_matched_instructors(request)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await logger.ainfo(
            "training_request_created",
            request_id=request.id,
            company_id=company.id,
            min_budget=str(request.min_budget),
            max_budget=str(request.max_budget),
            instructors_notified=notified,
        )
        return request

    async def get_request(self, request_id: str) -> TrainingRequest:
        request = await self.session.get(TrainingRequest, request_id)
        if request is None:
            raise NotFoundError(f"Training request {request_id} not found")
        return request

    async def list_for_company_user(self, user_id: str) -> list[TrainingRequest]:
        """Requests posted by the caller's company, newest first; empty without a company."""
        company = await self._company_for_user(user_id)
        if company is None:
            return []
        stmt: Select[tuple[TrainingRequest]] = (
            select(TrainingRequest)
            .where(TrainingRequest.company_id == company.id)
            .order_by(TrainingRequest.created_at.desc(), TrainingRequest.id)
        )
        return list((await self.session.scalars(stmt)).all())

    async def list_open(self) -> list[TrainingRequest]:
        stmt: Select[tuple[TrainingRequest]] = (
            select(TrainingRequest)
            .where(TrainingRequest.status == RequestStatus.OPEN)
            .order_by(TrainingRequest.created_at.desc(), TrainingRequest.id)
        )
        return list((await self.session.scalars(stmt)).all())

    async def update_request(
        self,
        *,
        request_id: str,
        user_id: str,
        updates: dict[str, Any],
    ) -> TrainingRequest:
        request = await self.get_request(request_id)
        company = await self.session.get(Company, request.company_id)
        if company is None or company.user_id != user_id:
            raise ForbiddenError("You do not own this training request")

        target_status: RequestStatus | None = updates.get("status")
        selected_instructor_id: str | None = updates.get("selected_instructor_id")

        if target_status is not None:
            ensure_transition(request.status, target_status)

        moving_to_in_progress = (
            target_status == RequestStatus.IN_PROGRESS
            and request.status != RequestStatus.IN_PROGRESS
        )
        if selected_instructor_id is not None and not moving_to_in_progress:
            raise ValidationError(
                "Selected instructor can only be set when the request moves to in_progress"
            )
        if moving_to_in_progress:
            if selected_instructor_id is None:
                raise ValidationError("Selecting an instructor is required to start a request")
            if await self.session.get(Instructor, selected_instructor_id) is None:
                raise NotFoundError(f"Instructor {selected_instructor_id} not found")

        fields = {
            key: value
            for key, value in updates.items()
            if key in EDITABLE_FIELDS and (value is not None or key in NULLABLE_FIELDS)
        }
        ensure_budget_range(
            fields.get("min_budget", request.min_budget),
            fields.get("max_budget", request.max_budget),
        )

        previous_status = request.status
        for key, value in fields.items():
            setattr(request, key, value)
        if moving_to_in_progress:
            request.selected_instructor_id = selected_instructor_id
        if target_status is not None:
            request.status = target_status

        await self.session.commit()
        await logger.ainfo(
            "training_request_updated",
            request_id=request.id,
            previous_status=previous_status.value,
            status=request.status.value,
            updated_fields=sorted(fields),
        )
        return request

    async def _company_for_user(self, user_id: str) -> Company | None:
        return await self.session.scalar(select(Company).where(Company.user_id == user_id))
