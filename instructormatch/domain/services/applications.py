"""Application workflow: instructors propose a rate, companies accept or reject."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import structlog
from instructormatch.domain.errors import NotFoundError, ValidationError
from instructormatch.domain.services.notifications import NotificationService
from instructormatch.infrastructure.db.models import (
    Application,
    ApplicationStatus,
    Company,
    Instructor,
    RequestStatus,
    TrainingRequest,
)
from sqlalchemy import select
from sqlalchemy.orm import selectinload

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)

DECISIONS = frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED})


def ensure_rate_within_budget(proposed_rate: Decimal, request: TrainingRequest) -> None:
    """Boundaries are inclusive: ``min_budget <= proposed_rate <= max_budget``."""
    if proposed_rate < request.min_budget or proposed_rate > request.max_budget:
        raise ValidationError(
            f"Proposed rate must be between {request.min_budget} and {request.max_budget}"
        )


class ApplicationService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def submit_application(
        self,
        *,
        user_id: str,
        request_id: str,
        proposed_rate: Decimal,
        cover_letter: str | None = None,
    ) -> Application:
        instructor = await self.session.scalar(
            select(Instructor).where(Instructor.user_id == user_id)
        )
        if instructor is None:
            raise ValidationError("Instructor profile required")

        request = await self.session.get(TrainingRequest, request_id)
        if request is None:
            raise NotFoundError(f"Training request {request_id} not found")
        if request.status != RequestStatus.OPEN:
            raise ValidationError("Training request is not open for applications")
        ensure_rate_within_budget(proposed_rate, request)

        application = Application(
            request_id=request.id,
            instructor_id=instructor.id,
            proposed_rate=proposed_rate,
            cover_letter=cover_letter,
            status=ApplicationStatus.PENDING,
        )
        try:
            self.session.add(application)
            await self.session.flush()

            company = await self.session.get(Company, request.company_id)
            if company is not None:
                await NotificationService(self.session).create_notification(
                    user_id=company.user_id,
                    title="New Application Received",
                    message=(
                        f'An instructor has applied for your training request: "{request.title}"'
                    ),
                )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await logger.ainfo(
            "application_submitted",
            application_id=application.id,
            request_id=request.id,
            instructor_id=instructor.id,
            proposed_rate=str(proposed_rate),
        )
        return application

    async def list_by_request(self, request_id: str) -> list[Application]:
        stmt: Select[tuple[Application]] = (
            select(Application)
            .where(Application.request_id == request_id)
            .options(selectinload(Application.instructor))
            .order_by(Application.created_at.desc(), Application.id)
        )
        return list((await self.session.scalars(stmt)).all())

    async def list_by_instructor(self, instructor_id: str) -> list[Application]:
        stmt: Select[tuple[Application]] = (
            select(Application)
            .where(Application.instructor_id == instructor_id)
            .options(selectinload(Application.request))
            .order_by(Application.created_at.desc(), Application.id)
        )
        return list((await self.session.scalars(stmt)).all())

    async def decide(self, *, application_id: str, status: ApplicationStatus) -> Application:
        """Accept or reject a pending application.

        Neither the caller's ownership of the request nor the request still
        being open is checked here.
        """
        if status not in DECISIONS:
            raise ValidationError("Application status must be accepted or rejected")

        stmt = (
            select(Application)
            .where(Application.id == application_id)
            .options(selectinload(Application.instructor), selectinload(Application.request))
        )
        application = await self.session.scalar(stmt)
        if application is None:
            raise NotFoundError(f"Application {application_id} not found")

        if application.status == status:
            return application
        if application.status != ApplicationStatus.PENDING:
            raise ValidationError(f"Application is already {application.status.value}")

        try:
            application.status = status
            await NotificationService(self.session).create_notification(
                user_id=application.instructor.user_id,
                title=f"Application {status.value.capitalize()}",
                message=(
                    f'Your application for "{application.request.title}" was {status.value}.'
                ),
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await logger.ainfo(
            "application_decided",
            application_id=application.id,
            request_id=application.request_id,
            status=status.value,
        )
        return application
