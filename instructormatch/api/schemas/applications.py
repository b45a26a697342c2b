from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from instructormatch.api.schemas.common import CamelModel, MoneyIn
from instructormatch.api.schemas.profiles import InstructorResponse
from instructormatch.api.schemas.training_requests import TrainingRequestResponse
from instructormatch.infrastructure.db.models import ApplicationStatus
from pydantic import Field


class ApplicationCreate(CamelModel):
    request_id: str = Field(..., min_length=1)
    proposed_rate: MoneyIn
    cover_letter: str | None = None


class ApplicationDecision(CamelModel):
    status: Literal["accepted", "rejected"]


class ApplicationResponse(CamelModel):
    id: str
    request_id: str
    instructor_id: str
    proposed_rate: Decimal
    cover_letter: str | None = None
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime


class ApplicationWithInstructor(ApplicationResponse):
    instructor: InstructorResponse


class ApplicationWithRequest(ApplicationResponse):
    request: TrainingRequestResponse
