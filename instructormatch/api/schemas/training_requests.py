from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from instructormatch.api.schemas.common import CamelModel, MoneyIn
from instructormatch.infrastructure.db.models import RequestStatus
from pydantic import Field, model_validator


class TrainingRequestCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    training_type: str = Field(..., min_length=1, max_length=128)
    duration: str = Field(..., min_length=1, max_length=128)
    min_budget: MoneyIn
    max_budget: MoneyIn
    location: str | None = Field(None, max_length=255)
    is_remote: bool = False
    preferred_start_date: datetime | None = None

    @model_validator(mode="after")
    def check_budget_range(self) -> TrainingRequestCreate:
        if self.min_budget >= self.max_budget:
            raise ValueError("minBudget must be lower than maxBudget")
        return self


class TrainingRequestUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    training_type: str | None = Field(None, min_length=1, max_length=128)
    duration: str | None = Field(None, min_length=1, max_length=128)
    min_budget: MoneyIn | None = None
    max_budget: MoneyIn | None = None
    location: str | None = Field(None, max_length=255)
    is_remote: bool | None = None
    preferred_start_date: datetime | None = None
    status: RequestStatus | None = None
    selected_instructor_id: str | None = None


class TrainingRequestResponse(CamelModel):
    id: str
    company_id: str
    title: str
    description: str
    training_type: str
    duration: str
    min_budget: Decimal
    max_budget: Decimal
    location: str | None = None
    is_remote: bool
    preferred_start_date: datetime | None = None
    status: RequestStatus
    selected_instructor_id: str | None = None
    created_at: datetime
    updated_at: datetime
