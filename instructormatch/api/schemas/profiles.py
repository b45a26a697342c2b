"""Schemas for users and their company/instructor profiles."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from instructormatch.api.schemas.common import CamelModel, MoneyIn
from instructormatch.infrastructure.db.models import UserType, VerificationStatus
from pydantic import Field, model_validator

# --- Request Schemas ---


class UserSetupRequest(CamelModel):
    user_type: UserType = Field(..., description="Account type, chosen once")


class CompanyCreate(CamelModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    industry: str | None = Field(None, max_length=128)
    company_size: str | None = Field(None, max_length=64)
    description: str | None = None
    website: str | None = Field(None, max_length=512)
    location: str | None = Field(None, max_length=255)


class CompanyUpdate(CamelModel):
    company_name: str | None = Field(None, min_length=1, max_length=255)
    industry: str | None = Field(None, max_length=128)
    company_size: str | None = Field(None, max_length=64)
    description: str | None = None
    website: str | None = Field(None, max_length=512)
    location: str | None = Field(None, max_length=255)


class InstructorCreate(CamelModel):
    professional_title: str = Field(..., min_length=1, max_length=255)
    years_experience: int = Field(..., ge=0, le=80)
    location: str | None = Field(None, max_length=255)
    bio: str | None = None
    specializations: list[str] | None = None
    min_hourly_rate: MoneyIn
    desired_hourly_rate: MoneyIn
    verification_documents: list[str] | None = Field(
        None, description="References to documents held by the file storage service"
    )

    @model_validator(mode="after")
    def check_rate_range(self) -> InstructorCreate:
        if self.min_hourly_rate >= self.desired_hourly_rate:
            raise ValueError("minHourlyRate must be lower than desiredHourlyRate")
        return self


class InstructorUpdate(CamelModel):
    professional_title: str | None = Field(None, min_length=1, max_length=255)
    years_experience: int | None = Field(None, ge=0, le=80)
    location: str | None = Field(None, max_length=255)
    bio: str | None = None
    specializations: list[str] | None = None
    min_hourly_rate: MoneyIn | None = None
    desired_hourly_rate: MoneyIn | None = None
    verification_documents: list[str] | None = None

    @model_validator(mode="after")
    def check_rate_range(self) -> InstructorUpdate:
        if (
            self.min_hourly_rate is not None
            and self.desired_hourly_rate is not None
            and self.min_hourly_rate >= self.desired_hourly_rate
        ):
            raise ValueError("minHourlyRate must be lower than desiredHourlyRate")
        return self


# --- Response Schemas ---


class UserResponse(CamelModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    user_type: UserType | None = None
    created_at: datetime
    updated_at: datetime


class CompanyResponse(CamelModel):
    id: str
    user_id: str
    company_name: str
    industry: str | None = None
    company_size: str | None = None
    description: str | None = None
    website: str | None = None
    location: str | None = None
    created_at: datetime
    updated_at: datetime


class InstructorResponse(CamelModel):
    id: str
    user_id: str
    professional_title: str
    years_experience: int
    location: str | None = None
    bio: str | None = None
    specializations: list[str] | None = None
    min_hourly_rate: Decimal
    desired_hourly_rate: Decimal
    is_verified: bool
    verification_status: VerificationStatus
    rating: Decimal
    completed_sessions: int
    total_earnings: Decimal
    created_at: datetime
    updated_at: datetime


class CompanyProfileOut(CamelModel):
    kind: Literal["company"] = "company"
    data: CompanyResponse


class InstructorProfileOut(CamelModel):
    kind: Literal["instructor"] = "instructor"
    data: InstructorResponse


class NoProfileOut(CamelModel):
    kind: Literal["none"] = "none"


ProfileOut = Annotated[
    CompanyProfileOut | InstructorProfileOut | NoProfileOut,
    Field(discriminator="kind"),
]


class AuthUserResponse(UserResponse):
    profile: ProfileOut
