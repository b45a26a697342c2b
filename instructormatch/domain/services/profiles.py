"""Profile store: users, company profiles and instructor profiles keyed by owning user."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import structlog
from instructormatch.domain.errors import ForbiddenError, NotFoundError, ValidationError
from instructormatch.domain.models import (
    CompanyProfile,
    InstructorProfile,
    NoProfile,
    Profile,
    User,
)
from instructormatch.infrastructure.db.models import (
    Company,
    Instructor,
    UserModel,
    UserType,
    VerificationStatus,
)
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)

# Fields owned by moderation and contract/review bookkeeping, never by the profile form.
PROTECTED_INSTRUCTOR_FIELDS = frozenset(
    {
        "id",
        "user_id",
        "is_verified",
        "verification_status",
        "rating",
        "completed_sessions",
        "total_earnings",
    }
)
PROTECTED_COMPANY_FIELDS = frozenset({"id", "user_id"})
# NOT NULL columns: a null in a partial update means "leave unchanged".
REQUIRED_FIELDS = frozenset(
    {
        "company_name",
        "professional_title",
        "years_experience",
        "min_hourly_rate",
        "desired_hourly_rate",
    }
)


def ensure_rate_range(min_rate: Decimal, desired_rate: Decimal) -> None:
    if min_rate >= desired_rate:
        raise ValidationError("Minimum hourly rate must be lower than desired hourly rate")


class ProfileService:
    """Domain logic for users and their company/instructor profiles."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- users ---

    async def ensure_user(self, user: User) -> UserModel:
        """Mirror the token subject into ``users``, creating the row on first login."""
        record = await self.session.get(UserModel, user.user_id)
        claims = {
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "profile_image_url": user.profile_image_url,
        }
        if user.email is not None and await self._email_taken(user.email, user.user_id):
            # users.email is unique; keep the account and leave the address off
            await logger.awarning("user_email_conflict", user_id=user.user_id)
            claims["email"] = None

        if record is None:
            record = UserModel(id=user.user_id, **claims)
            self.session.add(record)
            try:
                await self.session.commit()
            except IntegrityError:
                # Another request created the same subject first
                await self.session.rollback()
                existing = await self.session.get(UserModel, user.user_id)
                if existing is None:
                    raise
                return existing
            await logger.ainfo("user_created", user_id=user.user_id)
            return record

        changed = False
        for key, value in claims.items():
            if value is not None and getattr(record, key) != value:
                setattr(record, key, value)
                changed = True
        if changed:
            await self.session.commit()
        return record

    async def _email_taken(self, email: str, user_id: str) -> bool:
        owner = await self.session.scalar(select(UserModel.id).where(UserModel.email == email))
        return owner is not None and owner != user_id

    async def get_user(self, user_id: str) -> UserModel:
        record = await self.session.get(UserModel, user_id)
        if record is None:
            raise NotFoundError("User not found")
        return record

    async def setup_user_type(self, *, user_id: str, user_type: UserType) -> UserModel:
        """Set the user type; it can be chosen once and never changed afterwards."""
        record = await self.get_user(user_id)

        if record.user_type is not None and record.user_type != user_type:
            raise ValidationError(f"User type already set to {record.user_type.value}")

        if record.user_type is None:
            record.user_type = user_type
            await self.session.commit()
            await logger.ainfo("user_type_set", user_id=user_id, user_type=user_type.value)
        return record

    async def resolve_profile(self, record: UserModel) -> Profile:
        match record.user_type:
            case UserType.COMPANY:
                company = await self.get_company_by_user(record.id)
                return CompanyProfile(company) if company else NoProfile()
            case UserType.INSTRUCTOR:
                instructor = await self.get_instructor_by_user(record.id)
                return InstructorProfile(instructor) if instructor else NoProfile()
            case _:
                return NoProfile()

    # --- companies ---

    async def get_company_by_user(self, user_id: str) -> Company | None:
        return await self.session.scalar(select(Company).where(Company.user_id == user_id))

    async def get_company(self, company_id: str) -> Company:
        company = await self.session.get(Company, company_id)
        if company is None:
            raise NotFoundError(f"Company {company_id} not found")
        return company

    async def create_company(self, *, user_id: str, data: dict[str, Any]) -> Company:
        record = await self.get_user(user_id)
        if record.user_type == UserType.INSTRUCTOR:
            raise ValidationError("Instructor accounts cannot create a company profile")
        if await self.get_company_by_user(user_id) is not None:
            raise ValidationError("Company profile already exists")

        company = Company(user_id=user_id, **_strip(data, PROTECTED_COMPANY_FIELDS))
        self.session.add(company)
        await self.session.commit()
        await logger.ainfo("company_created", company_id=company.id, user_id=user_id)
        return company

    async def update_company(
        self, *, company_id: str, user_id: str, updates: dict[str, Any]
    ) -> Company:
        company = await self.get_company(company_id)
        if company.user_id != user_id:
            raise ForbiddenError("You do not own this company profile")

        fields = _strip(updates, PROTECTED_COMPANY_FIELDS)
        for key, value in fields.items():
            setattr(company, key, value)
        await self.session.commit()
        await logger.ainfo("company_updated", company_id=company.id, updated_fields=list(fields))
        return company

    # --- instructors ---

    async def get_instructor_by_user(self, user_id: str) -> Instructor | None:
        return await self.session.scalar(select(Instructor).where(Instructor.user_id == user_id))

    async def get_instructor(self, instructor_id: str) -> Instructor:
        instructor = await self.session.get(Instructor, instructor_id)
        if instructor is None:
            raise NotFoundError(f"Instructor {instructor_id} not found")
        return instructor

    async def create_instructor(self, *, user_id: str, data: dict[str, Any]) -> Instructor:
        record = await self.get_user(user_id)
        if record.user_type == UserType.COMPANY:
            raise ValidationError("Company accounts cannot create an instructor profile")
        if await self.get_instructor_by_user(user_id) is not None:
            raise ValidationError("Instructor profile already exists")

        fields = _strip(data, PROTECTED_INSTRUCTOR_FIELDS)
        ensure_rate_range(fields["min_hourly_rate"], fields["desired_hourly_rate"])

        instructor = Instructor(user_id=user_id, **fields)
        self.session.add(instructor)
        await self.session.commit()
        await logger.ainfo("instructor_created", instructor_id=instructor.id, user_id=user_id)
        return instructor

    async def update_instructor(
        self, *, instructor_id: str, user_id: str, updates: dict[str, Any]
    ) -> Instructor:
        instructor = await self.get_instructor(instructor_id)
        if instructor.user_id != user_id:
            raise ForbiddenError("You do not own this instructor profile")

        fields = _strip(updates, PROTECTED_INSTRUCTOR_FIELDS)
        ensure_rate_range(
            fields.get("min_hourly_rate", instructor.min_hourly_rate),
            fields.get("desired_hourly_rate", instructor.desired_hourly_rate),
        )
        for key, value in fields.items():
            setattr(instructor, key, value)
        await self.session.commit()
        await logger.ainfo(
            "instructor_updated", instructor_id=instructor.id, updated_fields=list(fields)
        )
        return instructor

    async def set_verification(
        self, *, instructor_id: str, status: VerificationStatus
    ) -> Instructor:
        """Record a moderation decision; only approved instructors take part in matching."""
        instructor = await self.get_instructor(instructor_id)
        instructor.verification_status = status
        instructor.is_verified = status == VerificationStatus.APPROVED
        await self.session.commit()
        await logger.ainfo(
            "instructor_verification_set",
            instructor_id=instructor.id,
            verification_status=status.value,
        )
        return instructor


def _strip(data: dict[str, Any], protected: frozenset[str]) -> dict[str, Any]:
    return {
        key: value
        for key, value in data.items()
        if key not in protected and not (value is None and key in REQUIRED_FIELDS)
    }
