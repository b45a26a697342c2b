from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from instructormatch.infrastructure.db.models import Company, Instructor


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    claims: dict = field(default_factory=dict)


@dataclass(slots=True)
class CompanyProfile:
    company: Company
    kind: Literal["company"] = "company"


@dataclass(slots=True)
class InstructorProfile:
    instructor: Instructor
    kind: Literal["instructor"] = "instructor"


@dataclass(slots=True)
class NoProfile:
    kind: Literal["none"] = "none"


# A user's profile is resolved from their user type at read time.
Profile = CompanyProfile | InstructorProfile | NoProfile
