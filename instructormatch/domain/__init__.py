from instructormatch.domain.errors import (
    ForbiddenError,
    MarketplaceError,
    NotFoundError,
    ValidationError,
)
from instructormatch.domain.models import (
    CompanyProfile,
    InstructorProfile,
    NoProfile,
    Profile,
    User,
)

__all__ = [
    "CompanyProfile",
    "ForbiddenError",
    "InstructorProfile",
    "MarketplaceError",
    "NoProfile",
    "NotFoundError",
    "Profile",
    "User",
    "ValidationError",
]
