from __future__ import annotations

from datetime import datetime

from instructormatch.api.schemas.common import CamelModel
from pydantic import Field


class ReviewCreate(CamelModel):
    contract_id: str = Field(..., min_length=1)
    reviewee_id: str = Field(..., min_length=1, description="User id of the reviewed party")
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = None
    is_public: bool = True


class ReviewResponse(CamelModel):
    id: str
    contract_id: str
    reviewer_id: str
    reviewee_id: str
    rating: int
    comment: str | None = None
    is_public: bool
    created_at: datetime
