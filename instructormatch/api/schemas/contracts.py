from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from instructormatch.api.schemas.common import CamelModel, MoneyIn
from instructormatch.infrastructure.db.models import ContractStatus, PaymentStatus
from pydantic import Field


class ContractCreate(CamelModel):
    request_id: str = Field(..., min_length=1)
    company_id: str = Field(..., min_length=1)
    instructor_id: str = Field(..., min_length=1)
    agreed_rate: MoneyIn
    total_amount: MoneyIn
    terms: str | None = None


class ContractStatusUpdate(CamelModel):
    status: Literal["signed", "completed", "disputed"]


class PaymentResponse(CamelModel):
    id: str
    contract_id: str
    amount: Decimal
    service_fee: Decimal
    instructor_amount: Decimal
    status: PaymentStatus
    paid_at: datetime | None = None
    released_at: datetime | None = None


class ContractResponse(CamelModel):
    id: str
    request_id: str
    company_id: str
    instructor_id: str
    agreed_rate: Decimal
    total_amount: Decimal
    terms: str | None = None
    status: ContractStatus
    signed_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    payment: PaymentResponse | None = None
