from __future__ import annotations

from decimal import Decimal
from typing import Any

from httpx import AsyncClient
from instructormatch.api.deps import issue_smoke_token
from instructormatch.domain.services.profiles import ProfileService
from instructormatch.infrastructure.db.models import (
    Company,
    Contract,
    ContractStatus,
    Instructor,
    RequestStatus,
    TrainingRequest,
    UserModel,
    UserType,
    VerificationStatus,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


def auth_headers(user_id: str, *, email: str | None = None) -> dict[str, str]:
    token = issue_smoke_token(user_id, email=email or f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


def company_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "companyName": "Acme Corp",
        "industry": "Manufacturing",
        "companySize": "50-200",
        "location": "Berlin",
    }
    payload.update(overrides)
    return payload


def instructor_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "professionalTitle": "Agile Coach",
        "yearsExperience": 8,
        "specializations": ["scrum", "kanban"],
        "minHourlyRate": "80.00",
        "desiredHourlyRate": "150.00",
    }
    payload.update(overrides)
    return payload


def request_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": "Scrum Fundamentals",
        "description": "Two-day introduction to Scrum for product teams",
        "trainingType": "workshop",
        "duration": "2 days",
        "minBudget": "50.00",
        "maxBudget": "200.00",
        "isRemote": True,
    }
    payload.update(overrides)
    return payload


async def onboard_company(client: AsyncClient, headers: dict[str, str], **overrides: Any) -> dict:
    """Set the account type and create a company profile through the API."""
    response = await client.put("/api/user/setup", json={"userType": "company"}, headers=headers)
    assert response.status_code == 200, response.text
    response = await client.post(
        "/api/companies", json=company_payload(**overrides), headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def onboard_instructor(
    client: AsyncClient, headers: dict[str, str], **overrides: Any
) -> dict:
    response = await client.put(
        "/api/user/setup", json={"userType": "instructor"}, headers=headers
    )
    assert response.status_code == 200, response.text
    response = await client.post(
        "/api/instructors", json=instructor_payload(**overrides), headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def approve_instructor(
    session_factory: async_sessionmaker[AsyncSession], instructor_id: str
) -> None:
    """Stand in for the out-of-band moderation step."""
    async with session_factory() as session:
        await ProfileService(session).set_verification(
            instructor_id=instructor_id, status=VerificationStatus.APPROVED
        )


async def seed_company(session: AsyncSession, user_id: str = "company-user") -> Company:
    session.add(UserModel(id=user_id, email=f"{user_id}@example.com", user_type=UserType.COMPANY))
    company = Company(user_id=user_id, company_name="Acme Corp")
    session.add(company)
    await session.commit()
    return company


async def seed_instructor(
    session: AsyncSession,
    user_id: str,
    *,
    min_rate: str = "80.00",
    desired_rate: str = "150.00",
    verified: bool = True,
) -> Instructor:
    session.add(
        UserModel(id=user_id, email=f"{user_id}@example.com", user_type=UserType.INSTRUCTOR)
    )
    instructor = Instructor(
        user_id=user_id,
        professional_title="Trainer",
        years_experience=5,
        min_hourly_rate=Decimal(min_rate),
        desired_hourly_rate=Decimal(desired_rate),
        is_verified=verified,
        verification_status=(
            VerificationStatus.APPROVED if verified else VerificationStatus.PENDING
        ),
    )
    session.add(instructor)
    await session.commit()
    return instructor


async def seed_request(
    session: AsyncSession,
    company: Company,
    *,
    min_budget: str = "50.00",
    max_budget: str = "200.00",
    status: RequestStatus = RequestStatus.OPEN,
) -> TrainingRequest:
    request = TrainingRequest(
        company_id=company.id,
        title="Leadership Bootcamp",
        description="Leadership training for new managers",
        training_type="bootcamp",
        duration="3 days",
        min_budget=Decimal(min_budget),
        max_budget=Decimal(max_budget),
        status=status,
    )
    session.add(request)
    await session.commit()
    return request


async def seed_contract(
    session: AsyncSession,
    request: TrainingRequest,
    company: Company,
    instructor: Instructor,
    *,
    status: ContractStatus = ContractStatus.COMPLETED,
) -> Contract:
    contract = Contract(
        request_id=request.id,
        company_id=company.id,
        instructor_id=instructor.id,
        agreed_rate=Decimal("100.00"),
        total_amount=Decimal("1000.00"),
        status=status,
    )
    session.add(contract)
    await session.commit()
    return contract
