"""Contracts, the escrow stub and reviews that follow a completed contract."""

from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.utils import auth_headers, onboard_company, onboard_instructor, request_payload


@pytest.fixture()
async def parties(
    async_client: AsyncClient,
    company_headers: dict[str, str],
    instructor_headers: dict[str, str],
) -> dict:
    company = await onboard_company(async_client, company_headers)
    instructor = await onboard_instructor(async_client, instructor_headers)
    request = (
        await async_client.post(
            "/api/training-requests", json=request_payload(), headers=company_headers
        )
    ).json()
    return {"company": company, "instructor": instructor, "request": request}


async def _create_contract(
    client: AsyncClient, headers: dict[str, str], parties: dict, total: str = "1000"
):
    return await client.post(
        "/api/contracts",
        json={
            "requestId": parties["request"]["id"],
            "companyId": parties["company"]["id"],
            "instructorId": parties["instructor"]["id"],
            "agreedRate": "100",
            "totalAmount": total,
            "terms": "Two sessions, remote",
        },
        headers=headers,
    )


class TestCreateContract:
    @pytest.mark.asyncio
    async def test_payment_held_in_escrow_with_ten_percent_fee(
        self, async_client: AsyncClient, company_headers: dict[str, str], parties: dict
    ) -> None:
        response = await _create_contract(async_client, company_headers, parties)

        assert response.status_code == status.HTTP_201_CREATED
        contract = response.json()
        assert contract["status"] == "draft"
        payment = contract["payment"]
        assert payment["contractId"] == contract["id"]
        assert payment["status"] == "held_in_escrow"
        assert payment["paidAt"] is not None
        assert Decimal(payment["amount"]) == Decimal("1000.00")
        assert Decimal(payment["serviceFee"]) == Decimal("100.00")
        assert Decimal(payment["instructorAmount"]) == Decimal("900.00")

    @pytest.mark.asyncio
    async def test_payment_is_persisted(
        self,
        async_client: AsyncClient,
        company_headers: dict[str, str],
        instructor_headers: dict[str, str],
        parties: dict,
    ) -> None:
        created = (await _create_contract(async_client, company_headers, parties, "333.33")).json()

        for headers in (company_headers, instructor_headers):
            listed = (await async_client.get("/api/contracts", headers=headers)).json()
            assert [item["id"] for item in listed] == [created["id"]]
            payment = listed[0]["payment"]
            assert Decimal(payment["serviceFee"]) + Decimal(payment["instructorAmount"]) == Decimal(
                "333.33"
            )

    @pytest.mark.asyncio
    async def test_strangers_see_no_contracts(
        self, async_client: AsyncClient, company_headers: dict[str, str], parties: dict
    ) -> None:
        await _create_contract(async_client, company_headers, parties)

        response = await async_client.get("/api/contracts", headers=auth_headers("stranger"))

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_unknown_references(
        self, async_client: AsyncClient, company_headers: dict[str, str], parties: dict
    ) -> None:
        broken = {**parties, "instructor": {"id": "missing"}}

        response = await _create_contract(async_client, company_headers, broken)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_negative_total_rejected(
        self, async_client: AsyncClient, company_headers: dict[str, str], parties: dict
    ) -> None:
        response = await _create_contract(async_client, company_headers, parties, "-5")

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestContractLifecycle:
    @pytest.mark.asyncio
    async def test_completion_releases_escrow_and_credits_instructor(
        self,
        async_client: AsyncClient,
        company_headers: dict[str, str],
        instructor_headers: dict[str, str],
        parties: dict,
    ) -> None:
        contract = (await _create_contract(async_client, company_headers, parties)).json()
        url = f"/api/contracts/{contract['id']}/status"

        signed = await async_client.put(url, json={"status": "signed"}, headers=instructor_headers)
        completed = await async_client.put(
            url, json={"status": "completed"}, headers=company_headers
        )

        assert signed.status_code == status.HTTP_200_OK
        assert signed.json()["signedAt"] is not None
        assert completed.status_code == status.HTTP_200_OK
        body = completed.json()
        assert body["status"] == "completed"
        assert body["completedAt"] is not None
        assert body["payment"]["status"] == "released"
        assert body["payment"]["releasedAt"] is not None

        instructor = (
            await async_client.get(f"/api/instructors/{parties['instructor']['id']}")
        ).json()
        assert instructor["completedSessions"] == 1
        assert Decimal(instructor["totalEarnings"]) == Decimal("900.00")

    @pytest.mark.asyncio
    async def test_cannot_complete_unsigned_contract(
        self, async_client: AsyncClient, company_headers: dict[str, str], parties: dict
    ) -> None:
        contract = (await _create_contract(async_client, company_headers, parties)).json()

        response = await async_client.put(
            f"/api/contracts/{contract['id']}/status",
            json={"status": "completed"},
            headers=company_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_dispute_freezes_payment(
        self, async_client: AsyncClient, company_headers: dict[str, str], parties: dict
    ) -> None:
        contract = (await _create_contract(async_client, company_headers, parties)).json()
        url = f"/api/contracts/{contract['id']}/status"

        disputed = await async_client.put(url, json={"status": "disputed"}, headers=company_headers)
        signed = await async_client.put(url, json={"status": "signed"}, headers=company_headers)

        assert disputed.json()["payment"]["status"] == "disputed"
        assert signed.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_only_parties_change_status(
        self, async_client: AsyncClient, company_headers: dict[str, str], parties: dict
    ) -> None:
        contract = (await _create_contract(async_client, company_headers, parties)).json()

        response = await async_client.put(
            f"/api/contracts/{contract['id']}/status",
            json={"status": "signed"},
            headers=auth_headers("stranger"),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestReviews:
    @pytest.mark.asyncio
    async def test_reviews_drive_instructor_rating(
        self,
        async_client: AsyncClient,
        company_headers: dict[str, str],
        instructor_headers: dict[str, str],
        parties: dict,
    ) -> None:
        contract = (await _create_contract(async_client, company_headers, parties)).json()
        url = f"/api/contracts/{contract['id']}/status"
        await async_client.put(url, json={"status": "signed"}, headers=company_headers)
        await async_client.put(url, json={"status": "completed"}, headers=company_headers)
        instructor_id = parties["instructor"]["id"]
        reviewee_id = parties["instructor"]["userId"]

        for rating in (5, 4, 3):
            response = await async_client.post(
                "/api/reviews",
                json={"contractId": contract["id"], "revieweeId": reviewee_id, "rating": rating},
                headers=company_headers,
            )
            assert response.status_code == status.HTTP_201_CREATED
            assert response.json()["reviewerId"] == "company-user"

        profile = (await async_client.get(f"/api/instructors/{instructor_id}")).json()
        assert Decimal(profile["rating"]) == Decimal("4.00")

        await async_client.post(
            "/api/reviews",
            json={"contractId": contract["id"], "revieweeId": reviewee_id, "rating": 2},
            headers=company_headers,
        )
        profile = (await async_client.get(f"/api/instructors/{instructor_id}")).json()
        assert Decimal(profile["rating"]) == Decimal("3.50")

        reviews = (await async_client.get(f"/api/reviews/instructor/{instructor_id}")).json()
        assert [review["rating"] for review in reviews] == [2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_review_requires_completed_contract(
        self, async_client: AsyncClient, company_headers: dict[str, str], parties: dict
    ) -> None:
        contract = (await _create_contract(async_client, company_headers, parties)).json()

        response = await async_client.post(
            "/api/reviews",
            json={
                "contractId": contract["id"],
                "revieweeId": parties["instructor"]["userId"],
                "rating": 5,
            },
            headers=company_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_rating_range_validated(
        self, async_client: AsyncClient, company_headers: dict[str, str], parties: dict
    ) -> None:
        response = await async_client.post(
            "/api/reviews",
            json={"contractId": "any", "revieweeId": "instructor-user", "rating": 6},
            headers=company_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"].startswith("rating")

    @pytest.mark.asyncio
    async def test_reviews_of_unknown_instructor(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/reviews/instructor/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
