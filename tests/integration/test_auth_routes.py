"""Integration tests for the current-user endpoints."""

from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.utils import auth_headers, company_payload, instructor_payload


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_missing_token_is_unauthorized(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/auth/user")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"message": "Unauthorized"}

    @pytest.mark.asyncio
    async def test_garbage_token_is_unauthorized(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/api/auth/user", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_second_subject_with_same_email_can_sign_in(
        self, async_client: AsyncClient
    ) -> None:
        first = await async_client.get(
            "/api/auth/user", headers=auth_headers("owner", email="team@example.com")
        )
        second = await async_client.get(
            "/api/auth/user", headers=auth_headers("other", email="team@example.com")
        )

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_200_OK
        assert second.json()["id"] == "other"
        assert second.json()["email"] is None

    @pytest.mark.asyncio
    async def test_first_login_creates_user_without_profile(
        self, async_client: AsyncClient
    ) -> None:
        response = await async_client.get(
            "/api/auth/user", headers=auth_headers("new-user", email="new@example.com")
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == "new-user"
        assert data["email"] == "new@example.com"
        assert data["userType"] is None
        assert data["profile"] == {"kind": "none"}

    @pytest.mark.asyncio
    async def test_profile_is_tagged_by_kind(
        self, async_client: AsyncClient, company_headers: dict[str, str]
    ) -> None:
        await async_client.put(
            "/api/user/setup", json={"userType": "company"}, headers=company_headers
        )
        await async_client.post("/api/companies", json=company_payload(), headers=company_headers)

        response = await async_client.get("/api/auth/user", headers=company_headers)

        data = response.json()
        assert data["userType"] == "company"
        assert data["profile"]["kind"] == "company"
        assert data["profile"]["data"]["companyName"] == "Acme Corp"

    @pytest.mark.asyncio
    async def test_instructor_profile_kind(
        self, async_client: AsyncClient, instructor_headers: dict[str, str]
    ) -> None:
        await async_client.put(
            "/api/user/setup", json={"userType": "instructor"}, headers=instructor_headers
        )
        await async_client.post(
            "/api/instructors", json=instructor_payload(), headers=instructor_headers
        )

        response = await async_client.get("/api/auth/user", headers=instructor_headers)

        profile = response.json()["profile"]
        assert profile["kind"] == "instructor"
        assert profile["data"]["isVerified"] is False
        assert profile["data"]["verificationStatus"] == "pending"


class TestUserSetup:
    @pytest.mark.asyncio
    async def test_user_type_cannot_change(
        self, async_client: AsyncClient, company_headers: dict[str, str]
    ) -> None:
        first = await async_client.put(
            "/api/user/setup", json={"userType": "company"}, headers=company_headers
        )
        repeat = await async_client.put(
            "/api/user/setup", json={"userType": "company"}, headers=company_headers
        )
        switch = await async_client.put(
            "/api/user/setup", json={"userType": "instructor"}, headers=company_headers
        )

        assert first.status_code == status.HTTP_200_OK
        assert first.json()["userType"] == "company"
        assert repeat.status_code == status.HTTP_200_OK
        assert switch.status_code == status.HTTP_400_BAD_REQUEST
        assert "already set" in switch.json()["message"]

    @pytest.mark.asyncio
    async def test_unknown_user_type_is_bad_request(
        self, async_client: AsyncClient, company_headers: dict[str, str]
    ) -> None:
        response = await async_client.put(
            "/api/user/setup", json={"userType": "admin"}, headers=company_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"].startswith("userType")
