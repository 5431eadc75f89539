"""Tests for the admin daily login endpoints."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from joytask.models.daily_login import DailyLoginClaim
from joytask.models.user import User
from joytask.services.daily_login import DailyLoginService
from joytask.utils.security import create_access_token


@pytest_asyncio.fixture
async def claims(test_db: AsyncSession, test_user: User, test_user2: User) -> list[int]:
    """Two consecutive claims for player one and one claim for player two."""
    service = DailyLoginService(test_db, tz=ZoneInfo("UTC"))
    created = [
        await service.claim(test_user.id, now=datetime(2024, 1, 1, 9, tzinfo=timezone.utc)),
        await service.claim(test_user.id, now=datetime(2024, 1, 2, 9, tzinfo=timezone.utc)),
        await service.claim(test_user2.id, now=datetime(2024, 1, 2, 10, tzinfo=timezone.utc)),
    ]
    return [c.id for c in created]


class TestAdminListClaims:
    """Tests for GET /api/v1/admin/daily-logins"""

    @pytest.mark.asyncio
    async def test_list_claims(
        self, test_client: AsyncClient, admin_headers: dict, claims: list[int]
    ):
        response = await test_client.get("/api/v1/admin/daily-logins", headers=admin_headers)

        assert response.status_code == 200
        result = response.json()
        assert result["pagination"] == {"page": 1, "page_size": 20, "total": 3, "total_pages": 1}
        assert [item["id"] for item in result["items"]] == list(reversed(claims))
        assert result["items"][0]["user"]["email"] == "another@example.com"
        assert "created_at" in result["items"][0]

    @pytest.mark.asyncio
    async def test_list_claims_filters(
        self, test_client: AsyncClient, admin_headers: dict, claims: list[int]
    ):
        response = await test_client.get(
            "/api/v1/admin/daily-logins",
            headers=admin_headers,
            params={"day_in_cycle": 2, "search": "player@"},
        )

        assert response.status_code == 200
        result = response.json()
        assert result["pagination"]["total"] == 1
        assert result["items"][0]["id"] == claims[1]

    @pytest.mark.asyncio
    async def test_list_claims_invalid_day(self, test_client: AsyncClient, admin_headers: dict):
        response = await test_client.get(
            "/api/v1/admin/daily-logins",
            headers=admin_headers,
            params={"day_in_cycle": 8},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_claims_requires_admin(
        self, test_client: AsyncClient, auth_headers: dict
    ):
        response = await test_client.get("/api/v1/admin/daily-logins", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_super_admin_allowed(self, test_client: AsyncClient, super_admin_user: User):
        headers = {"Authorization": f"Bearer {create_access_token(super_admin_user.id)}"}

        response = await test_client.get("/api/v1/admin/daily-logins", headers=headers)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_list_claims_unauthorized(self, test_client: AsyncClient):
        response = await test_client.get("/api/v1/admin/daily-logins")

        assert response.status_code == 401


class TestAdminListProgress:
    """Tests for GET /api/v1/admin/daily-logins/progress"""

    @pytest.mark.asyncio
    async def test_list_progress(
        self, test_client: AsyncClient, admin_headers: dict, claims: list[int]
    ):
        response = await test_client.get(
            "/api/v1/admin/daily-logins/progress", headers=admin_headers
        )

        assert response.status_code == 200
        result = response.json()
        assert result["pagination"]["total"] == 2
        by_email = {item["user"]["email"]: item for item in result["items"]}
        assert by_email["player@example.com"]["current_streak"] == 2
        assert by_email["player@example.com"]["current_day_in_cycle"] == 3
        assert by_email["another@example.com"]["current_streak"] == 1


class TestAdminStats:
    """Tests for GET /api/v1/admin/daily-logins/stats"""

    @pytest.mark.asyncio
    async def test_stats(self, test_client: AsyncClient, admin_headers: dict, claims: list[int]):
        response = await test_client.get(
            "/api/v1/admin/daily-logins/stats", headers=admin_headers, params={"days": 7}
        )

        assert response.status_code == 200
        result = response.json()
        assert result["total_claims"] == 3
        assert result["total_points_distributed"] == 10 + 15 + 10
        assert result["jackpot_claims"] == 0
        assert result["day_distribution"] == {"1": 2, "2": 1}
        assert result["max_streak"] == 2
        assert result["period_days"] == 7
        assert result["top_streak_holders"][0]["user"]["email"] == "player@example.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [0, 366])
    async def test_stats_days_validation(
        self, test_client: AsyncClient, admin_headers: dict, days: int
    ):
        response = await test_client.get(
            "/api/v1/admin/daily-logins/stats", headers=admin_headers, params={"days": days}
        )

        assert response.status_code == 422


class TestAdminDeleteClaim:
    """Tests for DELETE /api/v1/admin/daily-logins/{claim_id}"""

    @pytest.mark.asyncio
    async def test_delete_claim(
        self,
        test_client: AsyncClient,
        test_db: AsyncSession,
        admin_headers: dict,
        claims: list[int],
    ):
        response = await test_client.delete(
            f"/api/v1/admin/daily-logins/{claims[0]}", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["success"] is True

        remaining = await test_db.scalar(select(func.count()).select_from(DailyLoginClaim))
        assert remaining == 2

        progress = await test_client.get(
            "/api/v1/admin/daily-logins/progress",
            headers=admin_headers,
            params={"search": "player@"},
        )
        item = progress.json()["items"][0]
        assert item["total_days_claimed"] == 2
        assert item["last_claim_date"] == date(2024, 1, 2).isoformat()

    @pytest.mark.asyncio
    async def test_delete_unknown_claim(self, test_client: AsyncClient, admin_headers: dict):
        response = await test_client.delete(
            "/api/v1/admin/daily-logins/99999", headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CLAIM_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_delete_requires_admin(
        self, test_client: AsyncClient, auth_headers: dict, claims: list[int]
    ):
        response = await test_client.delete(
            f"/api/v1/admin/daily-logins/{claims[0]}", headers=auth_headers
        )

        assert response.status_code == 403
