"""Integration tests for admin access, bans and the public court list."""

import pytest
from litestar.status_codes import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_204_NO_CONTENT,
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
)

RIVERSIDE_COURT_ID = "00000000-0000-0000-0000-000000000001"
OAK_HILLS_COURT_ID = "00000000-0000-0000-0000-000000000003"

pytestmark = [
    pytest.mark.integration,
]


@pytest.mark.domain_courts
class TestPublicCourts:
    async def test_list_needs_no_sign_in(self, unauthenticated_client):
        response = await unauthenticated_client.get("/api/courts")

        assert response.status_code == HTTP_200_OK
        ids = {court["id"] for court in response.json()}
        assert {str(RIVERSIDE_COURT_ID), str(OAK_HILLS_COURT_ID)} <= ids
        assert all("averageRating" in court for court in response.json())

    async def test_get_court(self, unauthenticated_client):
        response = await unauthenticated_client.get(f"/api/tennis-courts/{OAK_HILLS_COURT_ID}")

        assert response.status_code == HTTP_200_OK
        assert response.json()["surface"] == "Clay"

    async def test_missing_court(self, unauthenticated_client):
        response = await unauthenticated_client.get("/api/tennis-courts/6b1f1d38-6a5e-4c52-9b1f-0c8bd9a0f3aa")

        assert response.status_code == HTTP_404_NOT_FOUND
        assert response.json()["extra"]["category"] == "not_found"


@pytest.mark.domain_auth
class TestAdminAccess:
    async def test_admin_check(self, test_client, alice_client):
        assert (await test_client.get("/api/admin/check")).json() == {"isAdmin": True}
        assert (await alice_client.get("/api/admin/check")).json() == {"isAdmin": False}

    async def test_non_admin_is_forbidden(self, alice_client):
        response = await alice_client.get("/api/admin/reports")

        assert response.status_code == HTTP_403_FORBIDDEN

    async def test_anonymous_admin_requires_sign_in(self, unauthenticated_client):
        response = await unauthenticated_client.get("/api/admin/check")

        assert response.status_code == HTTP_401_UNAUTHORIZED

    async def test_invalid_key(self, client_for):
        async with client_for("not-a-key") as client:
            response = await client.get("/api/user/ban-status")

        assert response.status_code == HTTP_401_UNAUTHORIZED


@pytest.mark.domain_courts
class TestAdminCourts:
    async def test_create_update_delete(self, test_client):
        created = await test_client.post(
            "/api/admin/courts",
            json={"name": "Birch Park", "address": "9 Birch Ln", "numberOfCourts": "0", "lighted": True},
        )
        assert created.status_code == HTTP_201_CREATED, created.text
        court = created.json()
        assert court["numberOfCourts"] is None

        updated = await test_client.put(f"/api/admin/courts/{court['id']}", json={"surface": "Clay"})
        assert updated.status_code == HTTP_200_OK
        assert updated.json()["surface"] == "Clay"
        assert updated.json()["lighted"] is True

        listed = await test_client.get("/api/courts")
        assert court["id"] in {item["id"] for item in listed.json()}

        deleted = await test_client.delete(f"/api/admin/courts/{court['id']}")
        assert deleted.status_code == HTTP_204_NO_CONTENT
        listed = await test_client.get("/api/courts")
        assert court["id"] not in {item["id"] for item in listed.json()}


@pytest.mark.domain_bans
@pytest.mark.usefixtures("clean_suggestions")
class TestBans:
    async def test_suggestion_ban_blocks_submission(self, test_client, carol_client, fresh_court):
        ban = await test_client.post(
            "/api/admin/user-bans",
            json={"userId": "user_carol", "banReason": "Vandalism", "banType": "suggestions"},
        )
        assert ban.status_code == HTTP_201_CREATED, ban.text

        status = (await carol_client.get("/api/user/ban-status")).json()
        assert status["isBanned"] is True
        assert status["categories"] == ["suggestions"]

        response = await carol_client.post(
            f"/api/tennis-courts/{fresh_court}/edit-suggestions",
            json={"reason": "x", "suggestedSurface": "Clay"},
        )
        assert response.status_code == HTTP_403_FORBIDDEN
        assert response.json()["extra"]["category"] == "banned"

        removed = await test_client.delete("/api/admin/user-bans", params={"userId": "user_carol"})
        assert removed.status_code == HTTP_204_NO_CONTENT
        assert (await carol_client.get("/api/user/ban-status")).json()["isBanned"] is False

    async def test_admin_cannot_ban_self(self, test_client):
        response = await test_client.post(
            "/api/admin/user-bans",
            json={"userId": "user_admin", "banReason": "Oops", "banType": "full"},
        )

        assert response.status_code == HTTP_400_BAD_REQUEST

    async def test_unknown_ban_type(self, test_client):
        response = await test_client.post(
            "/api/admin/user-bans",
            json={"userId": "user_carol", "banReason": "Spam", "banType": "everything"},
        )

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["extra"]["field"] == "banType"
