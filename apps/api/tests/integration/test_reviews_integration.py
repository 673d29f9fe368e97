"""Integration tests for reviews, review reports and report moderation."""

import pytest
from litestar.status_codes import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_204_NO_CONTENT,
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_409_CONFLICT,
)

pytestmark = [
    pytest.mark.integration,
    pytest.mark.domain_reviews,
]


async def _review(client, court_id, rating=4, text="Nice courts"):
    response = await client.post(f"/api/tennis-courts/{court_id}/reviews", json={"rating": rating, "text": text})
    assert response.status_code == HTTP_201_CREATED, response.text
    return response.json()


async def test_review_updates_court_rating(alice_client, bob_client, unauthenticated_client, fresh_court):
    await _review(alice_client, fresh_court, rating=5)
    await _review(bob_client, fresh_court, rating=3)

    courts = (await unauthenticated_client.get("/api/courts")).json()
    court = next(item for item in courts if item["id"] == str(fresh_court))
    assert court["reviewCount"] == 2
    assert court["averageRating"] == 4.0

    reviews = (await unauthenticated_client.get(f"/api/tennis-courts/{fresh_court}/reviews")).json()
    assert {review["userId"] for review in reviews} == {"user_alice", "user_bob"}


async def test_rating_out_of_range(alice_client, fresh_court):
    response = await alice_client.post(f"/api/tennis-courts/{fresh_court}/reviews", json={"rating": 6})

    assert response.status_code == HTTP_400_BAD_REQUEST


async def test_only_author_edits_and_deletes(alice_client, bob_client, fresh_court):
    review = await _review(alice_client, fresh_court)
    url = f"/api/tennis-courts/{fresh_court}/reviews/{review['id']}"

    assert (await bob_client.put(url, json={"rating": 1})).status_code == HTTP_403_FORBIDDEN

    updated = await alice_client.put(url, json={"rating": 2, "text": "Nets are torn"})
    assert updated.status_code == HTTP_200_OK
    assert updated.json()["rating"] == 2

    assert (await alice_client.delete(url)).status_code == HTTP_204_NO_CONTENT


async def test_report_then_delete_review(alice_client, bob_client, test_client, fresh_court):
    review = await _review(alice_client, fresh_court, text="Rude words")
    report_url = f"/api/tennis-courts/{fresh_court}/reviews/{review['id']}/report"

    report = await bob_client.post(report_url, json={"reason": "Offensive"})
    assert report.status_code == HTTP_201_CREATED
    assert (await bob_client.post(report_url, json={"reason": "Again"})).status_code == HTTP_409_CONFLICT

    pending = (await test_client.get("/api/admin/reports")).json()
    assert report.json()["id"] in {item["id"] for item in pending}

    action = await test_client.post(
        "/api/admin/reports",
        json={"reportId": report.json()["id"], "action": "delete_review", "resolutionNote": "Abusive"},
    )
    assert action.status_code == HTTP_200_OK
    assert action.json()["success"] is True

    reviews = (await alice_client.get(f"/api/tennis-courts/{fresh_court}/reviews")).json()
    assert review["id"] not in {item["id"] for item in reviews}
