"""HTTP tests for the FastAPI application."""

import pytest
from fastapi.testclient import TestClient

from main import app

client = TestClient(app)

FAMILY = [
    {"id": "a", "fullName": "Aisyah", "relationship": "wife"},
    {"id": "b", "fullName": "Ali", "relationship": "son"},
    {"id": "c", "fullName": "Amin", "relationship": "son"},
    {"id": "d", "fullName": "Zaid", "relationship": "cousin"},
]


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_relationships():
    response = client.get("/relationships")
    assert response.status_code == 200
    labels = response.json()
    assert "maternalbrother" in labels
    assert "cousin" not in labels


def test_partition():
    response = client.post("/relationships/partition",
                           json={"familyMembers": FAMILY, "ownerGender": "male"})
    assert response.status_code == 200
    body = response.json()
    assert [m["id"] for m in body["eligible"]] == ["a", "b", "c"]
    assert [m["id"] for m in body["non_eligible"]] == ["d"]


def test_references():
    response = client.get("/references")
    assert response.status_code == 200
    refs = response.json()
    assert refs
    assert {"title", "reference", "text", "explanation"} <= set(refs[0])


def test_calculate():
    response = client.post("/calculate", json={
        "familyMembers": FAMILY,
        "assetValue": 160000,
        "ownerGender": "male",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "asabah"
    shares = {r["heir_id"]: r for r in body["results"]}
    assert shares["a"]["fraction"] == "1/8"
    assert shares["a"]["share"] == pytest.approx(20000)
    assert shares["b"]["percentage"] == pytest.approx(43.75)
    assert shares["c"]["share"] == pytest.approx(70000)
    assert "d" not in shares
    assert body["total_percentage"] == pytest.approx(100)


def test_calculate_snake_case_payload():
    response = client.post("/calculate", json={
        "family_members": [{"id": "h", "full_name": "Hassan", "relationship": "husband"}],
        "asset_value": 100000,
        "owner_gender": "female",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["results"][0]["percentage"] == pytest.approx(50)
    assert body["status"] == "undistributed"


@pytest.mark.parametrize("payload", [
    {"familyMembers": FAMILY, "assetValue": -5, "ownerGender": "male"},
    {"familyMembers": FAMILY, "assetValue": 100, "ownerGender": "other"},
    {"familyMembers": [{"id": "x", "relationship": "son"}], "assetValue": 100},
])
def test_calculate_rejects_invalid_input(payload):
    assert client.post("/calculate", json=payload).status_code == 422


def test_estate():
    response = client.post("/calculate/estate", json={
        "familyMembers": FAMILY,
        "ownerGender": "male",
        "assets": [{"id": "house", "name": "House", "value": 800}, {"id": "car", "name": "Car", "value": 800}],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["total_value"] == 1600
    totals = {t["heir_id"]: t["total_share"] for t in body["heir_totals"]}
    assert totals["a"] == pytest.approx(200)


def test_estate_duplicate_asset_is_bad_request():
    response = client.post("/calculate/estate", json={
        "familyMembers": FAMILY,
        "assets": [{"id": "x", "name": "One", "value": 1}, {"id": "x", "name": "Two", "value": 1}],
    })
    assert response.status_code == 400
    assert "Duplicate asset id" in response.json()["detail"]
