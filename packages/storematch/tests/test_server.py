"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from storematch.server import create_app
from storematch.types import CandidateRecord


@pytest.fixture
def client() -> TestClient:
    loaded = [
        CandidateRecord(name="Acme Storage - 456 Oak Ave", year_built="2005", square_footage="52000"),
        CandidateRecord(name="Beta Storage", shipping_address="{'street': '12 Elm St'}"),
    ]
    return TestClient(create_app(candidates=loaded))


def test_health(client: TestClient):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"healthy": True, "candidates": 2}


def test_normalize(client: TestClient):
    response = client.get("/api/normalize", params={"address": "123 North Main Street"})

    assert response.json()["normalized"] == "123 n main st"


def test_matches_against_loaded_candidates(client: TestClient):
    response = client.post(
        "/api/matches",
        json={"query": {"store_name": "Acme", "street": "456 Oak Avenue"}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body[0]["candidate_name"] == "Acme Storage - 456 Oak Ave"
    assert body[0]["address_score"] == 1.0
    assert body[0]["year_built"] == 2005


def test_matches_with_request_candidates(client: TestClient):
    response = client.post(
        "/api/matches",
        json={
            "query": {"store_name": "Gamma", "street": "9 Harbor Way"},
            "candidates": [
                {"name": "Gamma Self Storage", "shipping_address": {"street": "9 Harbor Way"}},
                {"name": "Gamma - Downtown"},
            ],
        },
    )

    body = response.json()
    assert len(body) == 1
    assert body[0]["brand_name"] == "Gamma Self Storage"


def test_matches_empty_result(client: TestClient):
    response = client.post(
        "/api/matches",
        json={"query": {"street": "zzzzzzzzzzzzzzzz"}, "candidates": []},
    )

    assert response.status_code == 200
    assert response.json() == []


def test_blank_street_rejected(client: TestClient):
    response = client.post("/api/matches", json={"query": {"street": "  "}})

    assert response.status_code == 400


def test_missing_street_is_validation_error(client: TestClient):
    response = client.post("/api/matches", json={"query": {"store_name": "Acme"}})

    assert response.status_code == 422


def test_metadata_found(client: TestClient):
    response = client.post(
        "/api/metadata",
        json={"query": {"store_name": "Acme", "street": "456 Oak Avenue"}},
    )

    assert response.status_code == 200
    assert response.json() == {
        "year_built": 2005,
        "square_footage": 52000.0,
        "source_name": "Acme Storage - 456 Oak Ave",
        "combined_score": pytest.approx(0.4 * (4 / 12) + 0.6),
    }


def test_metadata_not_found(client: TestClient):
    # Beta matches on address but carries no metadata
    response = client.post(
        "/api/metadata",
        json={
            "query": {"store_name": "Beta Storage", "street": "12 Elm Street"},
            "candidates": [{"name": "Beta Storage", "shipping_address": "{'street': '12 Elm St'}"}],
        },
    )

    assert response.status_code == 404


def test_matches_accept_camel_case_fields(client: TestClient):
    response = client.post(
        "/api/matches",
        json={
            "query": {"storeName": "Acme", "street": "456 Oak Avenue", "postalCode": "94000"},
            "candidates": [
                {"name": "Acme", "shippingAddress": "{'street': '456 Oak Ave'}", "yearBuilt": "2005"},
            ],
        },
    )

    body = response.json()
    assert len(body) == 1
    assert body[0]["address_score"] == 1.0
    assert body[0]["name_score"] == 1.0
    assert body[0]["year_built"] == 2005


def test_metadata_accepts_salesforce_columns(client: TestClient):
    response = client.post(
        "/api/metadata",
        json={
            "query": {"store_name": "Acme", "address": "456 Oak Avenue"},
            "candidates": [
                {
                    "Name": "Acme Storage",
                    "ShippingAddress": {"street": "456 Oak Ave", "city": "Metro"},
                    "Year_Built__c": 2005,
                    "Net_RSF__c": "52,000",
                },
            ],
        },
    )

    assert response.status_code == 200
    assert response.json()["source_name"] == "Acme Storage"
    assert response.json()["year_built"] == 2005
    assert response.json()["square_footage"] == 52000.0


def test_matches_report_raw_values(client: TestClient):
    response = client.post(
        "/api/matches",
        json={
            "query": {"store_name": "Acme", "street": "456 Oak Avenue"},
            "candidates": [
                {"name": "Acme", "shipping_address": {"street": "456 Oak Ave"},
                 "year_built": "1850", "square_footage": "n/a"},
            ],
        },
    )

    match = response.json()[0]
    assert match["raw_year_built"] == "1850"
    assert match["year_built"] is None
    assert match["raw_square_footage"] == "n/a"
    assert match["square_footage"] is None
