#!/usr/bin/env python3
"""
API endpoint tests against a seeded temporary catalog.
"""
import io

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from properties_api.main import app


@pytest.fixture
def client(catalog_db):
    return TestClient(app)


def response_ids(response):
    return [item["id"] for item in response.json()["data"]]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["total_properties"] == 5


def test_list_defaults(client):
    response = client.get("/api/properties")
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"limit": 6, "offset": 0, "total": 5}
    assert response_ids(response) == ["p1", "p2", "p3", "p4", "p5"]


def test_list_filters_and_total(client):
    response = client.get("/api/properties", params={
        "location": "Dubai Marina,Downtown Dubai",
        "bedrooms": "Studio,2",
        "limit": 1,
    })
    body = response.json()
    assert body["pagination"]["total"] == 2
    assert response_ids(response) == ["p1"]


def test_list_sort_and_offset(client):
    response = client.get("/api/properties", params={
        "sort_by": "price", "sort_order": "desc", "limit": 2, "offset": 1,
    })
    assert response_ids(response) == ["p4", "p5"]


def test_list_flags(client):
    response = client.get("/api/properties", params={"is_hot_property": "true"})
    assert response_ids(response) == ["p2", "p3"]


def test_list_rejects_bad_sort_order(client):
    assert client.get("/api/properties", params={"sort_order": "sideways"}).status_code == 422


def test_list_rejects_bad_limit(client):
    assert client.get("/api/properties", params={"limit": 0}).status_code == 422
    assert client.get("/api/properties", params={"offset": -1}).status_code == 422


def test_price_range(client):
    response = client.get("/api/properties/price-range")
    assert response.status_code == 200
    assert response.json() == {"min_price": 650000.0, "max_price": 8500000.0, "total_properties": 5}


def test_similar(client):
    response = client.get("/api/properties/similar", params={"current_property_id": "p1", "limit": 2})
    assert response.status_code == 200
    assert response_ids(response) == ["p2", "p4"]


def test_similar_unknown_property(client):
    response = client.get("/api/properties/similar", params={"current_property_id": "nope"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Property not found"


def test_featured_and_hot(client):
    assert response_ids(client.get("/api/properties/featured")) == ["p1", "p3"]
    assert response_ids(client.get("/api/properties/hot")) == ["p2", "p3"]


def test_property_detail(client):
    response = client.get("/api/properties/p1")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Marina View Apartment"
    assert data["images"][0]["image_url"] == "/img/p1-a.jpg"
    assert "timestamp" in response.json()


def test_deleted_property_detail_is_404(client):
    assert client.get("/api/properties/p6").status_code == 404


def test_stats(client):
    body = client.get("/api/stats").json()
    assert body["total_properties"] == 5
    assert body["by_type"] == {"Apartment": 2, "Penthouse": 1, "Townhouse": 1, "Villa": 1}


def test_filter_options(client):
    response = client.get("/api/stats/options")
    assert response.status_code == 200
    assert response.json()["property_types"] == ["Apartment", "Penthouse", "Townhouse", "Villa"]


def test_export_csv(client):
    response = client.get("/api/export/csv", params={"property_type": "Apartment"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    df = pd.read_csv(io.StringIO(response.text))
    assert list(df["id"]) == ["p1", "p2"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
