"""
Shared pytest fixtures: a small seeded SQLite catalog.
"""
import os

# Keep test runs from writing api.log into the working directory
os.environ.setdefault("LOG_FILE", "")

import pytest

from properties_api.config import config
from properties_api.database import db_connect, db_init, insert_property


SAMPLE_PROPERTIES = [
    {
        "id": "p1",
        "title": "Marina View Apartment",
        "description": "Bright two bedroom unit with sea view",
        "price": 1_200_000,
        "bedrooms": 2,
        "bathrooms": 2,
        "area_value": 1250,
        "location": "Dubai Marina",
        "property_type": "Apartment",
        "features": ["Balcony", "Walk-in Closet"],
        "amenities": ["Swimming Pool", "Gym/Fitness Center"],
        "is_featured": True,
        "display_order": 1,
        "created_at": "2024-01-01T00:00:00+00:00",
        "images": [
            {"image_url": "/img/p1-b.jpg", "image_alt": "Bedroom", "order": 1},
            {"image_url": "/img/p1-a.jpg", "image_alt": "Living room", "order": 0},
        ],
    },
    {
        "id": "p2",
        "title": "Downtown Studio",
        "description": "Compact studio next to the metro",
        "price": 650_000,
        "bedrooms": 0,
        "bathrooms": 1,
        "area_value": 480,
        "location": "Downtown Dubai",
        "property_type": "Apartment",
        "amenities": ["Gym/Fitness Center"],
        "is_hot_property": True,
        "display_order": 2,
        "created_at": "2024-03-01T00:00:00+00:00",
    },
    {
        "id": "p3",
        "title": "Palm Villa",
        "description": "Beachfront villa with private garden",
        "price": 8_500_000,
        "bedrooms": 5,
        "bathrooms": 6,
        "area_value": 7000,
        "location": "Palm Jumeirah",
        "property_type": "Villa",
        "features": ["Smart Home System"],
        "amenities": ["Swimming Pool", "Garden"],
        "is_featured": True,
        "is_hot_property": True,
        "display_order": 3,
        "created_at": "2024-02-01T00:00:00+00:00",
    },
    {
        "id": "p4",
        "title": "Marina Penthouse",
        "description": "Top floor penthouse",
        "price": 4_750_000,
        "bedrooms": 3,
        "bathrooms": 4,
        "area_value": 3200,
        "location": "Dubai Marina",
        "property_type": "Penthouse",
        "display_order": 4,
        "created_at": "2024-05-01T00:00:00+00:00",
    },
    {
        "id": "p5",
        "title": "JVC Townhouse",
        "description": "Family townhouse close to schools",
        "price": 1_800_000,
        "bedrooms": 3,
        "bathrooms": 3,
        "area_value": 2100,
        "location": "Jumeirah Village Circle",
        "property_type": "Townhouse",
        "display_order": 5,
        "created_at": "2024-04-01T00:00:00+00:00",
    },
    {
        "id": "p6",
        "title": "Old Marina Flat",
        "price": 100_000,
        "bedrooms": 1,
        "bathrooms": 1,
        "location": "Dubai Marina",
        "property_type": "Apartment",
        "is_deleted": True,
        "display_order": 6,
    },
]


def seed_catalog(path, properties=SAMPLE_PROPERTIES):
    conn = db_connect(str(path))
    try:
        db_init(conn)
        for data in properties:
            insert_property(conn, data)
    finally:
        conn.close()


@pytest.fixture
def catalog_db(tmp_path, monkeypatch):
    """Seeded database file; config.DB_PATH points at it for the test."""
    path = tmp_path / "properties.db"
    seed_catalog(path)
    monkeypatch.setattr(config, "DB_PATH", str(path))
    return path


@pytest.fixture
def empty_db(tmp_path, monkeypatch):
    path = tmp_path / "empty.db"
    seed_catalog(path, [])
    monkeypatch.setattr(config, "DB_PATH", str(path))
    return path
