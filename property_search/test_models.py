#!/usr/bin/env python3
"""
Tests for the property adapter, result pages and text helpers.
"""
import pytest

from property_search.models import FilterCriteria, Property, ResultPage
from property_search.utils import (
    clean_text,
    format_large_number,
    format_price,
    parse_area,
    parse_price,
    split_csv,
)


def test_property_from_record():
    prop = Property.from_api({
        "id": "p1",
        "title": "Marina View Apartment",
        "price": 1_200_000.0,
        "bedrooms": 2,
        "bathrooms": 2,
        "area_value": 1250,
        "area_unit": "sq ft",
        "location": "Dubai Marina",
        "property_type": "Apartment",
        "features": ["Balcony"],
        "amenities": '["Swimming Pool", "Gym/Fitness Center"]',
        "is_featured": True,
        "is_hot_property": False,
        "images": [
            {"id": "i2", "image_url": "/b.jpg", "order": 1},
            {"id": "i1", "image_url": "/a.jpg", "image_alt": "Living room", "order": 0},
        ],
    })

    assert prop.price == 1_200_000.0
    assert prop.property_type == "Apartment"
    assert prop.features == ("Balcony",)
    assert prop.amenities == ("Swimming Pool", "Gym/Fitness Center")
    assert prop.is_featured
    assert prop.main_image == "/a.jpg"
    assert [image.id for image in prop.images] == ["i1", "i2"]


def test_property_from_display_shape():
    prop = Property.from_api({
        "id": 7,
        "title": "Palm Villa",
        "price": "AED 8.5M",
        "location": "Palm Jumeirah",
        "type": "Villa",
        "bedrooms": 5,
        "bathrooms": 6,
        "area": "7,000 sq ft",
        "image": "/villa.jpg",
        "featured": True,
    })

    assert prop.id == "7"
    assert prop.price == 8_500_000.0
    assert prop.property_type == "Villa"
    assert (prop.area_value, prop.area_unit) == (7000.0, "sq ft")
    assert prop.main_image == "/villa.jpg"
    assert prop.is_featured


def test_property_without_images_uses_placeholder():
    prop = Property.from_api({"id": "x", "title": "Plot", "price": 1, "property_type": "Land"})
    assert prop.main_image == "/placeholder.svg"


def test_result_page_from_api():
    page = ResultPage.from_api({
        "data": [{"id": "a", "title": "A", "price": 1, "property_type": "Villa"}],
        "pagination": {"limit": 6, "offset": 6, "total": 7},
    })
    assert page.total == 7
    assert page.offset == 6
    assert page.page_count() == 2
    assert page.page_count(3) == 3
    assert not page.is_empty
    assert ResultPage.from_api({"data": []}).is_empty


def test_filter_criteria_as_dict_is_order_insensitive():
    a = FilterCriteria(selected_features=("b", "a", "a"))
    assert a.as_dict()["selected_features"] == ["a", "b"]


def test_price_parsing():
    assert parse_price("AED 1.5M") == (1_500_000.0, "AED")
    assert parse_price("$15,000") == (15000.0, "USD")
    assert parse_price("750K") == (750_000.0, None)
    assert parse_price(420000) == (420000.0, None)
    assert parse_price("") == (None, None)
    assert parse_price(None) == (None, None)


def test_area_parsing():
    assert parse_area("1,200 sq ft") == (1200.0, "sq ft")
    assert parse_area("85 sqm") == (85.0, "sq m")
    assert parse_area(None) == (0.0, "sq ft")


def test_number_formatting():
    assert format_large_number(1_500_000) == "1.5M"
    assert format_large_number(2_000) == "2K"
    assert format_large_number(999) == "999"
    assert format_price(20_000_000) == "AED 20M"


def test_text_helpers():
    assert clean_text("  Sea   view \n") == "Sea view"
    assert clean_text(None) == ""
    assert split_csv(" 2, 3 ,,5+ ") == ["2", "3", "5+"]
    assert split_csv(["Villa,Penthouse", "Land"]) == ["Villa", "Penthouse"]
    assert split_csv(None) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
