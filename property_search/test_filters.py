#!/usr/bin/env python3
"""
Tests for the filter state store and URL seeding.
"""
import pytest

from property_search.client import PropertiesAPIError
from property_search.filters import FilterStore, criteria_from_params, default_criteria
from property_search.models import FilterCriteria, PriceBound
from property_search.price_bounds import PriceBoundResolver
from property_search.query import build_query


class FakePriceClient:
    def __init__(self, data=None, error=None):
        self.data = data or {"min_price": 120_000, "max_price": 1_950_000, "total_properties": 9}
        self.error = error
        self.calls = 0

    async def get_price_range(self):
        self.calls += 1
        if self.error:
            raise PropertiesAPIError(self.error, 500)
        return self.data


async def initialized_store(url_params=None, client=None):
    store = FilterStore()
    await store.initialize(PriceBoundResolver(client or FakePriceClient()), url_params)
    return store


def test_criteria_from_params():
    partial = criteria_from_params({
        "location": "Dubai Marina, Palm Jumeirah",
        "bedrooms": ["2,3", "4"],
        "search": "  sea view ",
        "unknown": "ignored",
    })
    assert partial == {
        "selected_locations": ("Dubai Marina", "Palm Jumeirah"),
        "bedrooms": ("2", "3"),
        "search": "sea view",
    }


def test_criteria_from_params_lone_price_borrows_bound():
    bound = PriceBound(100_000, 2_000_000)
    assert criteria_from_params({"min_price": "500000"}, bound)["price_range"] == (500_000, 2_000_000)
    assert criteria_from_params({"max_price": "900000"}, bound)["price_range"] == (100_000, 900_000)


def test_criteria_from_params_lone_price_outside_bound_stays_ordered():
    bound = PriceBound(100_000, 2_000_000)
    assert criteria_from_params({"min_price": "5000000"}, bound)["price_range"] == (5_000_000, 5_000_000)
    assert criteria_from_params({"max_price": "50000"}, bound)["price_range"] == (50_000, 50_000)
    assert criteria_from_params({"max_price": "3000000"}, bound)["price_range"] == (100_000, 3_000_000)


def test_criteria_from_params_invalid_price_is_ignored():
    assert criteria_from_params({"min_price": "cheap"}) == {}


def test_merge_returns_new_object():
    base = FilterCriteria()
    merged = base.merge({"bedrooms": ["2", "3"], "selected_types": "Villa,Penthouse"})
    assert base.bedrooms == ()
    assert merged.bedrooms == ("2", "3")
    assert merged.selected_types == ("Villa", "Penthouse")
    assert not merged.is_empty()
    assert base.is_empty()


def test_merge_rejects_unknown_field():
    with pytest.raises(TypeError):
        FilterCriteria().merge({"colour": "blue"})


@pytest.mark.asyncio
async def test_initialize_seeds_bound_then_url():
    store = await initialized_store({"location": "Dubai Marina", "min_price": "500000"})

    assert store.is_initialized
    assert store.price_bound.as_range() == (100_000, 2_000_000)
    assert store.defaults == default_criteria(store.price_bound)
    assert store.filters.selected_locations == ("Dubai Marina",)
    assert store.filters.price_range == (500_000, 2_000_000)


@pytest.mark.asyncio
async def test_initialize_without_url_spans_bound():
    store = await initialized_store()
    assert store.filters.price_range == (100_000, 2_000_000)
    assert store.to_query_string() == ""
    assert store.slider_bounds() == (100_000, 2_000_000)


@pytest.mark.asyncio
async def test_initialize_runs_once():
    client = FakePriceClient()
    store = FilterStore()
    resolver = PriceBoundResolver(client)
    await store.initialize(resolver, {"search": "first"})
    await store.initialize(resolver, {"search": "second"})

    assert store.filters.search == "first"
    assert client.calls == 1


@pytest.mark.asyncio
async def test_initialize_with_failed_price_read():
    store = await initialized_store(client=FakePriceClient(error="Failed to fetch price range"))
    assert store.is_initialized
    assert store.price_bound.as_range() == (0, 20_000_000)


@pytest.mark.asyncio
async def test_update_filters_does_not_clamp():
    store = await initialized_store()
    before = store.filters
    store.update_filters({"price_range": (5_000_000, 1_000_000)}, search="villa")

    assert store.filters is not before
    assert store.filters.price_range == (5_000_000, 1_000_000)
    assert store.filters.search == "villa"
    assert store.slider_bounds() == (100_000, 2_000_000)


@pytest.mark.asyncio
async def test_widened_price_range_moves_slider():
    store = await initialized_store()
    store.update_filters(price_range=(100_000, 3_000_000))
    assert store.slider_bounds() == (100_000, 3_000_000)


@pytest.mark.asyncio
async def test_clear_filters_restores_baseline():
    store = await initialized_store()
    baseline = build_query(store.filters, store.price_bound, page=1, page_size=6, sort="featured")

    store.update_filters(
        bedrooms=("2",), selected_amenities=("Gym/Fitness Center",),
        price_range=(300_000, 900_000), search="marina",
    )
    assert build_query(store.filters, store.price_bound, page=1, page_size=6, sort="featured") != baseline

    store.clear_filters()
    assert store.filters == store.defaults
    assert build_query(store.filters, store.price_bound, page=1, page_size=6, sort="featured") == baseline


@pytest.mark.asyncio
async def test_url_mirror():
    store = await initialized_store()
    store.update_filters(selected_types=("Villa",), price_range=(500_000, 1_500_000))

    assert store.to_url_params() == {
        "min_price": "500000",
        "max_price": "1500000",
        "property_type": "Villa",
    }
    assert store.to_query_string() == "min_price=500000&max_price=1500000&property_type=Villa"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
