"""
Query construction: turns filter criteria, pagination and sort selection
into the parameters sent to the listing endpoint and mirrored in the URL.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlencode

from .config import config
from .models import FilterCriteria, PriceBound, page_count
from .utils import first_value, split_csv

# sort key -> (sort_by, sort_order)
SORT_OPTIONS = {
    "featured": ("featured", "desc"),
    "price-low": ("price", "asc"),
    "price-high": ("price", "desc"),
    "newest": ("created_at", "desc"),
    "area": ("area_value", "desc"),
    "bedrooms": ("bedrooms", "desc"),
    "title": ("title", "asc"),
}
DEFAULT_SORT = ("display_order", "asc")

# FilterCriteria field -> query parameter
SELECTION_PARAMS = (
    ("selected_locations", "location"),
    ("selected_types", "property_type"),
    ("bedrooms", "bedrooms"),
    ("bathrooms", "bathrooms"),
    ("selected_features", "features"),
    ("selected_amenities", "amenities"),
)

# Parameters a deep link may pin for a single request
URL_OVERRIDE_KEYS = (
    "search", "min_price", "max_price", "location", "property_type", "bedrooms",
    "bathrooms", "features", "amenities", "is_featured", "is_hot_property",
)

# Canonical key order of every serialized query
PARAM_ORDER = ("limit", "offset", "sort_by", "sort_order") + URL_OVERRIDE_KEYS

LIST_PARAMS = {"location", "property_type", "bedrooms", "bathrooms", "features", "amenities"}


@dataclass(frozen=True)
class QueryParameters:
    """Immutable, canonically ordered query for one listing request."""

    items: Tuple[Tuple[str, str], ...] = ()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for name, value in self.items:
            if name == key:
                return value
        return default

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self.items)

    def keys(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.items)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.items)

    def to_query_string(self) -> str:
        return urlencode(self.items, safe=",")


def sort_params(sort: Optional[str]) -> Tuple[str, str]:
    """Map a sort key to (sort_by, sort_order); unknown keys use display order."""
    return SORT_OPTIONS.get(sort or "", DEFAULT_SORT)


def slider_bounds(price_range: Optional[Tuple[int, int]], bound: PriceBound) -> Tuple[int, int]:
    """The PriceBound widened so the current price range fits inside it."""
    low, high = bound.as_range()
    if price_range is None:
        return (low, high)
    return (min(low, price_range[0]), max(high, price_range[1]))


def _join(values) -> str:
    return ",".join(sorted({v.strip() for v in values if v and v.strip()}))


def price_params(criteria: FilterCriteria, bound: Optional[PriceBound]) -> Dict[str, str]:
    """
    ``min_price``/``max_price`` for the criteria, or nothing when the range
    equals the resolved PriceBound. A range differing on either side sends
    both keys.
    """
    if criteria.price_range is None:
        return {}
    low, high = criteria.price_range
    if bound is not None and (low, high) == bound.as_range():
        return {}
    return {"min_price": str(int(low)), "max_price": str(int(high))}


def filter_params(criteria: FilterCriteria, bound: Optional[PriceBound]) -> Dict[str, str]:
    """Serialized filter dimensions; unconstrained dimensions are left out."""
    params: Dict[str, str] = {}

    search = criteria.search.strip()
    if search:
        params["search"] = search

    params.update(price_params(criteria, bound))

    for field_name, param in SELECTION_PARAMS:
        joined = _join(getattr(criteria, field_name))
        if joined:
            params[param] = joined

    return params


def url_overrides(url_params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Non-empty deep-link parameters that win over the filter store."""
    overrides: Dict[str, str] = {}
    for key in URL_OVERRIDE_KEYS:
        value = first_value((url_params or {}).get(key))
        if value is None or not str(value).strip():
            continue
        if key in LIST_PARAMS:
            overrides[key] = ",".join(split_csv(value))
        else:
            overrides[key] = str(value).strip()
    return overrides


def build_query(criteria: FilterCriteria, bound: Optional[PriceBound] = None, page: int = 1,
                page_size: int = config.PAGE_SIZE, sort: Optional[str] = None,
                url_params: Optional[Mapping[str, Any]] = None) -> QueryParameters:
    """
    Build the listing query for one request.

    Pure: identical inputs always produce identical QueryParameters.
    """
    page = max(1, int(page))
    sort_by, sort_order = sort_params(sort)

    values = {
        "limit": str(page_size),
        "offset": str((page - 1) * page_size),
        "sort_by": sort_by,
        "sort_order": sort_order,
    }
    values.update(filter_params(criteria, bound))
    values.update(url_overrides(url_params))

    return QueryParameters(tuple((key, values[key]) for key in PARAM_ORDER if key in values))


def filters_to_url(criteria: FilterCriteria, bound: Optional[PriceBound]) -> str:
    """Shareable query string reproducing the filtered view."""
    params = filter_params(criteria, bound)
    return urlencode([(key, params[key]) for key in PARAM_ORDER if key in params], safe=",")


def filters_key(criteria: FilterCriteria) -> str:
    """Stable serialization of criteria; selection order does not matter."""
    return json.dumps(criteria.as_dict(), sort_keys=True)


def params_key(url_params: Optional[Mapping[str, Any]]) -> str:
    """Stable serialization of URL search params."""
    normalized = {
        key: value if isinstance(value, str) else list(value)
        for key, value in (url_params or {}).items()
        if value is not None
    }
    return json.dumps(normalized, sort_keys=True)


__all__ = [
    "QueryParameters", "SORT_OPTIONS", "build_query", "filter_params", "filters_key",
    "filters_to_url", "page_count", "params_key", "price_params", "slider_bounds",
    "sort_params", "url_overrides",
]
