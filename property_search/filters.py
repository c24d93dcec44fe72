"""
Filter state store shared by the search bar, filter panel and listing grid.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from .models import FilterCriteria, PriceBound
from .price_bounds import PriceBoundResolver, default_price_bound
from .query import SELECTION_PARAMS, filter_params, filters_key, filters_to_url, slider_bounds
from .utils import first_value, split_csv

logger = logging.getLogger(__name__)


def default_criteria(bound: Optional[PriceBound]) -> FilterCriteria:
    """No selections, price range spanning the whole bound."""
    return FilterCriteria(price_range=bound.as_range() if bound else None)


def _int_param(value: Any) -> Optional[int]:
    value = first_value(value)
    if value is None or str(value).strip() == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid price parameter: {value!r}")
        return None


def criteria_from_params(params: Mapping[str, Any], bound: Optional[PriceBound] = None) -> Dict[str, Any]:
    """
    Parse URL query parameters into a partial criteria update.

    Comma-joined values become selections. A lone ``min_price`` or
    ``max_price`` borrows the other side from the bound, never
    crossing the given side.
    """
    partial: Dict[str, Any] = {}

    for field_name, param in SELECTION_PARAMS:
        values = split_csv(params.get(param))
        if values:
            partial[field_name] = tuple(values)

    search = first_value(params.get("search"))
    if search and search.strip():
        partial["search"] = search.strip()

    min_price = _int_param(params.get("min_price"))
    max_price = _int_param(params.get("max_price"))
    if min_price is not None or max_price is not None:
        low, high = (bound or default_price_bound()).as_range()
        if max_price is None:
            max_price = max(min_price, high)
        elif min_price is None:
            min_price = min(max_price, low)
        partial["price_range"] = (min_price, max_price)

    return partial


class FilterStore:
    """
    Holds the current FilterCriteria for a browsing session.

    Every update replaces ``filters`` with a new immutable object, so readers
    can compare by identity or by ``key()``. Nothing here touches the URL;
    callers mirror ``to_query_string()`` themselves.
    """

    def __init__(self, defaults: Optional[FilterCriteria] = None):
        self.defaults = defaults or FilterCriteria()
        self.filters = self.defaults
        self.price_bound: Optional[PriceBound] = None
        self.is_initialized = False

    async def initialize(self, resolver: PriceBoundResolver,
                         url_params: Optional[Mapping[str, Any]] = None) -> FilterCriteria:
        """Seed from the resolved PriceBound, then from URL params. Runs once."""
        if self.is_initialized:
            return self.filters

        bound = await resolver.resolve()
        self.price_bound = bound
        self.defaults = default_criteria(bound)

        seeded = {"price_range": bound.as_range()}
        seeded.update(criteria_from_params(url_params or {}, bound))
        self.filters = self.filters.merge(seeded)
        self.is_initialized = True
        logger.debug(f"Filters initialized: {self.key()}")
        return self.filters

    def update_filters(self, partial: Optional[Mapping[str, Any]] = None, **changes: Any) -> FilterCriteria:
        """Merge a partial update. No clamping or cross-field checks."""
        merged = dict(partial or {})
        merged.update(changes)
        self.filters = self.filters.merge(merged)
        return self.filters

    def clear_filters(self) -> FilterCriteria:
        """Reset every dimension, price range back to the full bound."""
        self.filters = self.defaults
        return self.filters

    def slider_bounds(self) -> Tuple[int, int]:
        return slider_bounds(self.filters.price_range, self.price_bound or default_price_bound())

    def to_url_params(self) -> Dict[str, str]:
        return filter_params(self.filters, self.price_bound)

    def to_query_string(self) -> str:
        return filters_to_url(self.filters, self.price_bound)

    def key(self) -> str:
        return filters_key(self.filters)
