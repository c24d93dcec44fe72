"""
Property Search Package
"""
from .models import FilterCriteria, PriceBound, Property, ResultPage
from .client import PropertiesClient, PropertiesAPIError
from .query import QueryParameters, build_query, filters_to_url
from .price_bounds import PriceBoundResolver, round_price_bounds
from .filters import FilterStore, criteria_from_params
from .fetcher import ListingFetcher
from .similar import SimilarItemsResolver
from .export import save_output_rows
from .utils import init_logger

__version__ = "1.0.0"

__all__ = [
    "FilterCriteria",
    "PriceBound",
    "Property",
    "ResultPage",
    "PropertiesClient",
    "PropertiesAPIError",
    "QueryParameters",
    "build_query",
    "filters_to_url",
    "PriceBoundResolver",
    "round_price_bounds",
    "FilterStore",
    "criteria_from_params",
    "ListingFetcher",
    "SimilarItemsResolver",
    "save_output_rows",
    "init_logger"
]
