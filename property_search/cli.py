"""
Command line front end: search the property catalog through the Properties API.
"""
import argparse
import asyncio
import os
import sys
from typing import Dict, List

from .client import PropertiesClient
from .config import config
from .export import save_output_rows
from .fetcher import ListingFetcher
from .filters import FilterStore
from .price_bounds import PriceBoundResolver
from .query import SORT_OPTIONS
from .similar import SimilarItemsResolver, should_display
from .utils import format_price, init_logger

logger = None


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Search property listings with filters, sorting and pagination")
    ap.add_argument("--api-url", default=config.API_BASE_URL, help="Properties API base URL")
    ap.add_argument("--search", default="", help="Free text, e.g. 'marina'")
    ap.add_argument("--min-price", type=int, default=None, help="Minimum price")
    ap.add_argument("--max-price", type=int, default=None, help="Maximum price")
    ap.add_argument("--location", default="", help="Comma-separated locations")
    ap.add_argument("--type", dest="property_type", default="", help="Comma-separated property types")
    ap.add_argument("--bedrooms", default="", help="Comma-separated bedroom options, e.g. 'Studio,2,5+'")
    ap.add_argument("--bathrooms", default="", help="Comma-separated bathroom options")
    ap.add_argument("--features", default="", help="Comma-separated features")
    ap.add_argument("--amenities", default="", help="Comma-separated amenities")
    ap.add_argument("--featured", action="store_true", help="Only featured properties")
    ap.add_argument("--hot", action="store_true", help="Only hot properties")
    ap.add_argument("--sort", choices=sorted(SORT_OPTIONS), default="featured", help="Sort order")
    ap.add_argument("--page", type=int, default=1, help="Page number (1-based)")
    ap.add_argument("--page-size", type=int, default=config.PAGE_SIZE, help="Properties per page")
    ap.add_argument("--similar", default="", help="Show properties similar to this property id instead")
    ap.add_argument("--count", type=int, default=config.SIMILAR_COUNT, help="How many similar properties")
    ap.add_argument("--out", default="", help="CSV/XLSX file to export the result page to")
    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-level", choices=lvl_choices, default=config.LOG_LEVEL.upper(),
                    help="Console log level (default from env LOG_LEVEL or INFO).")
    ap.add_argument("--log-file", default=os.getenv("LOG_FILE_PATH", ""),
                    help="Optional path to a debug log file.")
    return ap.parse_args(argv)


def filter_params_from_args(args) -> Dict[str, str]:
    """Deep-link style parameters the filter store is seeded from."""
    params = {
        "search": args.search,
        "location": args.location,
        "property_type": args.property_type,
        "bedrooms": args.bedrooms,
        "bathrooms": args.bathrooms,
        "features": args.features,
        "amenities": args.amenities,
    }
    if args.min_price is not None:
        params["min_price"] = str(args.min_price)
    if args.max_price is not None:
        params["max_price"] = str(args.max_price)
    return {key: value for key, value in params.items() if value}


def format_line(p) -> str:
    return (f"{p.id}  {format_price(p.price)}  {p.bedrooms}bd/{p.bathrooms}ba  "
            f"{p.area_value:,.0f} {p.area_unit}  {p.property_type} in {p.location} - {p.title}")


async def show_similar(client: PropertiesClient, args) -> int:
    resolver = SimilarItemsResolver(client)
    items = await resolver.find_similar(args.similar, args.count)
    if resolver.error:
        logger.error(f">>> {resolver.error}")
        return 1
    if not should_display(items):
        print(f"No similar properties for {args.similar}")
        return 0

    print(f"Similar to {args.similar}:")
    for p in items:
        print("  " + format_line(p))
    if args.out:
        save_output_rows(items, args.out, logger)
    return 0


async def run(args) -> int:
    async with PropertiesClient(base_url=args.api_url) as client:
        if args.similar:
            return await show_similar(client, args)

        resolver = PriceBoundResolver(client)
        store = FilterStore()
        await store.initialize(resolver, filter_params_from_args(args))
        if resolver.error:
            logger.warning(f">>> Price bounds unavailable, using defaults: {resolver.error}")

        flags: Dict[str, str] = {}
        if args.featured:
            flags["is_featured"] = "true"
        if args.hot:
            flags["is_hot_property"] = "true"

        fetcher = ListingFetcher(client, store, page_size=args.page_size, sort=args.sort)
        fetcher.page = max(1, args.page)
        await fetcher.sync(flags)

        if fetcher.error:
            logger.error(f">>> {fetcher.error}")
            return 1

        title, subtitle = fetcher.results_header()
        print(f"{title} - {subtitle}")
        query_string = store.to_query_string()
        print(f"Link: /properties{'?' + query_string if query_string else ''}")

        items: List = list(fetcher.items)
        if not items:
            print("No properties found. Try adjusting your filters.")
            return 0

        print(f"Page {fetcher.page} of {fetcher.total_pages}")
        for p in items:
            print("  " + format_line(p))

        if args.out:
            save_output_rows(items, args.out, logger)
    return 0


def main(argv=None):
    args = parse_args(argv)
    global logger
    logger = init_logger(
        console_level=args.log_level,
        file_level="DEBUG",
        log_file=args.log_file or None
    )
    logger.debug(f"Searching {args.api_url}")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
