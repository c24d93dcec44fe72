"""
Price bound resolution: reads the live catalog price span once and rounds it
to clean slider endpoints.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .client import PropertiesAPIError
from .config import config
from .models import PriceBound
from .utils import format_large_number

logger = logging.getLogger(__name__)

MIN_PRICE_LADDER = (500_000, 1_000_000, 2_000_000, 5_000_000, 10_000_000)
MAX_PRICE_LADDER = (1_000_000, 2_000_000, 5_000_000, 10_000_000, 20_000_000)


@dataclass(frozen=True)
class PriceOption:
    value: str
    label: str


def price_step(span: float) -> int:
    """Rounding granularity for a price span; coarser as the span grows."""
    if span < 100_000:
        return 1_000
    if span < 1_000_000:
        return 10_000
    if span < 10_000_000:
        return 100_000
    return 1_000_000


def round_price_bounds(min_price: float, max_price: float, total_properties: int = 0) -> PriceBound:
    """
    Round the raw catalog span outward: min down, max up, to the step for
    the span's magnitude. The result always has min < max.
    """
    low = max(0.0, float(min(min_price, max_price)))
    high = max(0.0, float(max(min_price, max_price)))
    step = price_step(high - low)

    rounded_min = int(low // step) * step
    rounded_max = int(-(-high // step)) * step
    if rounded_max <= rounded_min:
        rounded_max = rounded_min + step

    return PriceBound(
        rounded_min_price=rounded_min,
        rounded_max_price=rounded_max,
        min_price=min_price,
        max_price=max_price,
        total_properties=total_properties,
    )


def default_price_bound() -> PriceBound:
    """Span used when the catalog is empty or unreachable."""
    return PriceBound(config.DEFAULT_MIN_PRICE, config.DEFAULT_MAX_PRICE)


def price_options(bound: PriceBound) -> dict:
    """Dropdown ladders ("No Min", 500K, 1M, ...) trimmed to the bound."""
    low, high = bound.as_range()
    min_options = [PriceOption("none", "No Min")] + [
        PriceOption(str(v), format_large_number(v))
        for v in MIN_PRICE_LADDER if low < v < high
    ]
    max_options = [PriceOption("none", "No Max")] + [
        PriceOption(str(v), format_large_number(v) + ("+" if v == MAX_PRICE_LADDER[-1] else ""))
        for v in MAX_PRICE_LADDER if low < v <= high
    ]
    return {"min": min_options, "max": max_options}


class PriceBoundResolver:
    """
    Resolves the PriceBound with a single read and caches it.

    Concurrent callers share the one request. A failed read or an empty
    catalog resolves to ``default_price_bound()`` and leaves a readable
    message in ``error``; the fallback is cached too until ``refresh()``.
    """

    def __init__(self, client):
        self.client = client
        self.error: Optional[str] = None
        self._bound: Optional[PriceBound] = None
        self._lock = asyncio.Lock()

    @property
    def bound(self) -> Optional[PriceBound]:
        return self._bound

    async def resolve(self) -> PriceBound:
        async with self._lock:
            if self._bound is None:
                self._bound = await self._fetch()
        return self._bound

    def refresh(self) -> None:
        """Forget the cached bound; the next ``resolve()`` reads again."""
        self._bound = None
        self.error = None

    async def _fetch(self) -> PriceBound:
        try:
            data = await self.client.get_price_range()
        except PropertiesAPIError as e:
            logger.error(f"Error fetching price range: {e.message}")
            self.error = e.message
            return default_price_bound()

        min_price, max_price = data.get("min_price"), data.get("max_price")
        if min_price is None or max_price is None:
            logger.info("Catalog is empty, using default price bounds")
            self.error = None
            return default_price_bound()

        try:
            bound = round_price_bounds(float(min_price), float(max_price),
                                       int(data.get("total_properties") or 0))
        except (TypeError, ValueError) as e:
            logger.error(f"Invalid price range response {data!r}: {e}")
            self.error = "Failed to load price range"
            return default_price_bound()

        self.error = None
        logger.debug(f"Resolved price bounds {bound.as_range()}")
        return bound
