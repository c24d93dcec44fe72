"""
Utility functions for text processing, price parsing, and logging.
"""
import logging
import re
from typing import Iterable, List, Optional, Tuple, Union


def init_logger(
    name: str = "property_search",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = None
) -> logging.Logger:
    """Initialize logger with console and optional file handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    console_level_num = getattr(logging, console_level.upper(), logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(console_level_num)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:  # Create file handler only if log_file is provided
        file_level_num = getattr(logging, file_level.upper(), logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level_num)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def clean_text(s: Optional[str]) -> str:
    """Clean and normalize text by removing extra whitespace."""
    if not s:
        return ""
    s = re.sub(r"\s+", " ", s)
    return s.strip()


def split_csv(value: Union[str, Iterable[str], None]) -> List[str]:
    """
    Split a comma-joined query value into trimmed entries.

    Repeated query keys arrive as lists; only the first occurrence counts.
    """
    if value is None:
        return []
    if not isinstance(value, str):
        value = next(iter(value), "")
    return [part.strip() for part in value.split(",") if part.strip()]


def first_value(value: Union[str, Iterable[str], None]) -> Optional[str]:
    """Return the first value of a possibly repeated query key."""
    if value is None or isinstance(value, str):
        return value
    return next(iter(value), None)


_SUFFIXES = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}


def parse_price(price_text: Union[str, int, float, None]) -> Tuple[Optional[float], Optional[str]]:
    """
    Parse price text to extract numeric value and currency.

    Understands display strings such as "AED 1.2M", "$15,000" or "750K".
    """
    if price_text is None or price_text == "":
        return (None, None)
    if isinstance(price_text, (int, float)):
        return (float(price_text), None)

    s = price_text.replace(",", "").replace("\xa0", " ")
    m = re.search(r"(\$|€|£)?\s?(\d+(?:\.\d+)?)\s?([KMB])?\b", s, re.I)
    cur = None
    val = None

    if m:
        cur = m.group(1)
        val = float(m.group(2))
        if m.group(3):
            val *= _SUFFIXES[m.group(3).upper()]

    if not cur:
        m2 = re.search(r"\b(AED|USD|EUR|GBP)\b", s, re.I)
        if m2:
            cur = m2.group(1).upper()

    symbol_map = {"$": "USD", "€": "EUR", "£": "GBP"}
    if cur in symbol_map:
        cur = symbol_map[cur]

    return (val, cur)


def parse_area(area_text: Union[str, int, float, None]) -> Tuple[float, str]:
    """Parse "1,200 sq ft" style area text into (value, unit)."""
    if area_text is None or area_text == "":
        return (0.0, "sq ft")
    if isinstance(area_text, (int, float)):
        return (float(area_text), "sq ft")

    m = re.search(r"(\d+(?:\.\d+)?)\s*(sq\s?ft|sq\s?m|sqft|sqm)?", area_text.replace(",", ""), re.I)
    if not m:
        return (0.0, "sq ft")
    unit = (m.group(2) or "sq ft").lower().replace(" ", "")
    return (float(m.group(1)), "sq m" if unit == "sqm" else "sq ft")


def format_large_number(num: float) -> str:
    """Format 1500000 as '1.5M', 2000 as '2K'."""
    for divisor, suffix in ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K")):
        if num >= divisor:
            scaled = num / divisor
            return f"{scaled:.0f}{suffix}" if scaled % 1 == 0 else f"{scaled:.1f}{suffix}"
    return f"{num:,.0f}" if float(num).is_integer() else f"{num:,}"


def format_price(price: float, currency: str = "AED") -> str:
    """Format a price for display, e.g. 'AED 1.5M'."""
    return f"{currency} {format_large_number(price)}"
