"""
Catalog statistics and filter option route handlers.
"""
import logging
from fastapi import APIRouter, HTTPException

from ..models import FilterOptionsOut, StatsOut
from ..database import get_filter_options, get_statistics

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/stats", tags=["statistics"])


@router.get("", response_model=StatsOut)
async def get_api_stats():
    """Counts, price spread and breakdowns by type and location."""
    try:
        return StatsOut(**get_statistics())
    except Exception as e:
        logger.error(f"Error computing catalog statistics: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/options", response_model=FilterOptionsOut)
async def get_api_filter_options():
    """Locations, types, features and amenities that currently have listings."""
    try:
        return FilterOptionsOut(**get_filter_options())
    except Exception as e:
        logger.error(f"Error loading filter options: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
