"""
API route handlers for property listing endpoints.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Query, HTTPException, Depends
from fastapi.responses import StreamingResponse
import pandas as pd

from ..models import PropertyOut, PropertiesResponse, PropertyResponse, PriceRangeOut, Pagination
from ..database import (
    get_properties_count, get_properties, get_property_by_id,
    get_price_range, get_similar_properties, now_iso
)
from ..config import config

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["properties"])

EXPORT_COLUMNS = [
    "id", "title", "property_type", "location", "price", "bedrooms", "bathrooms",
    "area_value", "area_unit", "status", "is_featured", "is_hot_property"
]


def get_property_filters(
    search: Optional[str] = None,
    status: Optional[str] = None,
    property_type: Optional[str] = None,
    location: Optional[str] = None,
    is_featured: Optional[bool] = None,
    is_hot_property: Optional[bool] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    bedrooms: Optional[str] = None,
    bathrooms: Optional[str] = None,
    features: Optional[str] = None,
    amenities: Optional[str] = None,
) -> dict:
    """Dependency to extract listing filters; comma-joined values are OR'd."""
    return {
        'search': search,
        'status': status,
        'property_type': property_type,
        'location': location,
        'is_featured': is_featured,
        'is_hot_property': is_hot_property,
        'min_price': min_price,
        'max_price': max_price,
        'bedrooms': bedrooms,
        'bathrooms': bathrooms,
        'features': features,
        'amenities': amenities,
    }


def _page(filters: dict, sort_by: str, sort_order: str, limit: int, offset: int) -> PropertiesResponse:
    total = get_properties_count(filters)
    items = [PropertyOut(**item) for item in get_properties(filters, sort_by, sort_order, limit, offset)]
    return PropertiesResponse(
        data=items,
        pagination=Pagination(limit=limit, offset=offset, total=total)
    )


@router.get("/properties", response_model=PropertiesResponse)
async def get_api_properties(
    filters: dict = Depends(get_property_filters),
    sort_by: str = 'display_order',
    sort_order: str = Query('asc', pattern='^(asc|desc)$'),
    limit: int = Query(config.DEFAULT_API_LIMIT, ge=1, le=config.MAX_API_LIMIT),
    offset: int = Query(0, ge=0)
):
    """Get properties with filtering, sorting and pagination."""
    try:
        return _page(filters, sort_by, sort_order, limit, offset)
    except Exception as e:
        logger.error(f"Error fetching properties: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties/price-range", response_model=PriceRangeOut)
async def get_api_price_range():
    """Get the raw minimum and maximum price in the catalog."""
    try:
        return PriceRangeOut(**get_price_range())
    except Exception as e:
        logger.error(f"Error fetching price range: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties/similar", response_model=PropertiesResponse)
async def get_api_similar_properties(
    current_property_id: str,
    limit: int = Query(config.DEFAULT_SIMILAR_LIMIT, ge=1, le=config.MAX_SIMILAR_LIMIT)
):
    """Get properties related to the given one, excluding it."""
    try:
        items_data = get_similar_properties(current_property_id, limit)
        if items_data is None:
            raise HTTPException(status_code=404, detail="Property not found")

        items = [PropertyOut(**item) for item in items_data]
        return PropertiesResponse(
            data=items,
            pagination=Pagination(limit=limit, offset=0, total=len(items))
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching similar properties for {current_property_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties/featured", response_model=PropertiesResponse)
async def get_api_featured_properties(
    limit: int = Query(config.DEFAULT_API_LIMIT, ge=1, le=config.MAX_API_LIMIT)
):
    """Get featured properties in display order."""
    try:
        return _page({'is_featured': True}, 'display_order', 'asc', limit, 0)
    except Exception as e:
        logger.error(f"Error fetching featured properties: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties/hot", response_model=PropertiesResponse)
async def get_api_hot_properties(
    limit: int = Query(config.DEFAULT_API_LIMIT, ge=1, le=config.MAX_API_LIMIT)
):
    """Get hot properties in display order."""
    try:
        return _page({'is_hot_property': True}, 'display_order', 'asc', limit, 0)
    except Exception as e:
        logger.error(f"Error fetching hot properties: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties/{property_id}", response_model=PropertyResponse)
async def get_api_property(property_id: str):
    """Get a specific property by ID."""
    try:
        property_data = get_property_by_id(property_id)
        if not property_data:
            raise HTTPException(status_code=404, detail="Property not found")

        return PropertyResponse(data=PropertyOut(**property_data), timestamp=now_iso())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching property {property_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/export/csv")
async def export_properties_csv(
    filters: dict = Depends(get_property_filters),
    sort_by: str = 'display_order',
    sort_order: str = Query('asc', pattern='^(asc|desc)$')
):
    """Export filtered properties as CSV."""
    try:
        # Get all matching properties (no pagination for export)
        properties_data = get_properties(filters, sort_by, sort_order, limit=config.EXPORT_LIMIT, offset=0)

        # An empty result still yields the header row
        df = pd.DataFrame(properties_data, columns=EXPORT_COLUMNS)
        csv_content = df.to_csv(index=False).encode('utf-8')

        return StreamingResponse(
            iter([csv_content]),
            media_type='text/csv',
            headers={'Content-Disposition': 'attachment; filename="properties.csv"'}
        )

    except Exception as e:
        logger.error(f"Error exporting CSV: {e}")
        raise HTTPException(status_code=500, detail="Error generating CSV export")
