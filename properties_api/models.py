"""
Pydantic models for API request/response serialization.
"""
from typing import Optional, List, Dict
from pydantic import BaseModel, Field


class PropertyImageOut(BaseModel):
    """Output model for a property image."""
    id: str
    property_id: str
    image_url: str
    image_alt: str = ""
    order: int = 0


class PropertyOut(BaseModel):
    """Output model for property data."""
    id: str
    title: str
    description: str = ""
    price: float
    bedrooms: int = 0
    bathrooms: int = 0
    area_value: float = 0
    area_unit: str = "sq ft"
    location: str
    property_type: str
    status: str = "available"
    features: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    parking_spaces: int = 0
    floor_number: int = 0
    year_built: Optional[int] = None
    is_featured: bool = False
    is_hot_property: bool = False
    display_order: int = 0
    view_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    images: List[PropertyImageOut] = Field(default_factory=list)


class Pagination(BaseModel):
    """Pagination block of a listing response."""
    limit: int
    offset: int
    total: int


class PropertiesResponse(BaseModel):
    """Response model for paginated properties."""
    data: List[PropertyOut]
    pagination: Pagination


class PropertyResponse(BaseModel):
    """Response model for a single property."""
    data: PropertyOut
    timestamp: str


class PriceRangeOut(BaseModel):
    """Raw price bounds of the live catalog."""
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    total_properties: int = 0


class StatsOut(BaseModel):
    """Model for statistics data."""
    total_properties: int
    featured_properties: int
    hot_properties: int
    min_price: Optional[float]
    max_price: Optional[float]
    avg_price: Optional[float]
    by_type: Dict[str, int]
    by_location: Dict[str, int]


class FilterOptionsOut(BaseModel):
    """Values a filter panel can offer for the current catalog."""
    locations: List[str]
    property_types: List[str]
    features: List[str]
    amenities: List[str]
