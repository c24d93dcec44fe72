"""
Data models for property search: filter criteria, price bounds, properties
and result pages.
"""
import json
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from .utils import clean_text, parse_area, parse_price, split_csv


BEDROOM_OPTIONS = ("Studio", "1", "2", "3", "4", "5+")
BATHROOM_OPTIONS = ("1", "2", "3", "4", "5+")

PROPERTY_TYPES = (
    "Apartment", "Villa", "Penthouse", "Townhouse", "Studio",
    "Duplex", "Office", "Retail", "Warehouse", "Land",
)

PROPERTY_STATUS = ("available", "sold", "rented", "pending", "off-market")

AREA_UNITS = ("sq ft", "sq m")

COMMON_AMENITIES = (
    "Swimming Pool", "Gym/Fitness Center", "Parking", "24/7 Security", "Balcony",
    "Garden", "Elevator", "Central AC", "Built-in Wardrobes", "Maid Room",
    "Study Room", "Storage Room", "Laundry Room", "Kitchen Appliances", "Furnished",
    "Unfurnished", "Internet", "Cable TV", "Concierge", "Valet Parking",
    "Children Play Area", "BBQ Area", "Sauna", "Steam Room", "Jacuzzi",
    "Business Center", "Conference Room", "Prayer Room", "Basement", "Terrace",
    "Sea View", "City View", "Mountain View", "Garden View", "Pool View",
)

COMMON_FEATURES = (
    "Marble Floors", "Hardwood Floors", "Ceramic Tiles", "High Ceilings",
    "Floor-to-Ceiling Windows", "Walk-in Closet", "En-suite Bathroom", "Guest Bathroom",
    "Powder Room", "Open Kitchen", "Closed Kitchen", "Kitchen Island", "Breakfast Bar",
    "Pantry", "Utility Room", "Home Office", "Library", "Wine Cellar", "Home Theater",
    "Fireplace", "Smart Home System", "Solar Panels", "Private Entrance",
    "Separate Entrance", "Double Glazed Windows", "Soundproof", "Wheelchair Accessible",
    "Pet Friendly",
)

# Multi-select dimensions of FilterCriteria
SELECTION_FIELDS = (
    "bedrooms", "bathrooms", "selected_locations", "selected_types",
    "selected_amenities", "selected_features",
)


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed to show ``total`` items."""
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)


@dataclass(frozen=True)
class FilterCriteria:
    """
    The user's current search dimensions.

    Selections are OR'd within a dimension and AND'd across dimensions. An
    empty selection, empty search or ``price_range=None`` leaves that
    dimension unconstrained.
    """

    price_range: Optional[Tuple[int, int]] = None
    bedrooms: Tuple[str, ...] = ()
    bathrooms: Tuple[str, ...] = ()
    selected_locations: Tuple[str, ...] = ()
    selected_types: Tuple[str, ...] = ()
    selected_amenities: Tuple[str, ...] = ()
    selected_features: Tuple[str, ...] = ()
    search: str = ""

    def merge(self, partial: Mapping[str, Any]) -> "FilterCriteria":
        """Return a new criteria object with ``partial`` applied on top."""
        changes: Dict[str, Any] = {}
        for key, value in partial.items():
            if key in SELECTION_FIELDS:
                value = tuple(split_csv(value)) if isinstance(value, str) else tuple(value or ())
            elif key == "price_range" and value is not None:
                value = (int(value[0]), int(value[1]))
            elif key == "search":
                value = value or ""
            changes[key] = value
        return replace(self, **changes)

    def is_empty(self) -> bool:
        """True when no selection or search text is set."""
        return not self.search.strip() and not any(getattr(self, name) for name in SELECTION_FIELDS)

    def as_dict(self) -> Dict[str, Any]:
        """Order-insensitive plain representation, used for change detection."""
        data: Dict[str, Any] = {
            name: sorted(set(getattr(self, name))) for name in SELECTION_FIELDS
        }
        data["price_range"] = list(self.price_range) if self.price_range else None
        data["search"] = self.search.strip()
        return data


@dataclass(frozen=True)
class PriceBound:
    """Display-rounded catalog price span used as the default price filter."""

    rounded_min_price: int
    rounded_max_price: int
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    total_properties: int = 0

    def as_range(self) -> Tuple[int, int]:
        return (self.rounded_min_price, self.rounded_max_price)


@dataclass(frozen=True)
class PropertyImage:
    image_url: str
    image_alt: str = ""
    order: int = 0
    id: str = ""


def _as_strings(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        if value.lstrip().startswith("["):
            try:
                return tuple(str(v) for v in json.loads(value))
            except json.JSONDecodeError:
                pass
        return tuple(split_csv(value))
    return tuple(str(v) for v in value)


def _as_images(value: Any) -> Tuple[PropertyImage, ...]:
    images = []
    for position, image in enumerate(value or ()):
        if isinstance(image, str):
            images.append(PropertyImage(image_url=image, order=position))
        else:
            images.append(PropertyImage(
                image_url=image.get("image_url", ""),
                image_alt=image.get("image_alt") or "",
                order=int(image.get("order", position) or 0),
                id=str(image.get("id") or ""),
            ))
    return tuple(sorted(images, key=lambda i: i.order))


@dataclass(frozen=True)
class Property:
    """A listing as seen by the search core. Built only through ``from_api``."""

    id: str
    title: str
    price: float
    location: str = ""
    property_type: str = ""
    bedrooms: int = 0
    bathrooms: int = 0
    area_value: float = 0.0
    area_unit: str = "sq ft"
    status: str = "available"
    description: str = ""
    features: Tuple[str, ...] = ()
    amenities: Tuple[str, ...] = ()
    is_featured: bool = False
    is_hot_property: bool = False
    images: Tuple[PropertyImage, ...] = field(default=())

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Property":
        """
        Normalize an API record into a Property.

        Accepts the database record shape (``property_type``, ``area_value``,
        ``images`` as objects) and the older display shape (``type``, a
        formatted ``price`` string, an ``area`` string and a single ``image``).
        """
        if "property_type" in data:
            price, _ = parse_price(data.get("price"))
            return cls(
                id=str(data["id"]),
                title=clean_text(data.get("title")),
                price=price or 0.0,
                location=data.get("location") or "",
                property_type=data["property_type"] or "",
                bedrooms=int(data.get("bedrooms") or 0),
                bathrooms=int(data.get("bathrooms") or 0),
                area_value=float(data.get("area_value") or 0),
                area_unit=data.get("area_unit") or "sq ft",
                status=data.get("status") or "available",
                description=data.get("description") or "",
                features=_as_strings(data.get("features")),
                amenities=_as_strings(data.get("amenities")),
                is_featured=bool(data.get("is_featured")),
                is_hot_property=bool(data.get("is_hot_property")),
                images=_as_images(data.get("images")),
            )

        price, _ = parse_price(data.get("price"))
        area_value, area_unit = parse_area(data.get("area"))
        image = data.get("image")
        return cls(
            id=str(data["id"]),
            title=clean_text(data.get("title")),
            price=price or 0.0,
            location=data.get("location") or "",
            property_type=data.get("type") or "",
            bedrooms=int(data.get("bedrooms") or 0),
            bathrooms=int(data.get("bathrooms") or 0),
            area_value=area_value,
            area_unit=area_unit,
            status=data.get("status") or "available",
            description=data.get("description") or "",
            features=_as_strings(data.get("features")),
            amenities=_as_strings(data.get("amenities")),
            is_featured=bool(data.get("featured")),
            images=_as_images([image] if image else data.get("images")),
        )

    @property
    def main_image(self) -> str:
        return self.images[0].image_url if self.images else "/placeholder.svg"


@dataclass(frozen=True)
class ResultPage:
    """One page of matching properties plus the server-side match count."""

    items: Tuple[Property, ...] = ()
    total: int = 0
    limit: int = 0
    offset: int = 0

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "ResultPage":
        pagination = payload.get("pagination") or {}
        items = tuple(Property.from_api(item) for item in payload.get("data") or [])
        return cls(
            items=items,
            total=int(pagination.get("total", len(items))),
            limit=int(pagination.get("limit", len(items))),
            offset=int(pagination.get("offset", 0)),
        )

    @property
    def is_empty(self) -> bool:
        return not self.items

    def page_count(self, page_size: Optional[int] = None) -> int:
        return page_count(self.total, page_size or self.limit)
