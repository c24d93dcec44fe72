"""
Export utilities for listing result pages.
"""
import logging
from typing import Iterable, List, Optional

import pandas as pd

from .models import Property

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "id", "title", "property_type", "location", "price", "bedrooms", "bathrooms",
    "area_value", "area_unit", "status", "is_featured", "is_hot_property",
    "features", "amenities", "main_image",
]


def properties_to_frame(properties: Iterable[Property]) -> pd.DataFrame:
    """Flatten properties into a DataFrame, one row per property."""
    rows = []
    for p in properties:
        rows.append({
            "id": p.id,
            "title": p.title,
            "property_type": p.property_type,
            "location": p.location,
            "price": p.price,
            "bedrooms": p.bedrooms,
            "bathrooms": p.bathrooms,
            "area_value": p.area_value,
            "area_unit": p.area_unit,
            "status": p.status,
            "is_featured": p.is_featured,
            "is_hot_property": p.is_hot_property,
            "features": "|".join(p.features),
            "amenities": "|".join(p.amenities),
            "main_image": p.main_image,
        })
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def save_output_rows(properties: List[Property], out_path: str, log: Optional[logging.Logger] = None) -> int:
    """Save properties to CSV or Excel file; returns the row count."""
    df = properties_to_frame(properties)
    if out_path.lower().endswith(".xlsx"):
        df.to_excel(out_path, index=False)
    else:
        df.to_csv(out_path, index=False)

    (log or logger).info(f">>> Saved {len(df)} rows to {out_path}")
    return len(df)
