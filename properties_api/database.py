"""
Database operations and connection management.
"""
import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import config

logger = logging.getLogger(__name__)


# Schema definitions
DDL_PROPERTIES = """
CREATE TABLE IF NOT EXISTS properties (
  id TEXT PRIMARY KEY,
  title TEXT NOT NULL,
  description TEXT DEFAULT '',
  price REAL NOT NULL,
  bedrooms INTEGER DEFAULT 0,
  bathrooms INTEGER DEFAULT 0,
  area_value REAL DEFAULT 0,
  area_unit TEXT DEFAULT 'sq ft',
  location TEXT NOT NULL,
  property_type TEXT NOT NULL,
  status TEXT DEFAULT 'available',
  features TEXT DEFAULT '[]',
  amenities TEXT DEFAULT '[]',
  parking_spaces INTEGER DEFAULT 0,
  floor_number INTEGER DEFAULT 0,
  year_built INTEGER,
  is_featured INTEGER DEFAULT 0,
  is_hot_property INTEGER DEFAULT 0,
  is_deleted INTEGER DEFAULT 0,
  display_order INTEGER DEFAULT 0,
  view_count INTEGER DEFAULT 0,
  created_at TEXT,
  updated_at TEXT
);
"""

DDL_PROPERTY_IMAGES = """
CREATE TABLE IF NOT EXISTS property_images (
  id TEXT PRIMARY KEY,
  property_id TEXT NOT NULL,
  image_url TEXT NOT NULL,
  image_alt TEXT DEFAULT '',
  image_order INTEGER DEFAULT 0,
  created_at TEXT
);
"""

DDL_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_properties_price ON properties(price);",
    "CREATE INDEX IF NOT EXISTS idx_properties_type ON properties(property_type);",
    "CREATE INDEX IF NOT EXISTS idx_properties_display_order ON properties(display_order);",
    "CREATE INDEX IF NOT EXISTS idx_property_images_property ON property_images(property_id);"
]

# Columns the listing endpoint may sort on
SORT_COLUMNS = {
    "price": "price",
    "created_at": "created_at",
    "area_value": "area_value",
    "bedrooms": "bedrooms",
    "title": "title COLLATE NOCASE",
    "display_order": "display_order",
}

PROPERTY_COLUMNS = (
    "id", "title", "description", "price", "bedrooms", "bathrooms", "area_value",
    "area_unit", "location", "property_type", "status", "features", "amenities",
    "parking_spaces", "floor_number", "year_built", "is_featured", "is_hot_property",
    "is_deleted", "display_order", "view_count", "created_at", "updated_at"
)


def now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def db_connect(path: str) -> sqlite3.Connection:
    """Create database connection with dict-like rows."""
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    return conn


def db_init(conn: sqlite3.Connection):
    """Initialize database schema with tables and indexes."""
    conn.execute(DDL_PROPERTIES)
    conn.execute(DDL_PROPERTY_IMAGES)
    for ddl in DDL_INDEXES:
        conn.execute(ddl)
    conn.commit()


@contextmanager
def get_db_connection():
    """Get a database connection with proper error handling."""
    conn = None
    try:
        if not config.DB_PATH:
            raise ValueError("Database path not configured")

        conn = db_connect(config.DB_PATH)
        yield conn
    except sqlite3.Error as e:
        logger.error(f"Database error: {e}")
        raise
    finally:
        if conn is not None:
            conn.close()


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-joined filter value, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in str(value).split(",") if part.strip()]


def _like_term(value: str) -> str:
    """Lower-cased substring pattern with LIKE wildcards matched literally."""
    escaped = value.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _room_conditions(column: str, tokens: Iterable[str], parameters: List[Any]) -> Optional[str]:
    """OR together room-count tokens such as 'Studio', '2' or '5+'."""
    conditions = []
    for token in tokens:
        if token.lower() == "studio":
            conditions.append(f"{column} = 0")
            continue
        try:
            if token.endswith("+"):
                count = int(token[:-1])
                conditions.append(f"{column} >= ?")
            else:
                count = int(token)
                conditions.append(f"{column} = ?")
        except ValueError:
            logger.warning(f"Ignoring invalid {column} filter value: {token!r}")
            continue
        parameters.append(count)

    if not conditions:
        return None
    return "(" + " OR ".join(conditions) + ")"


def _json_any_condition(column: str, values: List[str], parameters: List[Any]) -> str:
    """Match rows whose JSON array column contains any of the values."""
    placeholders = ",".join("?" for _ in values)
    parameters.extend(values)
    return (
        f"EXISTS (SELECT 1 FROM json_each(properties.{column}) "
        f"WHERE json_each.value IN ({placeholders}))"
    )


def build_where_clause(filters: Dict[str, Any]) -> Tuple[str, List[Any]]:
    """Build WHERE clause and parameters from filters.

    Comma-joined values are OR'd within a dimension; dimensions are AND'd.
    A missing or empty filter never excludes anything.
    """
    where_conditions = ["is_deleted = 0"]
    parameters: List[Any] = []

    # Text search
    search = (filters.get("search") or "").strip()
    if search:
        where_conditions.append(
            "(lower(title) LIKE ? ESCAPE '\\' OR lower(description) LIKE ? ESCAPE '\\' "
            "OR lower(location) LIKE ? ESCAPE '\\')"
        )
        search_term = _like_term(search)
        parameters.extend([search_term, search_term, search_term])

    status = filters.get("status")
    if status:
        where_conditions.append("status = ?")
        parameters.append(status)

    property_types = split_csv(filters.get("property_type"))
    if property_types:
        placeholders = ",".join("?" for _ in property_types)
        where_conditions.append(f"property_type IN ({placeholders})")
        parameters.extend(property_types)

    locations = split_csv(filters.get("location"))
    if locations:
        where_conditions.append(
            "(" + " OR ".join("lower(location) LIKE ? ESCAPE '\\'" for _ in locations) + ")"
        )
        parameters.extend(_like_term(loc) for loc in locations)

    for flag in ("is_featured", "is_hot_property"):
        value = filters.get(flag)
        if value is not None:
            where_conditions.append(f"{flag} = ?")
            parameters.append(1 if value else 0)

    # Price range
    min_price = filters.get("min_price")
    if min_price is not None:
        where_conditions.append("price >= ?")
        parameters.append(min_price)

    max_price = filters.get("max_price")
    if max_price is not None:
        where_conditions.append("price <= ?")
        parameters.append(max_price)

    for column in ("bedrooms", "bathrooms"):
        condition = _room_conditions(column, split_csv(filters.get(column)), parameters)
        if condition:
            where_conditions.append(condition)

    for column in ("features", "amenities"):
        values = split_csv(filters.get(column))
        if values:
            where_conditions.append(_json_any_condition(column, values, parameters))

    where_clause = " WHERE " + " AND ".join(where_conditions)
    return where_clause, parameters


def get_order_clause(sort_by: Optional[str], sort_order: Optional[str] = "asc") -> str:
    """Generate ORDER BY clause; unknown keys fall back to display order."""
    direction = "DESC" if (sort_order or "").lower() == "desc" else "ASC"
    if sort_by == "featured":
        return f"ORDER BY is_featured {direction}, display_order ASC, id ASC"

    column = SORT_COLUMNS.get(sort_by or "")
    if column is None:
        column, direction = "display_order", "ASC"
    return f"ORDER BY {column} {direction}, id ASC"


def _row_to_property(row: sqlite3.Row) -> Dict[str, Any]:
    """Convert a properties row into the API dictionary shape."""
    item = dict(row)
    for column in ("features", "amenities"):
        try:
            item[column] = json.loads(item.get(column) or "[]")
        except (TypeError, json.JSONDecodeError):
            item[column] = []
    for flag in ("is_featured", "is_hot_property", "is_deleted"):
        item[flag] = bool(item.get(flag))
    item["images"] = []
    return item


def _attach_images(conn: sqlite3.Connection, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Load images for the given properties in one query, ordered by position."""
    if not items:
        return items
    by_id = {item["id"]: item for item in items}
    placeholders = ",".join("?" for _ in by_id)
    cursor = conn.execute(
        f"SELECT * FROM property_images WHERE property_id IN ({placeholders}) "
        f"ORDER BY image_order ASC, id ASC",
        list(by_id),
    )
    for row in cursor.fetchall():
        by_id[row["property_id"]]["images"].append({
            "id": row["id"],
            "property_id": row["property_id"],
            "image_url": row["image_url"],
            "image_alt": row["image_alt"] or "",
            "order": row["image_order"],
        })
    return items


def get_properties_count(filters: Dict[str, Any]) -> int:
    """Get total count of properties matching filters."""
    with get_db_connection() as conn:
        where_clause, parameters = build_where_clause(filters)
        sql = f"SELECT COUNT(*) FROM properties {where_clause}"
        result = conn.execute(sql, parameters).fetchone()
        return result[0] if result else 0


def get_properties(filters: Dict[str, Any], sort_by: Optional[str] = "display_order",
                   sort_order: Optional[str] = "asc", limit: int = 6, offset: int = 0) -> List[Dict]:
    """Get properties with filters, sorting, and pagination."""
    with get_db_connection() as conn:
        where_clause, parameters = build_where_clause(filters)
        order_clause = get_order_clause(sort_by, sort_order)

        sql = f"SELECT * FROM properties {where_clause} {order_clause} LIMIT ? OFFSET ?"
        parameters.extend([limit, offset])

        items = [_row_to_property(row) for row in conn.execute(sql, parameters).fetchall()]
        return _attach_images(conn, items)


def get_property_by_id(property_id: str) -> Optional[Dict]:
    """Get a single non-deleted property by ID."""
    with get_db_connection() as conn:
        row = conn.execute(
            "SELECT * FROM properties WHERE id = ? AND is_deleted = 0", (property_id,)
        ).fetchone()
        if row is None:
            return None
        return _attach_images(conn, [_row_to_property(row)])[0]


def get_price_range() -> Dict[str, Any]:
    """Get the raw minimum and maximum price over non-deleted properties."""
    with get_db_connection() as conn:
        row = conn.execute(
            "SELECT MIN(price), MAX(price), COUNT(*) FROM properties WHERE is_deleted = 0"
        ).fetchone()
        min_price, max_price, total = row if row else (None, None, 0)
        return {
            "min_price": min_price,
            "max_price": max_price,
            "total_properties": total or 0,
        }


def get_similar_properties(property_id: str, limit: int = 3) -> Optional[List[Dict]]:
    """
    Get properties related to the given one.

    Candidates are ranked by same property type, then same location, then
    closeness in price. The source property is never part of the result.
    Returns None when the source property does not exist.
    """
    with get_db_connection() as conn:
        source = conn.execute(
            "SELECT property_type, location, price FROM properties WHERE id = ? AND is_deleted = 0",
            (property_id,),
        ).fetchone()
        if source is None:
            return None

        sql = """
        SELECT * FROM properties
        WHERE is_deleted = 0 AND id != ?
        ORDER BY (property_type = ?) DESC, (location = ?) DESC, ABS(price - ?) ASC, id ASC
        LIMIT ?
        """
        rows = conn.execute(
            sql,
            (property_id, source["property_type"], source["location"], source["price"], limit),
        ).fetchall()
        return _attach_images(conn, [_row_to_property(row) for row in rows])


def get_statistics() -> Dict[str, Any]:
    """Get various statistics about the catalog."""
    with get_db_connection() as conn:
        total = conn.execute(
            "SELECT COUNT(*) FROM properties WHERE is_deleted = 0"
        ).fetchone()[0]
        featured = conn.execute(
            "SELECT COUNT(*) FROM properties WHERE is_deleted = 0 AND is_featured = 1"
        ).fetchone()[0]
        hot = conn.execute(
            "SELECT COUNT(*) FROM properties WHERE is_deleted = 0 AND is_hot_property = 1"
        ).fetchone()[0]

        price_stats = conn.execute(
            "SELECT MIN(price), MAX(price), AVG(price) FROM properties WHERE is_deleted = 0"
        ).fetchone()
        min_price, max_price, avg_price = price_stats if price_stats else (None, None, None)

        type_stats = conn.execute(
            "SELECT property_type, COUNT(*) FROM properties WHERE is_deleted = 0 "
            "GROUP BY property_type ORDER BY COUNT(*) DESC, property_type ASC"
        ).fetchall()

        location_stats = conn.execute(
            "SELECT location, COUNT(*) FROM properties WHERE is_deleted = 0 "
            "GROUP BY location ORDER BY COUNT(*) DESC, location ASC LIMIT 20"
        ).fetchall()

        return {
            "total_properties": total,
            "featured_properties": featured,
            "hot_properties": hot,
            "min_price": min_price,
            "max_price": max_price,
            "avg_price": avg_price,
            "by_type": {ptype: count for ptype, count in type_stats},
            "by_location": {location: count for location, count in location_stats},
        }


def insert_property(conn: sqlite3.Connection, data: Dict[str, Any]) -> str:
    """Insert a property (and its images) and return its id."""
    property_id = str(data.get("id") or uuid.uuid4())
    ts = now_iso()
    values = {
        "id": property_id,
        "title": data["title"],
        "description": data.get("description", ""),
        "price": data["price"],
        "bedrooms": data.get("bedrooms", 0),
        "bathrooms": data.get("bathrooms", 0),
        "area_value": data.get("area_value", 0),
        "area_unit": data.get("area_unit", "sq ft"),
        "location": data["location"],
        "property_type": data["property_type"],
        "status": data.get("status", "available"),
        "features": json.dumps(list(data.get("features", [])), ensure_ascii=False),
        "amenities": json.dumps(list(data.get("amenities", [])), ensure_ascii=False),
        "parking_spaces": data.get("parking_spaces", 0),
        "floor_number": data.get("floor_number", 0),
        "year_built": data.get("year_built"),
        "is_featured": 1 if data.get("is_featured") else 0,
        "is_hot_property": 1 if data.get("is_hot_property") else 0,
        "is_deleted": 1 if data.get("is_deleted") else 0,
        "display_order": data.get("display_order", 0),
        "view_count": data.get("view_count", 0),
        "created_at": data.get("created_at") or ts,
        "updated_at": ts,
    }
    placeholders = ",".join("?" for _ in PROPERTY_COLUMNS)
    conn.execute(
        f"INSERT INTO properties ({','.join(PROPERTY_COLUMNS)}) VALUES ({placeholders})",
        [values[column] for column in PROPERTY_COLUMNS],
    )

    for position, image in enumerate(data.get("images", [])):
        if isinstance(image, str):
            image = {"image_url": image}
        conn.execute(
            "INSERT INTO property_images (id, property_id, image_url, image_alt, image_order, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                str(image.get("id") or uuid.uuid4()),
                property_id,
                image["image_url"],
                image.get("image_alt", ""),
                image.get("order", position),
                ts,
            ),
        )
    conn.commit()
    return property_id


def soft_delete_property(conn: sqlite3.Connection, property_id: str) -> bool:
    """Mark a property deleted; it disappears from every read."""
    cursor = conn.execute(
        "UPDATE properties SET is_deleted = 1, updated_at = ? WHERE id = ? AND is_deleted = 0",
        (now_iso(), property_id),
    )
    conn.commit()
    return cursor.rowcount > 0


def get_filter_options() -> Dict[str, List[str]]:
    """Distinct locations, types, features and amenities in the live catalog."""
    with get_db_connection() as conn:
        options: Dict[str, List[str]] = {}
        for key, column in (("locations", "location"), ("property_types", "property_type")):
            rows = conn.execute(
                f"SELECT DISTINCT {column} FROM properties WHERE is_deleted = 0 ORDER BY {column}"
            ).fetchall()
            options[key] = [row[0] for row in rows if row[0]]

        for column in ("features", "amenities"):
            rows = conn.execute(
                f"SELECT DISTINCT json_each.value FROM properties, json_each(properties.{column}) "
                f"WHERE properties.is_deleted = 0 ORDER BY json_each.value"
            ).fetchall()
            options[column] = [row[0] for row in rows]
        return options
