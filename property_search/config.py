"""
Client configuration and settings management.
"""
import os


class Config:
    """Property search client configuration."""

    # Properties API
    API_BASE_URL: str = os.getenv("PROPERTIES_API_URL", "http://localhost:8000")
    REQUEST_TIMEOUT: float = float(os.getenv("PROPERTIES_API_TIMEOUT", "20"))

    # Listing view
    PAGE_SIZE: int = 6
    SIMILAR_COUNT: int = 3

    # Price bounds used when the catalog cannot be read
    DEFAULT_MIN_PRICE: int = 0
    DEFAULT_MAX_PRICE: int = 20_000_000

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Global config instance
config = Config()
