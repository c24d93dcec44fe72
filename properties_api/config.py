"""
API configuration and settings management.
"""
import os


class Config:
    """Application configuration."""

    # Database
    DB_PATH: str = os.getenv("PROPERTIES_DB", "./data/db/properties.db")

    # Server
    HOST: str = os.getenv("API_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("API_PORT", "8000"))
    RELOAD: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    # API settings
    API_TITLE: str = "Properties API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "REST API for property listings, search and price statistics"

    # CORS settings
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["GET"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # Pagination defaults
    DEFAULT_API_LIMIT: int = 6
    MAX_API_LIMIT: int = 500
    DEFAULT_SIMILAR_LIMIT: int = 3
    MAX_SIMILAR_LIMIT: int = 24
    EXPORT_LIMIT: int = 10000

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "api.log")

    def validate(self) -> None:
        """Validate configuration on startup."""
        if not os.path.exists(self.DB_PATH):
            raise FileNotFoundError(f"Database file not found: {self.DB_PATH}")

# Global config instance
config = Config()
