"""
Route package initialization.
"""
from .properties import router as properties_router
from .stats import router as stats_router

__all__ = ["properties_router", "stats_router"]
