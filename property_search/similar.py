"""
Similar properties for a property detail view.
"""
import logging
from typing import List, Optional, Sequence

from .client import PropertiesAPIError
from .config import config
from .models import Property

logger = logging.getLogger(__name__)


def should_display(items: Sequence[Property]) -> bool:
    """The similar-properties section is hidden when there is nothing to show."""
    return len(items) > 0


class SimilarItemsResolver:
    """Looks up related properties, never returning the source property."""

    def __init__(self, client):
        self.client = client
        self.error: Optional[str] = None

    async def find_similar(self, property_id: str, count: int = config.SIMILAR_COUNT) -> List[Property]:
        """
        Up to ``count`` properties related to ``property_id``.

        Fewer are returned when fewer exist; failures yield an empty list and
        set ``error``.
        """
        self.error = None
        try:
            # one extra in case the backend hands the source property back
            page = await self.client.get_similar(property_id, count + 1)
        except PropertiesAPIError as e:
            logger.error(f"Error fetching similar properties for {property_id}: {e.message}")
            self.error = e.message
            return []

        similar = [item for item in page.items if item.id != str(property_id)]
        return similar[:count]
