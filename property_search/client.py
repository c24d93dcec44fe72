"""
Async HTTP client for the Properties API.
"""
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from .config import config
from .models import Property, ResultPage

logger = logging.getLogger(__name__)


class PropertiesAPIError(Exception):
    """Raised when the Properties API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PropertiesClient:
    """
    Thin wrapper over ``httpx.AsyncClient`` for the listing, price-range and
    similar-properties endpoints.

    Pass ``client`` to reuse an existing ``httpx.AsyncClient`` (tests hand in
    one bound to an ASGI transport); otherwise one is created and owned.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or config.API_BASE_URL,
            timeout=timeout or config.REQUEST_TIMEOUT,
        )

    async def __aenter__(self) -> "PropertiesClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, path: str, params: Optional[Mapping[str, Any]], what: str) -> Dict[str, Any]:
        try:
            response = await self._client.get(path, params=dict(params or {}))
        except httpx.HTTPError as e:
            logger.error(f"Request to {path} failed: {e}")
            raise PropertiesAPIError(f"Failed to fetch {what}: {e}") from e

        if response.status_code != 200:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("detail") if isinstance(body, dict) else None
            message = detail if isinstance(detail, str) else f"Failed to fetch {what}"
            logger.error(f"{path} answered {response.status_code}: {message}")
            raise PropertiesAPIError(message, response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise PropertiesAPIError(f"Invalid response while fetching {what}", response.status_code) from e

        if not isinstance(payload, dict):
            logger.error(f"{path} answered with a non-object body: {type(payload).__name__}")
            raise PropertiesAPIError(f"Invalid response while fetching {what}", response.status_code)
        return payload

    def _adapt(self, adapter, payload: Any, what: str):
        """Run a model adapter, reporting malformed records as PropertiesAPIError."""
        try:
            return adapter(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed {what} payload: {e!r}")
            raise PropertiesAPIError(f"Invalid response while fetching {what}") from e

    async def list_properties(self, params: Mapping[str, Any]) -> ResultPage:
        """Query the listing endpoint with already-built query parameters."""
        payload = await self._get("/api/properties", params, "properties")
        return self._adapt(ResultPage.from_api, payload, "properties")

    async def get_property(self, property_id: str) -> Property:
        payload = await self._get(f"/api/properties/{property_id}", None, "property")
        return self._adapt(lambda p: Property.from_api(p["data"]), payload, "property")

    async def get_price_range(self) -> Dict[str, Any]:
        """Raw ``{min_price, max_price, total_properties}`` of the catalog."""
        return await self._get("/api/properties/price-range", None, "price range")

    async def get_similar(self, property_id: str, limit: int) -> ResultPage:
        payload = await self._get(
            "/api/properties/similar",
            {"current_property_id": property_id, "limit": limit},
            "similar properties",
        )
        return self._adapt(ResultPage.from_api, payload, "similar properties")
