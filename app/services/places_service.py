"""Google Places search service for cafe autocomplete."""

import logging
from typing import Any

import httpx

from app.core.config import settings
from app.core.errors import ServiceError, UpstreamServiceError

logger = logging.getLogger(__name__)

# Places statuses that mean "request worked"
_OK_STATUSES = {"OK", "ZERO_RESULTS"}


class PlacesNotConfiguredError(ServiceError):
    """GOOGLE_PLACES_API_KEY is not set."""


class PlacesService:
    """Service to interact with the Google Places API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Places service."""
        self.transport = transport
        self.api_key = api_key if api_key is not None else settings.GOOGLE_PLACES_API_KEY
        self.base_url = base_url or settings.GOOGLE_PLACES_BASE_URL
        self.timeout = 10.0

    @staticmethod
    def parse_place(place: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": place.get("name", ""),
            "formatted_address": place.get("formatted_address", ""),
            "place_id": place.get("place_id"),
        }

    async def search_cafes(self, query: str) -> list[dict[str, Any]]:
        """
        Search cafes matching free-text input.

        Args:
            query: Text typed by the user

        Returns:
            List of places with name, formatted_address and place_id

        Raises:
            PlacesNotConfiguredError: If no API key is configured
            UpstreamServiceError: If Google returns an error
        """
        if not self.api_key:
            raise PlacesNotConfiguredError("Places API is not configured")

        url = f"{self.base_url}/textsearch/json"
        params = {"query": query, "type": "cafe", "key": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Places HTTP error %s: %s", e.response.status_code, e.response.text)
            raise UpstreamServiceError("Places API request failed") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error calling Places API: %s", e)
            raise UpstreamServiceError("Places API request failed") from e

        status = data.get("status", "OK")
        if status not in _OK_STATUSES:
            logger.error("Places API returned %s: %s", status, data.get("error_message"))
            raise UpstreamServiceError(f"Places API returned {status}")

        return [self.parse_place(place) for place in data.get("results", [])]
