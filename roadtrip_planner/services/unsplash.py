from __future__ import annotations

import logging

import httpx

from roadtrip_planner.models import TripItinerary

logger = logging.getLogger(__name__)

DEFAULT_BANNER_URL = (
    "https://images.unsplash.com/photo-1469854523086-cc02fe5d8800"
    "?ixlib=rb-4.0.3&auto=format&fit=crop&w=2021&q=80"
)


def banner_query(itinerary: TripItinerary) -> str:
    """Image search term for the trip header."""
    if itinerary.start_location:
        return f"{itinerary.start_location.name} landscape road"
    return "road trip landscape"


class UnsplashService:
    """Service for fetching trip banner images from the Unsplash API."""

    BASE_URL = "https://api.unsplash.com"

    def __init__(self, access_key: str, transport: httpx.BaseTransport | None = None):
        self.access_key = access_key
        self._transport = transport

    def search_photo(
        self, query: str, orientation: str = "landscape"
    ) -> dict | None:
        """
        Search for a photo on Unsplash.

        Args:
            query: Search query (e.g., "Seattle landscape road")
            orientation: Photo orientation (landscape, portrait, squarish)

        Returns:
            Photo data dict or None if not found
        """
        try:
            with httpx.Client(transport=self._transport) as client:
                response = client.get(
                    f"{self.BASE_URL}/search/photos",
                    params={
                        "query": query,
                        "orientation": orientation,
                        "per_page": 1,
                    },
                    headers={"Authorization": f"Client-ID {self.access_key}"},
                    timeout=10.0,
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Unsplash search for %r failed: %s", query, e)
            return None

        results = data.get("results") or []
        return results[0] if results else None

    def banner_url(self, query: str) -> str:
        """Regular-size photo URL for the query, or the default banner."""
        if not self.access_key:
            return DEFAULT_BANNER_URL
        photo = self.search_photo(query)
        if photo is None:
            return DEFAULT_BANNER_URL
        return photo.get("urls", {}).get("regular") or DEFAULT_BANNER_URL
