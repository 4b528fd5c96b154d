"""
Mapbox geocoding client.

One forward-geocoding request per query, restricted to place, locality
and region results and limited to a single feature. Every failure mode
(missing token, timeout, HTTP error, malformed body) is reported as
GeocodingUnavailableError so the resolver can fall back.
"""

import logging
import math
from typing import Any, Optional
from urllib.parse import quote

import httpx

from .exceptions import GeocodingUnavailableError
from .models import GeocodeMatch

logger = logging.getLogger(__name__)


class MapboxGeocoder:
    """
    Geocoding provider backed by the Mapbox Geocoding API (v5).

    API Endpoint: https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json
    The response is a GeoJSON FeatureCollection; each feature has a
    ``center`` of [longitude, latitude] and a ``relevance`` in [0, 1].
    """

    DEFAULT_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"

    def __init__(
        self,
        access_token: str,
        base_url: Optional[str] = None,
        timeout: float = 5.0,
        types: str = "place,locality,region",
    ):
        """
        Initialize the geocoder.

        Args:
            access_token: Mapbox access token. Empty disables the provider.
            base_url: Override for the places endpoint
            timeout: Seconds before the request is abandoned
            types: Mapbox feature types to match
        """
        self._access_token = access_token
        self._base_url = (base_url or self.DEFAULT_URL).rstrip("/")
        self._timeout = timeout
        self._types = types

    @property
    def is_configured(self) -> bool:
        """Check if a Mapbox access token is configured."""
        return bool(self._access_token)

    async def geocode(self, search_text: str) -> Optional[GeocodeMatch]:
        """
        Forward-geocode a free-text place.

        Args:
            search_text: e.g. "Paris, France"

        Returns:
            The best match, or None when the provider found nothing

        Raises:
            GeocodingUnavailableError: If the provider could not be queried
        """
        if not self.is_configured:
            raise GeocodingUnavailableError("Mapbox access token not configured")

        logger.info(f"Geocoding: {search_text}")
        url = f"{self._base_url}/{quote(search_text, safe='')}.json"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    url,
                    params={
                        "access_token": self._access_token,
                        "types": self._types,
                        "limit": 1,
                    },
                    timeout=self._timeout,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise GeocodingUnavailableError("Geocoding request timed out", str(e))
        except httpx.HTTPError as e:
            raise GeocodingUnavailableError("Geocoding request failed", str(e))
        except ValueError as e:
            raise GeocodingUnavailableError("Geocoding response was not JSON", str(e))

        return self._parse_match(data)

    def _parse_match(self, data: Any) -> Optional[GeocodeMatch]:
        """
        Pick the first feature from a Mapbox response.

        Raises:
            GeocodingUnavailableError: If the body does not have the
                FeatureCollection shape or the center is not a valid position
        """
        if not isinstance(data, dict):
            raise GeocodingUnavailableError("Geocoding response was not an object")
        features = data.get("features") or []
        if not features:
            return None

        try:
            feature = features[0]
            center = feature.get("center") or []
            if len(center) != 2:
                raise GeocodingUnavailableError("Geocoding response had no usable center")
            longitude, latitude = float(center[0]), float(center[1])
            relevance = feature.get("relevance")
            relevance = 1.0 if relevance is None else float(relevance)
            place_name = feature.get("place_name")
        except (ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
            raise GeocodingUnavailableError("Geocoding response was malformed", repr(e))

        if not all(math.isfinite(v) for v in (longitude, latitude, relevance)):
            raise GeocodingUnavailableError("Geocoding response had a non-finite value")
        if not (-180 <= longitude <= 180) or not (-90 <= latitude <= 90):
            raise GeocodingUnavailableError(
                f"Geocoding response center out of range: [{longitude}, {latitude}]"
            )

        return GeocodeMatch(
            longitude=longitude,
            latitude=latitude,
            relevance=relevance,
            place_name=place_name if isinstance(place_name, str) else None,
        )
