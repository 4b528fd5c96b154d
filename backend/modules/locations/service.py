"""
Location resolver implementation.

Resolution order for place queries:
1. Mapbox geocoding (larger jitter, provider relevance as confidence)
2. Country center table (plus or minus half the fallback spread, confidence 0.3)
3. Random point (confidence 0.1)
"""

import logging
import math
import random
from typing import Optional

from shared.config import Settings, get_settings

from .exceptions import GeocodingUnavailableError, InvalidCoordinatesError
from .fallback import fallback_location
from .geocoder import MapboxGeocoder
from .interfaces import IGeocoder, ILocationResolver
from .jitter import clamp_coordinates, jitter
from .models import GeocodeMatch, LocationQuery, ResolvedLocation, ResolutionSource

logger = logging.getLogger(__name__)


def parse_coordinates(latitude: object, longitude: object) -> tuple[float, float]:
    """
    Convert raw latitude/longitude input to floats and check their ranges.

    Accepts numbers or numeric strings (webhooks often send strings).

    Returns:
        (latitude, longitude)

    Raises:
        InvalidCoordinatesError: If a value is missing, not numeric or out of range
    """
    if latitude is None or longitude is None or latitude == "" or longitude == "":
        raise InvalidCoordinatesError(latitude, longitude, "Latitude and longitude are required")

    try:
        lat = float(latitude)  # type: ignore[arg-type]
        lng = float(longitude)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise InvalidCoordinatesError(latitude, longitude, "Invalid coordinates provided")

    if math.isnan(lat) or math.isnan(lng) or math.isinf(lat) or math.isinf(lng):
        raise InvalidCoordinatesError(latitude, longitude, "Invalid coordinates provided")

    if not (-90 <= lat <= 90) or not (-180 <= lng <= 180):
        raise InvalidCoordinatesError(latitude, longitude, "Coordinates out of valid range")

    return lat, lng


class LocationResolver(ILocationResolver):
    """
    Resolves location queries to privacy-safe map coordinates.

    Implements ILocationResolver. Holds no cache: identical queries call
    the provider again.
    """

    def __init__(
        self,
        geocoder: IGeocoder,
        coordinate_jitter_radius: float = 0.005,
        geocoded_jitter_radius: float = 0.008,
        fallback_spread: float = 5.0,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the resolver.

        Args:
            geocoder: External geocoding provider
            coordinate_jitter_radius: Jitter for GPS/manual coordinates (degrees)
            geocoded_jitter_radius: Jitter for city-level matches (degrees)
            fallback_spread: Width of the country fallback offset box (degrees)
            rng: Random source shared by jitter and fallback
        """
        self._geocoder = geocoder
        self._coordinate_jitter = coordinate_jitter_radius
        self._geocoded_jitter = geocoded_jitter_radius
        self._fallback_spread = fallback_spread
        self._rng = rng or random.Random()

    async def resolve(
        self,
        query: LocationQuery,
        apply_jitter: bool = True,
    ) -> ResolvedLocation:
        """Resolve a coordinate or place query."""
        if query.is_coordinates:
            return self.resolve_coordinates(query.latitude, query.longitude, apply_jitter)

        search_text = query.search_text()
        match = await self._geocode_or_none(search_text)

        if match is None:
            return fallback_location(query.country, self._fallback_spread, self._rng)

        longitude, latitude = match.longitude, match.latitude
        if apply_jitter:
            longitude, latitude = jitter(longitude, latitude, self._geocoded_jitter, self._rng)
        longitude, latitude = clamp_coordinates(longitude, latitude)

        logger.info(f"Found coordinates for {search_text}: [{longitude:.4f}, {latitude:.4f}]")
        return ResolvedLocation(
            longitude=longitude,
            latitude=latitude,
            confidence=min(1.0, max(0.0, match.relevance)),
            source=ResolutionSource.GEOCODER,
        )

    def resolve_coordinates(
        self,
        latitude: object,
        longitude: object,
        apply_jitter: bool = True,
    ) -> ResolvedLocation:
        """Validate direct coordinates and apply the small jitter."""
        lat, lng = parse_coordinates(latitude, longitude)

        if apply_jitter:
            lng, lat = jitter(lng, lat, self._coordinate_jitter, self._rng)
            lng, lat = clamp_coordinates(lng, lat)

        return ResolvedLocation(
            longitude=lng,
            latitude=lat,
            confidence=1.0,
            source=ResolutionSource.COORDINATES,
        )

    async def _geocode_or_none(self, search_text: str) -> Optional[GeocodeMatch]:
        """
        Query the provider, turning unavailability into "no match".

        This is the only place a GeocodingUnavailableError is handled.
        """
        try:
            match = await self._geocoder.geocode(search_text)
        except GeocodingUnavailableError as e:
            logger.warning(f"Geocoding unavailable for {search_text}: {e.message}")
            return None

        if match is None:
            logger.warning(f"No geocoding results for: {search_text}")
        return match


def create_location_resolver(
    settings: Optional[Settings] = None,
    rng: Optional[random.Random] = None,
) -> LocationResolver:
    """Build a resolver wired to Mapbox using application settings."""
    settings = settings or get_settings()
    geocoder = MapboxGeocoder(
        access_token=settings.mapbox_access_token,
        base_url=settings.mapbox_geocoding_url,
        timeout=settings.geocoding_timeout_seconds,
        types=settings.geocoding_types,
    )
    return LocationResolver(
        geocoder=geocoder,
        coordinate_jitter_radius=settings.coordinate_jitter_radius,
        geocoded_jitter_radius=settings.geocoded_jitter_radius,
        fallback_spread=settings.fallback_spread_degrees,
        rng=rng,
    )
