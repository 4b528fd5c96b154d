"""
Approximate locations used when geocoding is unavailable.

The table maps lowercase country names and common aliases to a rough
geographic center. It is consulted only after the geocoding provider has
failed or returned nothing.
"""

import logging
import random
from typing import Optional

from .jitter import clamp_coordinates
from .models import GeoPoint, ResolvedLocation, ResolutionSource

logger = logging.getLogger(__name__)


COUNTRY_FALLBACK_CONFIDENCE = 0.3
RANDOM_FALLBACK_CONFIDENCE = 0.1

# Random points avoid the polar regions
RANDOM_LATITUDE_LIMIT = 70.0

_UNITED_STATES = GeoPoint(longitude=-98.5795, latitude=39.8283)
_UNITED_KINGDOM = GeoPoint(longitude=-3.4360, latitude=55.3781)
_NETHERLANDS = GeoPoint(longitude=5.2913, latitude=52.1326)

COUNTRY_CENTERS: dict[str, GeoPoint] = {
    "united states": _UNITED_STATES,
    "united states of america": _UNITED_STATES,
    "usa": _UNITED_STATES,
    "us": _UNITED_STATES,
    "canada": GeoPoint(longitude=-106.3468, latitude=56.1304),
    "united kingdom": _UNITED_KINGDOM,
    "uk": _UNITED_KINGDOM,
    "great britain": _UNITED_KINGDOM,
    "australia": GeoPoint(longitude=133.7751, latitude=-25.2744),
    "germany": GeoPoint(longitude=10.4515, latitude=51.1657),
    "france": GeoPoint(longitude=2.2137, latitude=46.2276),
    "india": GeoPoint(longitude=78.9629, latitude=20.5937),
    "brazil": GeoPoint(longitude=-51.9253, latitude=-14.2350),
    "japan": GeoPoint(longitude=138.2529, latitude=36.2048),
    "mexico": GeoPoint(longitude=-102.5528, latitude=23.6345),
    "spain": GeoPoint(longitude=-3.7492, latitude=40.4637),
    "italy": GeoPoint(longitude=12.5674, latitude=41.8719),
    "netherlands": _NETHERLANDS,
    "the netherlands": _NETHERLANDS,
    "south africa": GeoPoint(longitude=22.9375, latitude=-30.5595),
    "new zealand": GeoPoint(longitude=174.8860, latitude=-40.9006),
    "pakistan": GeoPoint(longitude=69.3451, latitude=30.3753),
}


def lookup_country_center(country: Optional[str]) -> Optional[GeoPoint]:
    """
    Find the approximate center of a country.

    Matching is case-insensitive and ignores surrounding whitespace.
    """
    if not country:
        return None
    return COUNTRY_CENTERS.get(country.strip().lower())


def fallback_location(
    country: Optional[str],
    spread: float = 5.0,
    rng: Optional[random.Random] = None,
) -> ResolvedLocation:
    """
    Approximate a location from the country alone.

    Known countries resolve to their center plus a uniform offset of
    ``spread / 2`` degrees on each axis. Anything else resolves to a random
    point on the map.

    Args:
        country: Country name as typed by the visitor
        spread: Total width of the random offset box, in degrees
        rng: Random source

    Returns:
        ResolvedLocation flagged as a fallback
    """
    rng = rng or random
    center = lookup_country_center(country)

    if center is not None:
        logger.info(f"Using fallback coordinates for {country}")
        longitude, latitude = clamp_coordinates(
            center.longitude + (rng.random() - 0.5) * spread,
            center.latitude + (rng.random() - 0.5) * spread,
        )
        return ResolvedLocation(
            longitude=longitude,
            latitude=latitude,
            confidence=COUNTRY_FALLBACK_CONFIDENCE,
            source=ResolutionSource.COUNTRY_FALLBACK,
            is_fallback=True,
        )

    logger.warning(f"No fallback center for country {country!r}, using random position")
    return ResolvedLocation(
        longitude=rng.random() * 360 - 180,
        latitude=rng.random() * 2 * RANDOM_LATITUDE_LIMIT - RANDOM_LATITUDE_LIMIT,
        confidence=RANDOM_FALLBACK_CONFIDENCE,
        source=ResolutionSource.RANDOM_FALLBACK,
        is_fallback=True,
    )
