"""
Locations module.

Turns visitor location input into jittered map coordinates.

Public API:
- ILocationResolver: Interface for location resolution
- LocationResolver: Mapbox-backed implementation with fallbacks
- LocationQuery: City/country or coordinate query
- ResolvedLocation: Resolution result
"""

from .interfaces import IGeocoder, ILocationResolver
from .models import (
    GeoPoint,
    GeocodeMatch,
    LocationQuery,
    ResolvedLocation,
    ResolutionSource,
)
from .exceptions import InvalidCoordinatesError, GeocodingUnavailableError
from .jitter import jitter, clamp_coordinates
from .fallback import COUNTRY_CENTERS, fallback_location, lookup_country_center
from .geocoder import MapboxGeocoder
from .service import LocationResolver, create_location_resolver, parse_coordinates

__all__ = [
    # Interfaces
    "IGeocoder",
    "ILocationResolver",
    # Models
    "GeoPoint",
    "GeocodeMatch",
    "LocationQuery",
    "ResolvedLocation",
    "ResolutionSource",
    # Exceptions
    "InvalidCoordinatesError",
    "GeocodingUnavailableError",
    # Implementation
    "jitter",
    "clamp_coordinates",
    "COUNTRY_CENTERS",
    "fallback_location",
    "lookup_country_center",
    "MapboxGeocoder",
    "LocationResolver",
    "create_location_resolver",
    "parse_coordinates",
]
