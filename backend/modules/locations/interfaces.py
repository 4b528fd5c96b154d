"""
Locations module interface.

Other modules depend on ILocationResolver to turn a visitor's location
input into map coordinates. The resolver never fails because the geocoding
provider is down; it only rejects malformed coordinate input.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import GeocodeMatch, LocationQuery, ResolvedLocation


@runtime_checkable
class IGeocoder(Protocol):
    """
    Interface for an external geocoding provider.
    """

    @property
    def is_configured(self) -> bool:
        """Whether the provider has the credentials it needs."""
        ...

    async def geocode(self, search_text: str) -> Optional[GeocodeMatch]:
        """
        Forward-geocode a free-text place.

        Returns:
            The best match, or None when nothing matched

        Raises:
            GeocodingUnavailableError: If the provider could not be queried
        """
        ...


@runtime_checkable
class ILocationResolver(Protocol):
    """
    Interface for location resolution.
    """

    async def resolve(
        self,
        query: LocationQuery,
        apply_jitter: bool = True,
    ) -> ResolvedLocation:
        """
        Resolve a query to a single jittered coordinate.

        Coordinate queries are validated and jittered without any network
        call. Place queries are geocoded; on no match or any provider
        failure the country fallback table is used, and failing that a
        random point.

        Args:
            query: City/state/country or latitude/longitude
            apply_jitter: Whether to offset geocoded results

        Returns:
            ResolvedLocation (is_fallback set when the provider was not used)

        Raises:
            InvalidCoordinatesError: If a coordinate query is out of range
        """
        ...

    def resolve_coordinates(
        self,
        latitude: object,
        longitude: object,
        apply_jitter: bool = True,
    ) -> ResolvedLocation:
        """
        Validate raw coordinate input and apply the small jitter.

        Raises:
            InvalidCoordinatesError: If either value is not a number in range
        """
        ...
