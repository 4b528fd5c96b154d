"""
Locations module data models.

A location query comes in one of two shapes: free text (city, optional
state, country) or explicit coordinates. Resolution always produces a
ResolvedLocation, even when the geocoding provider is unavailable.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class ResolutionSource(str, Enum):
    """Where a resolved coordinate came from."""

    COORDINATES = "coordinates"          # GPS or manual numeric entry
    GEOCODER = "geocoder"                # Positive match from the provider
    COUNTRY_FALLBACK = "country_fallback"  # Approximate country center
    RANDOM_FALLBACK = "random_fallback"  # Unknown country, random point


class GeoPoint(BaseModel):
    """A longitude/latitude pair in degrees."""

    longitude: float = Field(..., ge=-180, le=180, description="Longitude")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude")

    def as_geojson(self) -> list[float]:
        """GeoJSON position order: [longitude, latitude]."""
        return [self.longitude, self.latitude]


class LocationQuery(BaseModel):
    """
    A single location to resolve.

    Exactly one shape per request: either city + country (state optional)
    or latitude + longitude (display_name optional).
    """

    city: Optional[str] = Field(None, description="City name")
    state: Optional[str] = Field(None, description="State or province")
    country: Optional[str] = Field(None, description="Country name")
    latitude: Optional[float] = Field(None, description="Latitude for coordinate queries")
    longitude: Optional[float] = Field(None, description="Longitude for coordinate queries")
    display_name: Optional[str] = Field(None, description="Label for coordinate queries")

    @model_validator(mode="after")
    def check_single_shape(self) -> "LocationQuery":
        has_coordinates = self.latitude is not None or self.longitude is not None
        has_place = bool(self.city or self.country)
        if has_coordinates and has_place:
            raise ValueError("Provide either coordinates or city/country, not both")
        if has_coordinates and (self.latitude is None or self.longitude is None):
            raise ValueError("Both latitude and longitude are required")
        if not has_coordinates and not (self.city and self.country):
            raise ValueError("City and country are required when not using coordinates")
        return self

    @property
    def is_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def search_text(self) -> str:
        """Build the provider search string: "city[, state], country"."""
        parts = [self.city or ""]
        if self.state:
            parts.append(self.state)
        parts.append(self.country or "")
        return ", ".join(part.strip() for part in parts)


class GeocodeMatch(BaseModel):
    """A positive match from the geocoding provider (before jitter)."""

    longitude: float
    latitude: float
    relevance: float = Field(default=1.0, description="Provider relevance score")
    place_name: Optional[str] = None


class ResolvedLocation(BaseModel):
    """Final, jittered coordinate for a pin."""

    longitude: float = Field(..., ge=-180, le=180)
    latitude: float = Field(..., ge=-90, le=90)
    confidence: float = Field(..., ge=0, le=1, description="0.1 random .. 1.0 exact")
    source: ResolutionSource
    is_fallback: bool = Field(default=False)

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(longitude=self.longitude, latitude=self.latitude)
