"""
Locations module exceptions.
"""

from typing import Optional

from shared.exceptions import ValidationError, ExternalServiceError


class InvalidCoordinatesError(ValidationError):
    """Raised when a coordinate query is out of range or not numeric."""

    def __init__(self, latitude: object, longitude: object, reason: str):
        super().__init__(
            f"Invalid coordinates: {reason}",
            code="INVALID_COORDINATES",
            details={
                "latitude": latitude,
                "longitude": longitude,
                "fields": [{"field": "coordinates", "message": reason}],
            },
        )


class GeocodingUnavailableError(ExternalServiceError):
    """
    Raised by the geocoder when the provider cannot answer.

    Covers timeouts, quota errors, network failures and missing
    configuration. The resolver always recovers from this error.
    """

    def __init__(self, message: str, original_error: Optional[str] = None):
        super().__init__(
            message,
            service="mapbox",
            code="GEOCODING_UNAVAILABLE",
            details={"original_error": original_error} if original_error else {},
        )
